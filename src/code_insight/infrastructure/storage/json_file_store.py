#!/usr/bin/env python3
"""
JSON File Store

Directory-backed key-value store: one file per key, written atomically.

STAGE-P: Persistence

Implementation Details:
- Values are opaque bytes (the result cache writes orjson payloads)
- Writes go to a temporary sibling and are moved into place with
  os.replace, so a crash mid-write never leaves a truncated file
- Keys map to ``<key>.json``; only [A-Za-z0-9_.-] are kept in file names

Author: System Architect
Date: 2026-03-06
"""

import os
import re
import tempfile
from pathlib import Path

from code_insight.core.config.constants import Stage
from code_insight.core.exceptions import PersistenceError
from code_insight.core.logging import get_logger, log_stage

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileStore:
    """
    Persistent KeyValueStore on the local file system.

    Usage:
        store = JsonFileStore(".code_insight")
        store.set("aiAnalysisCache", payload)
        payload = store.get("aiAnalysisCache")
    """

    def __init__(self, directory: str | os.PathLike):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError.from_exception(
                e, message=f"Cannot read store file for '{key}'", path=str(path)
            ) from e

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{path.stem}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError.from_exception(
                e, message=f"Cannot write store file for '{key}'", path=str(path)
            ) from e

        log_stage(logger, Stage.PERSISTENCE, "Store value written", level="debug", key=key, size=len(value))
