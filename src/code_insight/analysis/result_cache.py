#!/usr/bin/env python3
"""
Result Cache

Per-file accumulated text, per-tab status, staleness and timestamp,
persisted as a whole through the external key-value store.

Persisted layout (orjson): an ordered list of ``[fileKey, result]`` pairs,
each result carrying ``data``, ``status``, ``timestamp`` and ``isStale``.

Author: System Architect
Date: 2026-03-05
"""

import orjson
from pydantic import ValidationError

from code_insight.analysis.models import AnalysisResult, now_ms
from code_insight.core.config.constants import STORE_KEY_RESULT_CACHE, Stage, TabStatus
from code_insight.core.exceptions import PersistenceError
from code_insight.core.interfaces import KeyValueStore
from code_insight.core.logging import get_logger, log_stage

logger = get_logger(__name__)


def serialize_entries(entries: dict[str, AnalysisResult]) -> bytes:
    """Encode entries in insertion order; generating tabs are written as interrupted."""
    return orjson.dumps([[file_key, result.to_persisted()] for file_key, result in entries.items()])


def deserialize_entries(raw: bytes) -> dict[str, AnalysisResult]:
    """
    Decode a persisted cache.

    Raises:
        PersistenceError: If the payload is not a list of [key, result] pairs
    """
    try:
        pairs = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise PersistenceError.from_exception(e, message="Persisted cache is not valid JSON") from e

    if not isinstance(pairs, list):
        raise PersistenceError(
            "Persisted cache has an unexpected shape",
            details={"type": type(pairs).__name__},
        )

    entries: dict[str, AnalysisResult] = {}
    for index, pair in enumerate(pairs):
        if not (isinstance(pair, list) and len(pair) == 2 and isinstance(pair[0], str)):
            raise PersistenceError("Malformed cache entry", details={"index": index})
        try:
            entries[pair[0]] = AnalysisResult.model_validate(pair[1])
        except ValidationError as e:
            raise PersistenceError.from_exception(
                e, message="Invalid cached analysis result", index=index
            ) from e
    return entries


class ResultCache:
    """
    File key → AnalysisResult.

    Every mutation is synchronous; recording against a file that has been
    evicted is a silent no-op so a late fragment never resurrects an entry.
    """

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self._entries: dict[str, AnalysisResult] = {}
        self._store = store

    def __contains__(self, file_key: str) -> bool:
        return file_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, file_key: str) -> AnalysisResult | None:
        return self._entries.get(file_key)

    def start_new(self, file_key: str) -> AnalysisResult:
        """Replace any existing entry with an empty one."""
        result = AnalysisResult(timestamp=now_ms())
        self._entries.pop(file_key, None)
        self._entries[file_key] = result
        return result

    def ensure(self, file_key: str) -> AnalysisResult:
        """Return the entry, creating an empty one if absent."""
        result = self._entries.get(file_key)
        if result is None:
            result = self.start_new(file_key)
        return result

    def begin_tab(self, file_key: str, tab_key: str) -> None:
        """Clear the tab's text and mark it generating."""
        result = self.ensure(file_key)
        result.data[tab_key] = ""
        result.status[tab_key] = TabStatus.GENERATING

    def record_chunk(self, file_key: str, tab_key: str, fragment: str) -> str | None:
        """
        Append a fragment to the tab's text.

        Returns:
            The cumulative text, or None if the file has no entry
        """
        result = self._entries.get(file_key)
        if result is None:
            return None
        text = result.data.get(tab_key, "") + fragment
        result.data[tab_key] = text
        result.status.setdefault(tab_key, TabStatus.GENERATING)
        return text

    def record_status(self, file_key: str, tab_key: str, status: TabStatus) -> None:
        """
        Transition a tab's status.

        Completion stamps the result and clears its stale flag.
        """
        result = self._entries.get(file_key)
        if result is None:
            return
        result.status[tab_key] = status
        if status is TabStatus.COMPLETED:
            result.timestamp = now_ms()
            result.is_stale = False

    def mark_stale(self, file_key: str) -> bool:
        """Flag the entry stale. Returns False if there is no entry."""
        result = self._entries.get(file_key)
        if result is None:
            return False
        result.is_stale = True
        return True

    def evict(self, file_key: str) -> AnalysisResult | None:
        return self._entries.pop(file_key, None)

    def serialize(self) -> bytes:
        return serialize_entries(self._entries)

    def load(self) -> int:
        """
        Replace the in-memory cache with the persisted one.

        STAGE-P.1: Cache load

        A corrupt or unreadable payload is logged and leaves the cache empty.

        Returns:
            Number of entries loaded
        """
        if self._store is None:
            return 0

        try:
            raw = self._store.get(STORE_KEY_RESULT_CACHE)
            entries = deserialize_entries(raw) if raw is not None else {}
        except PersistenceError as e:
            log_stage(
                logger,
                Stage.PERSISTENCE,
                "Discarding unreadable persisted cache",
                level="warning",
                error=e.message,
                details=e.details,
            )
            entries = {}

        self._entries = entries
        log_stage(logger, Stage.PERSISTENCE, "Cache loaded", entries=len(entries))
        return len(entries)

    def persist(self) -> None:
        """
        Write the full cache to the store.

        STAGE-P.2: Cache save
        """
        if self._store is None:
            return

        try:
            self._store.set(STORE_KEY_RESULT_CACHE, self.serialize())
        except PersistenceError as e:
            log_stage(
                logger,
                Stage.PERSISTENCE,
                "Failed to persist cache",
                level="error",
                error=e.message,
                details=e.details,
            )
            return

        log_stage(logger, Stage.PERSISTENCE, "Cache persisted", level="debug", entries=len(self._entries))
