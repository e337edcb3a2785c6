"""
Workspace Editor Adapter

EditorEnvironment backed by the local file system, for running the engine
as a service next to an editor that forwards its notifications over HTTP.
"""

import os
from pathlib import Path

from code_insight.core.config.constants import Stage
from code_insight.core.logging import get_logger, log_stage

logger = get_logger(__name__)


class WorkspaceEditor:
    """
    Reads files from disk relative to a workspace root.

    Undecodable bytes are replaced rather than failing the analysis.
    """

    def __init__(self, root: str | os.PathLike = "."):
        self._root = Path(root).expanduser().resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self._root / candidate
        return candidate

    def read_text(self, path: str) -> str:
        return self._resolve(path).read_text(encoding="utf-8", errors="replace")

    def relative_path(self, path: str) -> str:
        resolved = self._resolve(path).resolve()
        try:
            return resolved.relative_to(self._root).as_posix()
        except ValueError:
            return str(path)

    def reveal_in_file_system(self, path: str) -> None:
        # A headless service cannot open a file browser; the request is
        # recorded for the host to act on.
        log_stage(
            logger,
            Stage.EDITOR,
            "Reveal in file system requested",
            path=str(self._resolve(path)),
        )
