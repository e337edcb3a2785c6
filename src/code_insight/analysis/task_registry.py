#!/usr/bin/env python3
"""
Task Registry

Tracks the outstanding stream request for every (file, tab) pair and
enforces the global concurrency ceiling across files.

Architectural Decision: registry holds only outstanding handles
- A handle is removed the moment its request settles or is cancelled
- A file's entry disappears with its last handle, so eviction never
  targets a file whose tasks have all finished
- Eviction order is the insertion order of the per-file entry (FIFO
  across files, not LRU over tabs)

Author: System Architect
Date: 2026-03-05
"""

import asyncio
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from code_insight.core.config.constants import Stage
from code_insight.core.logging import get_logger, log_stage
from code_insight.llm_stream.cancellation import CancellationToken

logger = get_logger(__name__)


@dataclass(eq=False)
class TaskHandle:
    """
    One outstanding request for a (file, tab) pair.

    Attributes:
        file_key: Canonical file key
        tab_key: Tab key
        token: Cancellation token passed to the stream client
        is_finished: Set once the request has settled
        task: The asyncio task running the request, once scheduled
    """

    file_key: str
    tab_key: str
    token: CancellationToken = field(default_factory=CancellationToken)
    is_finished: bool = False
    task: asyncio.Task | None = None

    @property
    def task_id(self) -> str:
        return f"{self.tab_key}@{self.file_key}"


class TaskRegistry:
    """
    Per-file map from tab key to its outstanding TaskHandle.

    STAGE-3: Task admission and eviction

    Invariant: at most one handle per (file, tab) pair at any instant.
    """

    def __init__(self) -> None:
        self._files: OrderedDict[str, dict[str, TaskHandle]] = OrderedDict()

    def admit(
        self,
        file_key: str,
        tab_key: str,
        ceiling: int,
        on_evict: Callable[[str], None] | None = None,
    ) -> TaskHandle:
        """
        Register a new handle for the pair.

        STAGE-3.0: Admission

        Cancels any existing handle for the same pair first, then evicts
        other files while the outstanding count is at or above the ceiling.

        Args:
            file_key: Canonical file key
            tab_key: Tab key
            ceiling: Global maximum of outstanding handles
            on_evict: Called with each evicted file key after its tasks are cancelled

        Returns:
            The new TaskHandle
        """
        self.cancel(file_key, tab_key)
        self._enforce_ceiling(file_key, ceiling, on_evict)

        handle = TaskHandle(file_key=file_key, tab_key=tab_key)
        self._files.setdefault(file_key, {})[tab_key] = handle

        log_stage(
            logger,
            Stage.TASK_ADMISSION,
            "Task admitted",
            level="debug",
            file_key=file_key,
            tab_key=tab_key,
            outstanding=self.outstanding_count(),
        )
        return handle

    def _enforce_ceiling(
        self,
        file_key: str,
        ceiling: int,
        on_evict: Callable[[str], None] | None,
    ) -> None:
        """
        STAGE-3.1: Global eviction

        Stops when under the ceiling or when only the requesting file has
        outstanding tasks; tasks per file are never capped.
        """
        while self.outstanding_count() >= ceiling:
            victim = next(
                (
                    key
                    for key, handles in self._files.items()
                    if key != file_key and any(not h.is_finished for h in handles.values())
                ),
                None,
            )
            if victim is None:
                break

            cancelled = self.cancel_all(victim)
            log_stage(
                logger,
                Stage.EVICTION,
                "Concurrency ceiling reached, evicting oldest file",
                file_key=victim,
                cancelled_tasks=len(cancelled),
                requesting_file=file_key,
                ceiling=ceiling,
            )
            if on_evict is not None:
                on_evict(victim)

    def cancel(self, file_key: str, tab_key: str) -> TaskHandle | None:
        """Cancel and remove the pair's handle. No-op if absent."""
        handles = self._files.get(file_key)
        if not handles:
            return None

        handle = handles.pop(tab_key, None)
        if not handles:
            del self._files[file_key]
        if handle is not None:
            handle.token.cancel()
        return handle

    def cancel_all(self, file_key: str) -> list[TaskHandle]:
        """Cancel every handle for the file and drop its entry."""
        handles = self._files.pop(file_key, {})
        for handle in handles.values():
            handle.token.cancel()
        return list(handles.values())

    def cancel_everything(self) -> list[TaskHandle]:
        """Cancel every outstanding handle across all files."""
        cancelled: list[TaskHandle] = []
        for file_key in list(self._files):
            cancelled.extend(self.cancel_all(file_key))
        return cancelled

    def finish(self, handle: TaskHandle) -> bool:
        """
        Mark a handle settled and remove it if it is still registered.

        Returns:
            True if this removed the file's last outstanding handle
        """
        handle.is_finished = True

        handles = self._files.get(handle.file_key)
        if not handles or handles.get(handle.tab_key) is not handle:
            return False

        del handles[handle.tab_key]
        if handles:
            return False
        del self._files[handle.file_key]
        return True

    def get(self, file_key: str, tab_key: str) -> TaskHandle | None:
        return self._files.get(file_key, {}).get(tab_key)

    def is_any_unfinished(self, file_key: str) -> bool:
        """True if the file has at least one unfinished handle."""
        return any(not h.is_finished for h in self._files.get(file_key, {}).values())

    def outstanding_count(self) -> int:
        """Unfinished handles across all files."""
        return sum(
            1 for handles in self._files.values() for h in handles.values() if not h.is_finished
        )

    def file_keys(self) -> list[str]:
        """Files with outstanding handles, oldest entry first."""
        return list(self._files)
