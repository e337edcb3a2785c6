"""
Cooperative Cancellation

A per-task cancellation token. Cancelling it flips a flag, runs registered
callbacks, and (while bound) cancels the asyncio task that is streaming,
which tears down the in-flight HTTP connection. The resulting
``CancelledError`` is turned into ``AbortError`` at the binding boundary so
callers can tell a deliberate cancellation from every other failure.

Author: System Architect
Date: 2026-03-04
"""

import asyncio
from collections.abc import Callable

from code_insight.core.exceptions import AbortError


class CancellationToken:
    """
    One-shot cancellation signal for a single stream request.

    Usage:
        token = CancellationToken()
        with token.bind():
            await do_network_io()   # raises AbortError once token.cancel() runs
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Cancel the token. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a callback to run on cancellation.

        Runs immediately if the token is already cancelled.

        Returns:
            A function that unregisters the callback
        """
        if self._cancelled:
            callback()
            return lambda: None

        self._callbacks.append(callback)

        def unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unregister

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            AbortError: If the token has been cancelled
        """
        if self._cancelled:
            raise AbortError("Request aborted")

    def bind(self) -> "TaskBinding":
        """Bind the token to the current asyncio task for the duration of a with-block."""
        return TaskBinding(self)


class TaskBinding:
    """
    Context manager tying a token to the running asyncio task.

    On enter: raises AbortError if already cancelled, otherwise arranges
    for ``token.cancel()`` to cancel the current task.
    On exit: unregisters, and converts the task's CancelledError into
    AbortError when the token caused it.
    """

    def __init__(self, token: CancellationToken) -> None:
        self._token = token
        self._task: asyncio.Task | None = None
        self._unregister: Callable[[], None] = lambda: None

    def __enter__(self) -> CancellationToken:
        self._token.raise_if_cancelled()
        self._task = asyncio.current_task()
        if self._task is not None:
            self._unregister = self._token.on_cancel(self._task.cancel)
        return self._token

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._unregister()
        if (
            exc_type is not None
            and issubclass(exc_type, asyncio.CancelledError)
            and self._token.is_cancelled
        ):
            if self._task is not None:
                self._task.uncancel()
            raise AbortError("Request aborted") from None
        return False
