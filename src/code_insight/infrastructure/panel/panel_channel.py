#!/usr/bin/env python3
"""
Panel Channel

DisplaySurface that fans posted messages out to SSE subscribers.

STAGE-B: Panel bridge

Implementation Details:
- post() is synchronous and never suspends: each subscriber owns an
  unbounded asyncio.Queue and messages are put_nowait
- One visible panel is the normal case, but every connected subscriber
  receives every message posted after it subscribed
- The most recent messages are kept so tests and the health route can
  inspect what was last sent

Author: System Architect
Date: 2026-03-06
"""

import asyncio
from collections import deque
from collections.abc import AsyncGenerator

from code_insight.analysis.messages import PanelMessage
from code_insight.core.config.constants import Stage
from code_insight.core.logging import get_logger, log_stage

logger = get_logger(__name__)

_HISTORY_SIZE = 100


class PanelChannel:
    def __init__(self, history_size: int = _HISTORY_SIZE):
        self._subscribers: set[asyncio.Queue[PanelMessage | None]] = set()
        self._history: deque[PanelMessage] = deque(maxlen=history_size)
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def history(self) -> list[PanelMessage]:
        return list(self._history)

    def post(self, message: PanelMessage) -> None:
        self._history.append(message)
        for queue in self._subscribers:
            queue.put_nowait(message)

    async def subscribe(self) -> AsyncGenerator[PanelMessage, None]:
        """
        Yield every message posted from now on until the channel closes.

        Messages queued before close() are still delivered; subscribing to a
        closed channel yields nothing.
        """
        if self._closed:
            return

        queue: asyncio.Queue[PanelMessage | None] = asyncio.Queue()
        self._subscribers.add(queue)
        log_stage(logger, Stage.BRIDGE, "Panel subscribed", subscribers=len(self._subscribers))
        try:
            while True:
                message = await queue.get()
                if message is None:
                    break
                yield message
        finally:
            self._subscribers.discard(queue)
            log_stage(logger, Stage.BRIDGE, "Panel unsubscribed", subscribers=len(self._subscribers))

    def close(self) -> None:
        """End every subscription."""
        self._closed = True
        for queue in self._subscribers:
            queue.put_nowait(None)
