"""
Unit Tests for the Panel Channel

Tests fan-out of posted messages to SSE subscribers.
"""

import asyncio

import pytest

from code_insight.analysis.messages import PanelMessage
from code_insight.core.config.constants import PanelCommand
from code_insight.infrastructure.panel.panel_channel import PanelChannel


async def _collect(channel: PanelChannel, into: list) -> None:
    async for message in channel.subscribe():
        into.append(message.command)


@pytest.mark.unit
class TestPanelChannel:
    """Test suite for PanelChannel."""

    def test_post_without_subscribers_keeps_history(self):
        channel = PanelChannel(history_size=2)

        channel.post(PanelMessage.build(PanelCommand.NO_FILE))
        channel.post(PanelMessage.build(PanelCommand.RESET))
        channel.post(PanelMessage.build(PanelCommand.THEME_CHANGED))

        assert [m.command for m in channel.history] == [PanelCommand.RESET, PanelCommand.THEME_CHANGED]

    async def test_every_subscriber_receives_messages_in_order(self):
        channel = PanelChannel()
        first, second = [], []
        tasks = [
            asyncio.create_task(_collect(channel, first)),
            asyncio.create_task(_collect(channel, second)),
        ]
        await asyncio.sleep(0)
        assert channel.subscriber_count == 2

        channel.post(PanelMessage.build(PanelCommand.RESET))
        channel.post(PanelMessage.build(PanelCommand.INIT_TABS))
        channel.close()
        await asyncio.gather(*tasks)

        assert first == second == [PanelCommand.RESET, PanelCommand.INIT_TABS]
        assert channel.subscriber_count == 0

    async def test_late_subscriber_misses_earlier_messages(self):
        channel = PanelChannel()
        channel.post(PanelMessage.build(PanelCommand.RESET))

        received = []
        task = asyncio.create_task(_collect(channel, received))
        await asyncio.sleep(0)
        channel.post(PanelMessage.build(PanelCommand.ANALYSIS_DONE))
        channel.close()
        await task

        assert received == [PanelCommand.ANALYSIS_DONE]

    async def test_messages_queued_before_close_reach_every_subscriber(self):
        channel = PanelChannel()
        received = [[], [], []]
        tasks = [asyncio.create_task(_collect(channel, into)) for into in received]
        await asyncio.sleep(0)

        channel.post(PanelMessage.build(PanelCommand.TAB_INTERRUPTED))
        channel.post(PanelMessage.build(PanelCommand.ANALYSIS_DONE))
        channel.post(PanelMessage.build(PanelCommand.NO_FILE))
        channel.close()
        await asyncio.gather(*tasks)

        expected = [PanelCommand.TAB_INTERRUPTED, PanelCommand.ANALYSIS_DONE, PanelCommand.NO_FILE]
        assert received == [expected, expected, expected]

    async def test_subscribe_after_close_yields_nothing(self):
        channel = PanelChannel()
        channel.close()

        received = []
        await asyncio.wait_for(_collect(channel, received), timeout=1)

        assert received == []
        assert channel.subscriber_count == 0
