"""
Display Surface Protocol

The side panel the engine talks to. Outbound messages are posted
synchronously; delivery is the implementation's concern.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from code_insight.analysis.messages import PanelMessage


@runtime_checkable
class DisplaySurface(Protocol):
    """Sink for structured display messages."""

    def post(self, message: "PanelMessage") -> None:
        """Deliver one message. Must not block or suspend."""
        ...
