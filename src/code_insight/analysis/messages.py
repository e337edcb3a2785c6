"""
Panel Messages

Structured messages exchanged with the display surface.

Outbound messages are flat JSON objects: ``{"command": ..., **fields}``.
Inbound messages are validated before they reach the session controller.
"""

from copy import deepcopy
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from code_insight.core.config.constants import InboundCommand, PanelCommand

_TAB_COMMANDS = {
    InboundCommand.REQUEST_ANALYSIS,
    InboundCommand.CANCEL_REQUEST,
    InboundCommand.TOGGLE_DISABLE,
}


class PanelMessage(BaseModel):
    """
    Represents one outbound message to the display surface.
    """

    model_config = {"frozen": True}

    command: PanelCommand
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def copy_data(cls, v):
        """Snapshot the payload so later cache mutation never changes a queued message."""
        if isinstance(v, dict):
            return deepcopy(v)
        return v

    @classmethod
    def build(cls, command: PanelCommand, **data: Any) -> "PanelMessage":
        return cls(command=command, data=data)

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command.value, **self.data}

    def format(self) -> str:
        """Format as SSE protocol string."""
        payload = orjson.dumps(self.to_dict()).decode()
        return f"event: {self.command.value}\ndata: {payload}\n\n"


class InboundMessage(BaseModel):
    """
    Message sent by the display surface.

    ``fileName``, when present, overrides the current file as the target.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    command: InboundCommand
    tab_key: str | None = Field(default=None, alias="tabKey", min_length=1)
    disable: bool | None = None
    file_name: str | None = Field(default=None, alias="fileName", min_length=1)

    @model_validator(mode="after")
    def check_required_fields(self):
        if self.command in _TAB_COMMANDS and not self.tab_key:
            raise ValueError(f"'{self.command.value}' requires tabKey")
        if self.command is InboundCommand.TOGGLE_DISABLE and self.disable is None:
            raise ValueError("'toggleDisable' requires disable")
        return self
