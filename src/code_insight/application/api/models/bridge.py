"""
Bridge Request/Response Models

Pydantic schemas for the editor and panel routes. Inbound panel messages
reuse ``InboundMessage`` from the analysis layer.
"""

from pydantic import BaseModel, Field


class FilePathModel(BaseModel):
    """Editor notification naming one file."""

    path: str = Field(..., min_length=1, description="File path as the editor reports it")


class OpenPanelModel(BaseModel):
    """Panel open request; without a path the panel shows its empty state."""

    path: str | None = Field(default=None, min_length=1, description="Active file, if any")


class AcceptedResponse(BaseModel):
    accepted: bool = True
    command: str


class HealthResponse(BaseModel):
    """
    Liveness plus a snapshot of engine load.
    """

    status: str
    version: str
    environment: str
    current_file: str | None = None
    outstanding_tasks: int
    cached_files: int
    panel_subscribers: int
