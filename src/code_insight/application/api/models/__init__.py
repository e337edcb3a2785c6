from code_insight.application.api.models.bridge import (
    AcceptedResponse,
    FilePathModel,
    HealthResponse,
    OpenPanelModel,
)

__all__ = [
    "AcceptedResponse",
    "FilePathModel",
    "HealthResponse",
    "OpenPanelModel",
]
