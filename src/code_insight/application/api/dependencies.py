"""
FastAPI Dependency Injection
============================

Route handlers receive the application singletons (session controller,
panel channel, settings) through ``Depends()`` instead of importing
globals, so tests can install their own instances on ``app.state``.

Example:
    @router.post("/editor/file-saved")
    async def file_saved(body: FilePathModel, session: SessionDep):
        session.on_file_saved(body.path)
"""

from typing import Annotated

from fastapi import Depends, Request

from code_insight.analysis.session_controller import SessionController
from code_insight.core.config.settings import Settings, get_settings
from code_insight.infrastructure.panel.panel_channel import PanelChannel


def get_session(request: Request) -> SessionController:
    """
    Retrieve the SessionController from application state.

    The controller is created once in the lifespan manager and shared by
    every request.

    Raises:
        RuntimeError: If the lifespan startup did not run
    """
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise RuntimeError(
            "SessionController not initialized in app.state. "
            "This indicates the application lifespan startup didn't complete properly."
        )
    return session


def get_panel(request: Request) -> PanelChannel:
    """Retrieve the PanelChannel from application state."""
    panel = getattr(request.app.state, "panel", None)
    if panel is None:
        raise RuntimeError("PanelChannel not initialized in app.state.")
    return panel


def get_app_settings() -> Settings:
    return get_settings()


# ============================================================================
# TYPE ALIASES
# ============================================================================

SessionDep = Annotated[SessionController, Depends(get_session)]
PanelDep = Annotated[PanelChannel, Depends(get_panel)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
