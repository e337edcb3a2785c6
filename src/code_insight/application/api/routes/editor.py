"""
Editor Routes
=============

Notifications forwarded by the host editor: the active file changed, a
file was saved, the color theme changed. Each maps one-to-one onto a
SessionController method and returns 202 immediately; any analysis work
they start runs in background tasks.
"""

from fastapi import APIRouter, status

from code_insight.application.api.dependencies import SessionDep
from code_insight.application.api.models import AcceptedResponse, FilePathModel

router = APIRouter(prefix="/editor", tags=["Editor"])


@router.post("/active-file", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def active_file_changed(body: FilePathModel, session: SessionDep):
    session.on_active_file_changed(body.path)
    return AcceptedResponse(command="activeFileChanged")


@router.post("/file-saved", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def file_saved(body: FilePathModel, session: SessionDep):
    """Marks the cached analysis stale; never regenerates."""
    session.on_file_saved(body.path)
    return AcceptedResponse(command="fileSaved")


@router.post("/theme-changed", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def theme_changed(session: SessionDep):
    session.on_theme_changed()
    return AcceptedResponse(command="themeChanged")
