"""
Health Check Routes
===================

Liveness probe for the bridge. Reports engine load alongside the status so
a host can see how many stream requests are outstanding.
"""

from fastapi import APIRouter

from code_insight.application.api.dependencies import PanelDep, SessionDep, SettingsDep
from code_insight.application.api.models import HealthResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=HealthResponse)
async def health(session: SessionDep, panel: PanelDep, settings: SettingsDep):
    return HealthResponse(
        status="healthy",
        version=settings.app.APP_VERSION,
        environment=settings.app.ENVIRONMENT,
        current_file=session.current_key,
        outstanding_tasks=session.outstanding_tasks(),
        cached_files=len(session.cache),
        panel_subscribers=panel.subscriber_count,
    )
