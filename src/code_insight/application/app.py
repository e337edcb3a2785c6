#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Runs the analysis engine as a local service: the host editor forwards its
notifications over HTTP and the display panel consumes an SSE stream.

Author: System Architect
Date: 2026-03-07
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from code_insight.analysis.session_controller import SessionController
from code_insight.application.api.middleware.error_handler import add_error_handling_middleware
from code_insight.application.api.routes.editor import router as editor_router
from code_insight.application.api.routes.health import router as health_router
from code_insight.application.api.routes.panel import router as panel_router
from code_insight.core.config.settings import get_settings
from code_insight.core.exceptions import CodeInsightError, ConfigurationError
from code_insight.core.logging import get_logger, setup_logging
from code_insight.infrastructure.editor.workspace_editor import WorkspaceEditor
from code_insight.infrastructure.panel.panel_channel import PanelChannel
from code_insight.infrastructure.storage.json_file_store import JsonFileStore
from code_insight.llm_stream.stream_client import StreamClient

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).

    Startup wires store → editor adapter → panel channel → stream client →
    session controller and restores the persisted cache. Shutdown cancels
    every outstanding tab, persists, and closes the HTTP client.
    """
    settings = get_settings()

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting Code Insight service",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
    )

    store = JsonFileStore(settings.STORE_PATH)
    editor = WorkspaceEditor(settings.WORKSPACE_ROOT)
    panel = PanelChannel()
    stream_client = StreamClient(connect_timeout=settings.STREAM_CONNECT_TIMEOUT)

    session = SessionController(editor, panel, stream_client, store=store)
    session.load()

    app.state.session = session
    app.state.panel = panel
    logger.info("Application startup complete", workspace_root=str(editor.root))

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await session.shutdown()
        panel.close()
        await stream_client.aclose()
        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    All routes are prefixed with API_BASE_PATH (default: /api/v1).
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Concurrent streaming code analysis engine with a panel bridge",
        lifespan=lifespan,
    )

    add_error_handling_middleware(app, include_traceback=(settings.app.ENVIRONMENT == "development"))

    base_path = settings.app.API_BASE_PATH
    app.include_router(health_router, prefix=base_path)
    app.include_router(panel_router, prefix=base_path)
    app.include_router(editor_router, prefix=base_path)

    @app.exception_handler(CodeInsightError)
    async def code_insight_exception_handler(request: Request, exc: CodeInsightError):
        """Map engine errors to a JSON body."""
        logger.error(f"Engine exception: {exc.message}", error_type=type(exc).__name__)
        status_code = 400 if isinstance(exc, ConfigurationError) else 500
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    return app


# Create application instance
app = create_app()


def main() -> None:
    """Console entry point: ``code-insight``."""
    settings = get_settings()
    uvicorn.run(
        "code_insight.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
