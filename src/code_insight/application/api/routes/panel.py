"""
Panel Routes
============

The display surface talks to the engine through two channels:

- ``GET /panel/events``: a Server-Sent-Events stream. Every message the
  session controller posts (reset, initTabs, chunk, tabComplete, ...) is
  delivered as one SSE event whose ``event`` is the command name and whose
  ``data`` is the message JSON.
- ``POST /panel/messages``: user actions from the panel (regenerate,
  requestAnalysis, cancelRequest, openFileLocation, toggleDisable).
  Bodies are validated by ``InboundMessage``; invalid ones get a 422.

``POST /panel/open`` opens (or re-shows) the panel for a file.

SSE Protocol Format:
    event: chunk
    data: {"command": "chunk", "tabKey": "summary", "fragment": "lo", ...}

    (blank line signals end of event)
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import StreamingResponse

from code_insight.analysis.messages import InboundMessage
from code_insight.application.api.dependencies import PanelDep, SessionDep
from code_insight.application.api.models import AcceptedResponse, OpenPanelModel
from code_insight.core.config.constants import SSE_CONTENT_TYPE, Stage
from code_insight.core.logging import get_logger, log_stage

router = APIRouter(prefix="/panel", tags=["Panel"])
logger = get_logger(__name__)


@router.get(
    "/events",
    responses={200: {"description": "Panel message stream", "content": {SSE_CONTENT_TYPE: {}}}},
)
async def panel_events(request: Request, panel: PanelDep):
    """
    Subscribe to display messages.

    Only messages posted after the subscription starts are delivered; a
    panel that connects late asks for state with ``POST /panel/open``.
    """

    async def event_stream():
        async for message in panel.subscribe():
            if await request.is_disconnected():
                break
            yield message.format()

    log_stage(logger, Stage.BRIDGE, "Panel event stream opened")
    return StreamingResponse(
        event_stream(),
        media_type=SSE_CONTENT_TYPE,
        headers={
            # SSE streams are unique per connection and must not be cached
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            # Disable reverse-proxy buffering so events arrive immediately
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/messages", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def panel_message(body: InboundMessage, session: SessionDep):
    """Dispatch one panel action to the session controller."""
    session.handle_message(body)
    return AcceptedResponse(command=body.command.value)


@router.post("/open", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def open_panel(body: OpenPanelModel, session: SessionDep):
    """Show the panel for ``path``, or its empty state when no file is active."""
    session.activate(body.path)
    return AcceptedResponse(command="open")
