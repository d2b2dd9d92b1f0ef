"""GET /sse and POST /messages -- the MCP network transport."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import PlainTextResponse

from exa_mcp.api.auth import require_api_token
from exa_mcp.core.errors import SessionNotFoundError

if TYPE_CHECKING:
    from exa_mcp.config.schema import ServerConfig
    from exa_mcp.mcp.sse import SseTransport

logger = logging.getLogger(__name__)


async def open_stream(request: Request) -> Response:
    """Open a session and stream its server-to-client messages."""
    transport: SseTransport = request.app.state.transport
    return transport.connect()


async def post_message(
    request: Request,
    session_id: str | None = Query(default=None, alias="sessionId"),
) -> Response:
    """Hand one client message to an existing session."""
    transport: SseTransport = request.app.state.transport
    body = await request.body()
    try:
        await transport.post_message(session_id, body)
    except SessionNotFoundError as exc:
        return PlainTextResponse(str(exc), status_code=400)
    except ValueError:
        logger.warning("Unparseable message for session %s", session_id)
        return PlainTextResponse("Could not parse message", status_code=400)
    return PlainTextResponse("Accepted", status_code=202)


def build_router(config: ServerConfig) -> APIRouter:
    router = APIRouter(tags=["mcp"])
    router.add_api_route(
        config.sse_path,
        open_stream,
        methods=["GET"],
        dependencies=[Depends(require_api_token)],
    )
    router.add_api_route(config.messages_path, post_message, methods=["POST"])
    return router
