"""FastAPI application factory for the network transport."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from exa_mcp import __version__

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from exa_mcp.config.schema import ExaMcpConfig
    from exa_mcp.mcp.server import SearchServer


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Release the upstream connection pool on shutdown."""
    yield
    await app.state.search_server.client.aclose()


def create_app(config: ExaMcpConfig, server: SearchServer) -> FastAPI:
    """Create the app serving ``server`` to any number of SSE sessions."""
    from exa_mcp.api.routes.mcp import build_router
    from exa_mcp.mcp.sse import SseTransport

    app = FastAPI(
        title="exa-mcp",
        description="Exa search tools over MCP (server-sent events)",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.search_server = server
    app.state.transport = SseTransport(
        server,
        messages_path=config.server.messages_path,
        ping_interval=config.server.ping_interval,
    )

    app.include_router(build_router(config.server))
    return app
