"""Command-line entry point.

``exa-mcp`` serves the search tools over stdio (default) or, with
``--sse``, over HTTP server-sent events.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from exa_mcp import __version__
from exa_mcp.config.loader import load_config, require_api_key
from exa_mcp.core.errors import ConfigError
from exa_mcp.core.log import configure_logging

if TYPE_CHECKING:
    from exa_mcp.config.schema import ExaMcpConfig
    from exa_mcp.mcp.server import SearchServer

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None, tools: str | None) -> ExaMcpConfig:
    """Load config with user-friendly error handling."""
    overrides = None
    if tools is not None:
        allow = [t.strip() for t in tools.split(",") if t.strip()]
        overrides = {"tools": {"allow": allow}}
    try:
        config = load_config(path=config_path, overrides=overrides)
        require_api_key(config)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy
    return config


def _build_server(config: ExaMcpConfig) -> SearchServer:
    """Wire registry, upstream client and protocol server."""
    from exa_mcp.exa.client import ExaClient
    from exa_mcp.mcp.server import SearchServer
    from exa_mcp.tools import build_registry

    registry = build_registry()
    allowed = config.tools.allow
    if allowed is not None:
        unknown = sorted(set(allowed) - set(registry.list_ids()))
        if unknown:
            logger.warning("Ignoring unknown tool ids: %s", ", ".join(unknown))
    return SearchServer(registry, ExaClient(config.exa), allowed=allowed)


async def _serve_stdio(server: SearchServer) -> None:
    try:
        await server.run_stdio()
    finally:
        await server.client.aclose()


def _serve_sse(config: ExaMcpConfig, server: SearchServer) -> None:
    import uvicorn

    from exa_mcp.api.app import create_app

    if not config.server.api_token:
        logger.warning(
            "%s is not set; every %s request will be rejected",
            config.server.api_token_env,
            config.server.sse_path,
        )
    app = create_app(config, server)
    click.echo(f"sse server: http://localhost:{config.server.port}{config.server.sse_path}")
    uvicorn.run(app, host=config.server.host, port=config.server.port)


# ── Command ──────────────────────────────────────────────────────


@click.command()
@click.version_option(version=__version__, prog_name="exa-mcp")
@click.option(
    "--sse",
    is_flag=True,
    default=False,
    help="Serve over HTTP server-sent events instead of stdio.",
)
@click.option("--config", "config_path", default=None, help="Path to config file.")
@click.option(
    "--tools",
    default=None,
    help="Comma-separated tool ids to expose (overrides tools.allow).",
)
def cli(sse: bool, config_path: str | None, tools: str | None) -> None:
    """Exa search tools for MCP clients."""
    config = _load_config(config_path, tools)
    configure_logging(config.logging)
    server = _build_server(config)

    if sse:
        _serve_sse(config, server)
    else:
        asyncio.run(_serve_stdio(server))
