"""MCP protocol server for the Exa search tools.

:class:`SearchServer` owns one ``mcp`` low-level :class:`~mcp.server.Server`
and installs handlers for the two request kinds we serve: tool discovery
(``tools/list``) and tool invocation (``tools/call``). Any number of
transports can attach to the same instance through :meth:`SearchServer.run`;
each attachment is an independent logical connection, and each tool call
gets its own context, so nothing mutable is shared between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import anyio
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from exa_mcp import __version__
from exa_mcp.core.errors import ToolNotFoundError, ToolValidationError
from exa_mcp.core.log import RequestLogger
from exa_mcp.tools.base import ToolContext, ToolResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
    from mcp.shared.message import SessionMessage

    from exa_mcp.exa.client import ExaClient
    from exa_mcp.tools.base import ToolDescriptor
    from exa_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "exa-mcp"


def _field_errors(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors to ``[{"field": "a.b", "message": ...}]``."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "arguments",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=b.text) for b in result.content],
        isError=result.is_error,
    )


class SearchServer:
    """Tool discovery and invocation over MCP, independent of transport."""

    def __init__(
        self,
        registry: ToolRegistry,
        client: ExaClient,
        allowed: Iterable[str] | None = None,
    ) -> None:
        registry.freeze()
        self.registry = registry
        self.client = client
        self.allowed = frozenset(allowed) if allowed is not None else None

        self.server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)
        self.server.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    # ── Discovery ────────────────────────────────────────────────

    def available_tools(self) -> list[ToolDescriptor]:
        return self.registry.list(self.allowed)

    def list_tools(self) -> list[types.Tool]:
        """Describe every available tool. Needs no upstream credential."""
        return [
            types.Tool(
                name=t.id,
                title=t.name,
                description=t.description,
                inputSchema=t.input_schema,
            )
            for t in self.available_tools()
        ]

    # ── Invocation ───────────────────────────────────────────────

    def validate(self, tool_id: str, arguments: dict[str, Any] | None) -> Any:
        """Look up ``tool_id`` and validate ``arguments`` against its schema.

        Raises:
            ToolNotFoundError: Unknown or unavailable tool.
            ToolValidationError: Arguments violate the input schema.
        """
        if not self.registry.is_available(tool_id, self.allowed):
            raise ToolNotFoundError(tool_id)
        descriptor = self.registry.get(tool_id)
        try:
            return descriptor.input_model.model_validate(arguments or {})
        except ValidationError as exc:
            raise ToolValidationError(tool_id, _field_errors(exc)) from exc

    async def call_tool(self, tool_id: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Validate, dispatch, and wrap the handler outcome.

        Lookup and validation failures raise; anything the handler raises
        becomes an ``is_error`` result.
        """
        validated = self.validate(tool_id, arguments)
        descriptor = self.registry.get(tool_id)
        request_logger = RequestLogger(tool_id)
        ctx = ToolContext(client=self.client, logger=request_logger)

        # A closing session must not abort the upstream call half-way;
        # the result is simply dropped if nobody is left to receive it.
        with anyio.CancelScope(shield=True):
            try:
                result = await descriptor.handler(validated, ctx)
            except Exception as exc:
                request_logger.exception("Tool handler failed")
                result = ToolResult.error(f"Tool {tool_id} failed: {exc}")
            request_logger.complete()
        return result

    # ── MCP request handlers ─────────────────────────────────────

    async def _handle_list_tools(self, req: types.ListToolsRequest) -> types.ServerResult:
        return types.ServerResult(types.ListToolsResult(tools=self.list_tools()))

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        try:
            result = await self.call_tool(req.params.name, req.params.arguments)
        except ToolValidationError as exc:
            raise McpError(
                types.ErrorData(
                    code=types.INVALID_PARAMS,
                    message=str(exc),
                    data={"errors": exc.errors},
                )
            ) from exc
        except ToolNotFoundError as exc:
            raise McpError(
                types.ErrorData(code=types.INVALID_PARAMS, message=str(exc))
            ) from exc
        return types.ServerResult(to_call_tool_result(result))

    # ── Transports ───────────────────────────────────────────────

    async def run(
        self,
        read_stream: MemoryObjectReceiveStream[SessionMessage | Exception],
        write_stream: MemoryObjectSendStream[SessionMessage],
    ) -> None:
        """Serve one logical connection until its read stream ends."""
        await self.server.run(
            read_stream,
            write_stream,
            self.server.create_initialization_options(),
        )

    async def run_stdio(self) -> None:
        """Serve a single client over stdin/stdout."""
        logger.info("Serving MCP over stdio")
        async with stdio_server() as (read_stream, write_stream):
            await self.run(read_stream, write_stream)
