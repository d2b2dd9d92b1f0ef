"""Web search tool: real-time web results with page text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from exa_mcp.exa.models import SearchRequest
from exa_mcp.tools.base import ToolDescriptor
from exa_mcp.tools.search import SearchInput, run_search

if TYPE_CHECKING:
    from exa_mcp.tools.base import ToolContext, ToolResult
    from exa_mcp.tools.registry import ToolRegistry

TOOL_ID = "web_search"

DESCRIPTION = (
    "Search the web using Exa AI. Performs real-time web searches and returns "
    "the content of the most relevant pages, including title, URL and a text "
    "excerpt for each result. Use it for current information, news, and "
    "anything that needs an up-to-date source."
)


class WebSearchInput(SearchInput):
    pass


async def web_search(args: WebSearchInput, ctx: ToolContext) -> ToolResult:
    request = SearchRequest.build(
        args.query,
        max_characters=ctx.client.config.max_characters,
        num_results=args.num_results,
        livecrawl="always",
    )
    return await run_search(ctx, request)


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolDescriptor(
            id=TOOL_ID,
            name="Web Search",
            description=DESCRIPTION,
            input_model=WebSearchInput,
            handler=web_search,
        )
    )
