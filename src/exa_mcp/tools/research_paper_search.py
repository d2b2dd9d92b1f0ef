"""Research paper search tool: academic papers with full-text excerpts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from exa_mcp.exa.models import SearchRequest
from exa_mcp.tools.base import ToolDescriptor
from exa_mcp.tools.search import SearchInput, run_search

if TYPE_CHECKING:
    from exa_mcp.tools.base import ToolContext, ToolResult
    from exa_mcp.tools.registry import ToolRegistry

TOOL_ID = "research_paper_search"
CATEGORY = "research paper"

DESCRIPTION = (
    "Search across 100M+ research papers with full text access using Exa AI. "
    "Returns titles, authors, publication dates and text excerpts of the most "
    "relevant academic papers. Control the number of results to balance "
    "coverage against response size."
)


class ResearchPaperSearchInput(SearchInput):
    pass


async def research_paper_search(
    args: ResearchPaperSearchInput, ctx: ToolContext
) -> ToolResult:
    request = SearchRequest.build(
        args.query,
        max_characters=ctx.client.config.max_characters,
        num_results=args.num_results,
        category=CATEGORY,
        livecrawl="fallback",
    )
    return await run_search(ctx, request)


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolDescriptor(
            id=TOOL_ID,
            name="Research Paper Search",
            description=DESCRIPTION,
            input_model=ResearchPaperSearchInput,
            handler=research_paper_search,
        )
    )
