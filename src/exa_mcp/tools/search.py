"""Shared pieces of the search tools: input base model, request execution,
and result formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from exa_mcp.core.errors import UpstreamError
from exa_mcp.tools.base import TextBlock, ToolResult

if TYPE_CHECKING:
    from exa_mcp.exa.models import SearchRequest, SearchResult
    from exa_mcp.tools.base import ToolContext

DEFAULT_NUM_RESULTS = 5
MAX_NUM_RESULTS = 25

MISSING_API_KEY_TEXT = (
    "Error: Missing Exa API key. Please configure the API key in the settings."
)
NO_RESULTS_TEXT = "No search results found. Please try a different query."


class SearchInput(BaseModel):
    query: str = Field(min_length=1, description="Search query")
    num_results: int = Field(
        default=DEFAULT_NUM_RESULTS,
        ge=1,
        le=MAX_NUM_RESULTS,
        description=f"Number of search results to return (default: {DEFAULT_NUM_RESULTS})",
    )


def format_result(index: int, result: SearchResult) -> str:
    """Render one hit as a readable text block."""
    lines = [f"{index}. {result.title or 'No title'}", f"   URL: {result.url}"]
    if result.published_date:
        lines.append(f"   Published: {result.published_date}")
    if result.author:
        lines.append(f"   Author: {result.author}")
    if result.text:
        lines.extend(["", result.text.strip()])
    return "\n".join(lines)


async def run_search(ctx: ToolContext, request: SearchRequest) -> ToolResult:
    """Execute ``request`` and turn the outcome into a ToolResult.

    Never raises for upstream failures: they come back as ``is_error``
    results with the failure spelled out.
    """
    log = ctx.logger
    if not ctx.client.has_api_key:
        log.warning("Missing Exa API key")
        return ToolResult.error(MISSING_API_KEY_TEXT)

    log.info("Sending request to Exa API: query=%r", request.query)
    try:
        response = await ctx.client.search(request)
    except UpstreamError as exc:
        log.warning("Exa search failed: %s", exc)
        return ToolResult.error(f"Search error: {exc}")

    log.info("Received %d results from Exa API", len(response.results))
    if not response.results:
        return ToolResult.text(NO_RESULTS_TEXT)

    return ToolResult(
        content=tuple(
            TextBlock(format_result(i, r)) for i, r in enumerate(response.results, 1)
        )
    )
