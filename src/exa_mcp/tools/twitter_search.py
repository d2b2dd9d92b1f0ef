"""Twitter/X search tool: posts restricted to x.com and twitter.com."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field

from exa_mcp.exa.models import SearchRequest
from exa_mcp.tools.base import ToolDescriptor
from exa_mcp.tools.search import SearchInput, run_search

if TYPE_CHECKING:
    from exa_mcp.tools.base import ToolContext, ToolResult
    from exa_mcp.tools.registry import ToolRegistry

TOOL_ID = "twitter_search"
DOMAINS = ["x.com", "twitter.com"]

DESCRIPTION = (
    "Search Twitter/X.com posts and accounts using Exa AI. Returns post text, "
    "author and publication date. Optionally restrict results to a publication "
    "date window with ISO 8601 start and end dates."
)


class TwitterSearchInput(SearchInput):
    start_published_date: datetime | None = Field(
        default=None,
        description="Only posts published after this time (ISO 8601, e.g. 2025-01-01T00:00:00Z)",
    )
    end_published_date: datetime | None = Field(
        default=None,
        description="Only posts published before this time (ISO 8601)",
    )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


async def twitter_search(args: TwitterSearchInput, ctx: ToolContext) -> ToolResult:
    request = SearchRequest.build(
        args.query,
        max_characters=ctx.client.config.max_characters,
        num_results=args.num_results,
        include_domains=list(DOMAINS),
        start_published_date=_iso(args.start_published_date),
        end_published_date=_iso(args.end_published_date),
    )
    return await run_search(ctx, request)


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolDescriptor(
            id=TOOL_ID,
            name="Twitter Search",
            description=DESCRIPTION,
            input_model=TwitterSearchInput,
            handler=twitter_search,
        )
    )
