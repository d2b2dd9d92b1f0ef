"""Stub Exa collaborators and canned search results."""

from __future__ import annotations

import json
from typing import Any

import httpx

from exa_mcp.config.schema import ExaConfig
from exa_mcp.core.log import RequestLogger
from exa_mcp.exa.models import SearchRequest, SearchResponse
from exa_mcp.tools.base import ToolContext

ESPRESSO_RESULTS: list[dict[str, Any]] = [
    {
        "id": "r1",
        "title": "Best Espresso Machines: A Buyer's Guide",
        "url": "https://example.com/espresso-guide",
        "publishedDate": "2025-03-01",
        "author": "Ana Barista",
        "text": (
            "Choosing an espresso machine depends on your budget and skill. "
            "What is the best espresso machine for beginners? "
            "Semi-automatic machines give you more control over extraction. "
            "Espresso machines need regular descaling to last."
        ),
    },
    {
        "id": "r2",
        "title": "Espresso Machine Reviews | Coffee Lab",
        "url": "https://example.org/reviews",
        "text": (
            "We tested twenty espresso machines over six months. "
            "How often should you clean the group head? "
            "Grind size matters more than the machine itself."
        ),
    },
]


def search_body(results: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Raw JSON body of a successful ``/search`` response."""
    return {
        "requestId": "req-123",
        "results": ESPRESSO_RESULTS if results is None else results,
    }


class StubExaClient:
    """Stands in for :class:`exa_mcp.exa.client.ExaClient`.

    Records every request; returns ``results`` or raises ``error``.
    """

    def __init__(
        self,
        results: list[dict[str, Any]] | None = None,
        *,
        error: Exception | None = None,
        api_key: str | None = "test-key",
    ) -> None:
        self.config = ExaConfig(api_key=api_key)
        self.results = ESPRESSO_RESULTS if results is None else results
        self.error = error
        self.requests: list[SearchRequest] = []
        self.closed = False

    @property
    def has_api_key(self) -> bool:
        return bool(self.config.api_key)

    async def search(self, request: SearchRequest) -> SearchResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return SearchResponse.model_validate(search_body(self.results))

    async def aclose(self) -> None:
        self.closed = True


class RecordingTransport(httpx.MockTransport):
    """httpx mock transport that keeps every request it served."""

    def __init__(self, responder: Any) -> None:
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return responder(request)

        super().__init__(_handler)

    def json_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


def make_context(client: StubExaClient, tool_id: str = "test_tool") -> ToolContext:
    """Fresh per-call context around ``client``."""
    return ToolContext(client=client, logger=RequestLogger(tool_id))  # type: ignore[arg-type]
