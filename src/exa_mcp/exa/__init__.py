"""Exa search API collaborator."""

from exa_mcp.exa.client import ExaClient
from exa_mcp.exa.models import SearchRequest, SearchResponse, SearchResult

__all__ = ["ExaClient", "SearchRequest", "SearchResponse", "SearchResult"]
