"""Request and response models for the Exa search API.

Attributes are snake_case; the wire format is camelCase, so every model
serialises by alias.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Livecrawl = Literal["always", "fallback", "never"]


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextContentsOptions(_ApiModel):
    max_characters: int


class SearchContents(_ApiModel):
    text: TextContentsOptions


class SearchRequest(_ApiModel):
    """Body of ``POST /search``."""

    query: str
    type: str = "auto"
    num_results: int = 5
    contents: SearchContents
    category: str | None = None
    start_published_date: str | None = None
    end_published_date: str | None = None
    include_domains: list[str] | None = None
    exclude_domains: list[str] | None = None
    livecrawl: Livecrawl | None = None

    @classmethod
    def build(cls, query: str, *, max_characters: int, **kwargs: Any) -> SearchRequest:
        """Build a request asking for ``max_characters`` of text per result."""
        contents = SearchContents(text=TextContentsOptions(max_characters=max_characters))
        return cls(query=query, contents=contents, **kwargs)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SearchResult(_ApiModel):
    """One hit. Only ``url`` is guaranteed by the API."""

    url: str
    id: str | None = None
    title: str | None = None
    text: str | None = None
    published_date: str | None = None
    author: str | None = None
    score: float | None = None


class SearchResponse(_ApiModel):
    results: list[SearchResult]
    request_id: str | None = None
    autoprompt_string: str | None = None
