"""Tool descriptor and result types.

A tool is described by a :class:`ToolDescriptor`: a stable id, a display
name, an LLM-facing description, a pydantic input model (whose JSON schema
is advertised and whose validation gates every call) and an async handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pydantic import BaseModel

    from exa_mcp.core.log import RequestLogger
    from exa_mcp.exa.client import ExaClient


@dataclass(frozen=True, slots=True)
class TextBlock:
    """The ``text`` variant of a content block."""

    text: str
    type: Literal["text"] = "text"


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Result from executing a tool. Never empty, even on error."""

    content: tuple[TextBlock, ...]
    is_error: bool = False

    def __post_init__(self) -> None:
        if not self.content:
            msg = "ToolResult content must contain at least one block"
            raise ValueError(msg)

    @classmethod
    def text(cls, *texts: str) -> ToolResult:
        return cls(content=tuple(TextBlock(t) for t in texts))

    @classmethod
    def error(cls, *texts: str) -> ToolResult:
        return cls(content=tuple(TextBlock(t) for t in texts), is_error=True)


@dataclass(frozen=True, slots=True)
class ToolContext:
    """Everything a handler may touch during one invocation.

    Built fresh for each call; handlers keep no state between calls.
    """

    client: ExaClient
    logger: RequestLogger


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Registry entry for one tool."""

    id: str
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[Any, ToolContext], Awaitable[ToolResult]]
    enabled: bool = True

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema advertised to clients for the tool's arguments."""
        return self.input_model.model_json_schema()
