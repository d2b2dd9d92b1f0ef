"""Search tools exposed over MCP.

Each tool module registers itself through its ``register`` function;
:func:`build_registry` runs them all and freezes the result.
"""

from __future__ import annotations

from exa_mcp.tools import research_paper_search, seo_outline, twitter_search, web_search
from exa_mcp.tools.registry import ToolRegistry

_TOOL_MODULES = (web_search, research_paper_search, twitter_search, seo_outline)


def register_builtin_tools(registry: ToolRegistry) -> None:
    for module in _TOOL_MODULES:
        module.register(registry)


def build_registry() -> ToolRegistry:
    """Return a frozen registry holding every built-in tool."""
    registry = ToolRegistry()
    register_builtin_tools(registry)
    registry.freeze()
    return registry


__all__ = ["ToolRegistry", "build_registry", "register_builtin_tools"]
