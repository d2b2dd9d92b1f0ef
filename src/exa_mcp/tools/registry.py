"""Tool registry: the process-wide map from tool id to descriptor.

Registration happens once, sequentially, at startup. :meth:`ToolRegistry.freeze`
ends that phase; after it the registry is read-only, which is what lets
concurrent sessions read it without locking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from exa_mcp.core.errors import RegistryError, ToolNotFoundError

if TYPE_CHECKING:
    from collections.abc import Collection

    from exa_mcp.tools.base import ToolDescriptor


class ToolRegistry:
    """Registry for managing available tools.

    Supports registration, lookup by id, and listing the descriptors
    a client may see.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor) -> None:
        """Register a tool.

        Raises:
            RegistryError: If the id is already registered, or the
                registry has been frozen.
        """
        if self._frozen:
            msg = f"Registry is frozen; cannot register {descriptor.id}"
            raise RegistryError(msg)
        if descriptor.id in self._tools:
            msg = f"Tool already registered: {descriptor.id}"
            raise RegistryError(msg)
        self._tools[descriptor.id] = descriptor

    def freeze(self) -> None:
        """End the registration phase. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, tool_id: str) -> ToolDescriptor:
        """Get a tool by id.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        if tool_id not in self._tools:
            raise ToolNotFoundError(tool_id)
        return self._tools[tool_id]

    def list(self, allowed: Collection[str] | None = None) -> list[ToolDescriptor]:
        """Return the descriptors visible to clients, in registration order.

        Without an allow-set, every enabled tool. With one, exactly the
        registered tools whose id is in it, whatever their ``enabled`` flag.
        """
        if allowed is None:
            return [t for t in self._tools.values() if t.enabled]
        return [t for t in self._tools.values() if t.id in allowed]

    def is_available(self, tool_id: str, allowed: Collection[str] | None = None) -> bool:
        """Whether ``tool_id`` would appear in ``list(allowed)``."""
        tool = self._tools.get(tool_id)
        if tool is None:
            return False
        if allowed is None:
            return tool.enabled
        return tool_id in allowed

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, tool_id: str) -> bool:
        return tool_id in self._tools

    def list_ids(self) -> list[str]:
        """Return ids of all registered tools."""
        return list(self._tools.keys())
