"""Shared test fixtures for exa-mcp."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from exa_mcp.mcp.server import SearchServer
from exa_mcp.tools import build_registry
from exa_mcp.tools.registry import ToolRegistry
from tests.fixtures.exa import StubExaClient


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and config files out of tests."""
    for var in ("EXA_API_KEY", "API_TOKEN", "PORT", "EXA_MCP_CONFIG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def stub_client() -> StubExaClient:
    return StubExaClient()


@pytest.fixture
def registry() -> ToolRegistry:
    return build_registry()


@pytest.fixture
def search_server(registry: ToolRegistry, stub_client: StubExaClient) -> SearchServer:
    return SearchServer(registry, stub_client)  # type: ignore[arg-type]


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo handlers and propagation changes made by ``configure_logging``."""
    root = logging.getLogger("exa_mcp")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    root.propagate = propagate
