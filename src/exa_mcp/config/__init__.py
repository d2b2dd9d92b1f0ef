"""Configuration loading and validation."""

from exa_mcp.config.loader import load_config, require_api_key
from exa_mcp.config.schema import (
    ExaConfig,
    ExaMcpConfig,
    LoggingConfig,
    ServerConfig,
    ToolsConfig,
)

__all__ = [
    "ExaConfig",
    "ExaMcpConfig",
    "LoggingConfig",
    "ServerConfig",
    "ToolsConfig",
    "load_config",
    "require_api_key",
]
