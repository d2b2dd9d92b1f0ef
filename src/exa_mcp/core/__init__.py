"""Core errors and logging helpers."""

from exa_mcp.core.errors import (
    AuthenticationError,
    ConfigError,
    ExaMcpError,
    MalformedResponseError,
    RegistryError,
    SessionNotFoundError,
    ToolError,
    ToolNotFoundError,
    ToolValidationError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)

__all__ = [
    "AuthenticationError",
    "ConfigError",
    "ExaMcpError",
    "MalformedResponseError",
    "RegistryError",
    "SessionNotFoundError",
    "ToolError",
    "ToolNotFoundError",
    "ToolValidationError",
    "UpstreamAuthError",
    "UpstreamError",
    "UpstreamRateLimitError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
]
