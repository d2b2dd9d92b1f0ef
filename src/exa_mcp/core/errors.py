"""Exception hierarchy for exa-mcp.

Every module imports from here. The hierarchy is:

    ExaMcpError
    ├── ConfigError
    ├── AuthenticationError(reason)
    ├── RegistryError
    ├── ToolError(tool_id)
    │   ├── ToolNotFoundError
    │   └── ToolValidationError(errors)
    ├── UpstreamError
    │   ├── UpstreamAuthError
    │   ├── UpstreamRateLimitError(retry_after)
    │   ├── UpstreamTimeoutError
    │   ├── UpstreamUnavailableError(status_code)
    │   └── MalformedResponseError
    └── SessionNotFoundError(session_id)
"""

from __future__ import annotations


class ExaMcpError(Exception):
    """Base exception for all exa-mcp errors."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(ExaMcpError):
    """Invalid or missing configuration. Fatal at startup."""


# ─── Authentication Errors ────────────────────────────────────


class AuthenticationError(ExaMcpError):
    """Bearer credential missing, invalid, or not configured server-side."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Unauthorized: {reason}")


# ─── Tool Errors ──────────────────────────────────────────────


class RegistryError(ExaMcpError):
    """Duplicate registration or registration after the registry is frozen."""


class ToolError(ExaMcpError):
    """Base for tool lookup and argument errors."""

    def __init__(self, tool_id: str, message: str) -> None:
        self.tool_id = tool_id
        super().__init__(message)


class ToolNotFoundError(ToolError):
    """Tool id is not registered or not available."""

    def __init__(self, tool_id: str) -> None:
        super().__init__(tool_id, f"Tool not found: {tool_id}")


class ToolValidationError(ToolError):
    """Arguments do not satisfy the tool's input schema."""

    def __init__(self, tool_id: str, errors: list[dict[str, str]]) -> None:
        self.errors = errors
        details = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(tool_id, f"Invalid arguments for tool {tool_id}: {details}")


# ─── Upstream Errors ──────────────────────────────────────────


class UpstreamError(ExaMcpError):
    """Search API call failed."""


class UpstreamAuthError(UpstreamError):
    """Invalid or missing Exa API key."""


class UpstreamRateLimitError(UpstreamError):
    """Rate limit exceeded. Includes retry_after if available."""

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        msg = "Rate limited by the Exa API"
        if retry_after is not None:
            msg += f" (retry after {retry_after}s)"
        super().__init__(msg)


class UpstreamTimeoutError(UpstreamError):
    """Search request timed out."""


class UpstreamUnavailableError(UpstreamError):
    """Search API unreachable or answering with a server error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(UpstreamError):
    """Search API answered with a body we cannot interpret."""


# ─── Transport Errors ─────────────────────────────────────────


class SessionNotFoundError(ExaMcpError):
    """No live session with the given id."""

    def __init__(self, session_id: str | None) -> None:
        self.session_id = session_id
        super().__init__(f"No transport found for sessionId: {session_id}")
