"""Static bearer-token gate for session establishment."""

from __future__ import annotations

import logging
import secrets

from fastapi import HTTPException, Request

from exa_mcp.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


def check_bearer_token(authorization: str | None, api_token: str | None) -> None:
    """Accept only ``Authorization: Bearer <api_token>``, compared exactly.

    Raises:
        AuthenticationError: No token configured server-side, no header,
            or a header that does not match.
    """
    if not api_token:
        raise AuthenticationError("no API token configured")
    if not authorization:
        raise AuthenticationError("missing bearer token")
    expected = f"Bearer {api_token}"
    if not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise AuthenticationError("invalid token")


async def require_api_token(request: Request) -> None:
    """FastAPI dependency: 401 unless the request carries the API token."""
    config = request.app.state.config
    try:
        check_bearer_token(
            request.headers.get("Authorization"), config.server.api_token
        )
    except AuthenticationError as exc:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.reason)
        raise HTTPException(status_code=401, detail=str(exc)) from exc
