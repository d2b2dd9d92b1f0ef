"""Async client for the Exa search API."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

import anyio
import httpx
from pydantic import ValidationError

from exa_mcp.core.errors import (
    MalformedResponseError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from exa_mcp.exa.models import SearchResponse

if TYPE_CHECKING:
    from exa_mcp.config.schema import ExaConfig
    from exa_mcp.exa.models import SearchRequest

logger = logging.getLogger(__name__)

# Worth another attempt; auth and malformed-body failures are not.
_TRANSIENT: tuple[type[UpstreamError], ...] = (
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


def _map_status(response: httpx.Response) -> UpstreamError:
    """Map a non-2xx response to the upstream error hierarchy."""
    status = response.status_code
    detail = response.text[:200]
    if status in (401, 403):
        return UpstreamAuthError(f"Exa API rejected the API key ({status}): {detail}")
    if status == 429:
        retry_after = None
        raw = response.headers.get("retry-after")
        if raw is not None:
            with contextlib.suppress(ValueError):
                retry_after = float(raw)
        return UpstreamRateLimitError(retry_after=retry_after)
    if status >= 500:
        return UpstreamUnavailableError(
            f"Exa API server error ({status}): {detail}", status_code=status
        )
    return UpstreamError(f"Exa API request failed ({status}): {detail}")


def backoff_delay(attempt: int, error: UpstreamError, config: ExaConfig) -> float:
    """Seconds to wait before retry number ``attempt`` (1-based).

    A 429 carrying ``Retry-After`` waits exactly that long; anything else
    doubles from ``retry_base_delay``. Both are capped at ``retry_max_delay``.
    """
    if isinstance(error, UpstreamRateLimitError) and error.retry_after is not None:
        delay = error.retry_after
    else:
        delay = config.retry_base_delay * 2 ** (attempt - 1)
    return min(delay, config.retry_max_delay)


class ExaClient:
    """Thin async wrapper around ``POST /search``.

    One instance is shared by every tool invocation; it holds no
    per-call state beyond the httpx connection pool.
    """

    def __init__(
        self,
        config: ExaConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )

    @property
    def config(self) -> ExaConfig:
        return self._config

    @property
    def has_api_key(self) -> bool:
        return bool(self._config.api_key)

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Run a search, retrying transient failures when configured.

        Raises:
            UpstreamError: Or one of its subclasses, on any failure.
        """
        if not self._config.api_key:
            msg = f"Missing Exa API key. Set {self._config.api_key_env}."
            raise UpstreamAuthError(msg)

        max_retries = self._config.max_retries
        attempt = 0
        while True:
            try:
                return await self._search_once(request)
            except _TRANSIENT as e:
                if attempt >= max_retries:
                    raise
                attempt += 1
                delay = backoff_delay(attempt, e, self._config)
                logger.warning(
                    "Exa search retry %d/%d in %.1fs after: %s",
                    attempt,
                    max_retries,
                    delay,
                    e,
                )
                await anyio.sleep(delay)

    async def _search_once(self, request: SearchRequest) -> SearchResponse:
        try:
            response = await self._http.post(
                self._config.search_path,
                json=request.to_payload(),
                headers={
                    "x-api-key": self._config.api_key or "",
                    "Content-Type": "application/json",
                },
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Exa API request timed out: {e}") from e
        except httpx.TransportError as e:
            raise UpstreamUnavailableError(f"Exa API unreachable: {e}") from e

        if response.is_error:
            raise _map_status(response)

        try:
            return SearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            msg = f"Malformed response from Exa API: {e}"
            raise MalformedResponseError(msg) from e

    async def aclose(self) -> None:
        await self._http.aclose()
