"""Logging setup and per-request loggers.

All log output goes to stderr (and optionally a file). stdout is reserved
for the stdio transport, so nothing in the package may print to it while
serving.
"""

from __future__ import annotations

import logging
import secrets
import sys
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from exa_mcp.config.schema import LoggingConfig

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT = "exa_mcp"


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Attach stderr (and optional file) handlers to the package logger.

    Calling it again replaces the handlers installed by a previous call.
    """
    root = logging.getLogger(_ROOT)
    for handler in list(root.handlers):
        if getattr(handler, "_exa_mcp", False):
            root.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))

    formatter = logging.Formatter(_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._exa_mcp = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(config.level.upper())
    root.propagate = False
    return root


def new_request_id(tool_id: str) -> str:
    """Return ``<tool>-<epoch ms>-<random>``, unique per invocation."""
    return f"{tool_id}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class RequestLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger bound to a single tool invocation.

    Prefixes every record with the request id and tool id, and reports
    the elapsed time on :meth:`complete`.
    """

    def __init__(self, tool_id: str, logger: logging.Logger | None = None) -> None:
        self.request_id = new_request_id(tool_id)
        self.tool_id = tool_id
        self._start = time.monotonic()
        super().__init__(
            logger or logging.getLogger("exa_mcp.requests"),
            {"request_id": self.request_id, "tool_id": tool_id},
        )

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.request_id}] [{self.tool_id}] {msg}", kwargs

    def complete(self) -> float:
        """Log completion and return the elapsed milliseconds."""
        elapsed_ms = (time.monotonic() - self._start) * 1000
        self.info("Request completed in %.0fms", elapsed_ms)
        return elapsed_ms
