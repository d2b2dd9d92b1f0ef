"""Server-sent-events transport with per-session multiplexing.

Each ``GET /sse`` opens a :class:`Session`: a fresh unguessable id plus two
memory-stream pairs joining HTTP to the protocol server. The first event on
the stream tells the client where to POST::

    event: endpoint
    data: /messages?sessionId=<id>

Every later ``event: message`` carries one JSON-RPC message. Client messages
arrive through ``POST /messages?sessionId=<id>`` and are fed to that
session's protocol connection in arrival order.

The live-session map belongs to :class:`SseTransport`. It is only mutated
by :meth:`SseTransport.open_session` and :meth:`SseTransport.close_session`,
both called on the event loop, so it needs no lock.
"""

from __future__ import annotations

import contextlib
import logging
import secrets
from dataclasses import dataclass
from typing import TYPE_CHECKING

import anyio
from fastapi import Response
from mcp import types
from mcp.shared.message import SessionMessage

from exa_mcp.core.errors import SessionNotFoundError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from anyio.abc import CancelScope
    from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
    from starlette.types import Receive, Scope, Send

    from exa_mcp.mcp.server import SearchServer

logger = logging.getLogger(__name__)

_PING = b": ping\n\n"


def format_event(event: str, data: str) -> bytes:
    """Frame one server-sent event."""
    lines = [f"event: {event}"]
    lines += [f"data: {line}" for line in data.splitlines() or [""]]
    return ("\n".join(lines) + "\n\n").encode()


@dataclass(eq=False)
class Session:
    """One live client connection."""

    id: str
    # POST /messages -> protocol server
    incoming: MemoryObjectSendStream[SessionMessage | Exception]
    read_stream: MemoryObjectReceiveStream[SessionMessage | Exception]
    # protocol server -> event stream
    write_stream: MemoryObjectSendStream[SessionMessage]
    outgoing: MemoryObjectReceiveStream[SessionMessage]

    def close(self) -> None:
        self.incoming.close()
        self.read_stream.close()
        self.write_stream.close()
        self.outgoing.close()


class SseTransport:
    """Owns the live sessions and binds each one to the protocol server."""

    def __init__(
        self,
        server: SearchServer,
        messages_path: str = "/messages",
        ping_interval: float = 15.0,
    ) -> None:
        self.server = server
        self.messages_path = messages_path
        self.ping_interval = ping_interval
        self._sessions: dict[str, Session] = {}

    # ── Session map ──────────────────────────────────────────────

    def open_session(self) -> Session:
        incoming, read_stream = anyio.create_memory_object_stream[
            SessionMessage | Exception
        ](0)
        write_stream, outgoing = anyio.create_memory_object_stream[SessionMessage](0)
        session = Session(
            id=secrets.token_hex(16),
            incoming=incoming,
            read_stream=read_stream,
            write_stream=write_stream,
            outgoing=outgoing,
        )
        self._sessions[session.id] = session
        logger.info("Session %s opened (%d live)", session.id, len(self._sessions))
        return session

    def get(self, session_id: str | None) -> Session:
        """Return the live session, or raise SessionNotFoundError."""
        session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close_session(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        session.close()
        logger.info("Session %s closed (%d live)", session_id, len(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    # ── HTTP bindings ────────────────────────────────────────────

    def connect(self) -> SessionStreamResponse:
        """Response for ``GET /sse``; the session opens when it starts."""
        return SessionStreamResponse(self)

    async def post_message(self, session_id: str | None, body: bytes) -> None:
        """Deliver one client message to its session.

        Raises:
            SessionNotFoundError: No live session with this id.
            ValueError: Body is not a JSON-RPC message.
        """
        session = self.get(session_id)
        message = types.JSONRPCMessage.model_validate_json(body)
        try:
            await session.incoming.send(SessionMessage(message))
        except (anyio.BrokenResourceError, anyio.ClosedResourceError) as exc:
            raise SessionNotFoundError(session_id) from exc

    async def serve(self, session: Session) -> None:
        await self.server.run(session.read_stream, session.write_stream)


class SessionStreamResponse(Response):
    """Event stream bound to one session for the life of the connection."""

    media_type = "text/event-stream"

    def __init__(self, transport: SseTransport) -> None:
        self.transport = transport
        self.status_code = 200
        self.background = None
        self.init_headers(
            {
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            }
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        session = self.transport.open_session()
        root = scope.get("root_path", "").rstrip("/")
        endpoint = f"{root}{self.transport.messages_path}?sessionId={session.id}"
        send_lock = anyio.Lock()

        async def emit(chunk: bytes) -> None:
            async with send_lock:
                await send({"type": "http.response.body", "body": chunk, "more_body": True})

        try:
            await send(
                {
                    "type": "http.response.start",
                    "status": self.status_code,
                    "headers": self.raw_headers,
                }
            )
            await emit(format_event("endpoint", endpoint))
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._watch_disconnect, receive, session, tg.cancel_scope)
                tg.start_soon(self._keep_alive, emit)
                tg.start_soon(self.transport.serve, session)
                await self._forward(session, emit)
                tg.cancel_scope.cancel()
            with contextlib.suppress(OSError):
                await send({"type": "http.response.body", "body": b"", "more_body": False})
        finally:
            # no-op when the disconnect watcher already closed it
            self.transport.close_session(session.id)

    async def _forward(
        self, session: Session, emit: Callable[[bytes], Awaitable[None]]
    ) -> None:
        try:
            async for session_message in session.outgoing:
                data = session_message.message.model_dump_json(
                    by_alias=True, exclude_none=True
                )
                await emit(format_event("message", data))
        except OSError:
            logger.debug("Session %s: client went away mid-write", session.id)

    async def _keep_alive(self, emit: Callable[[bytes], Awaitable[None]]) -> None:
        try:
            while True:
                await anyio.sleep(self.transport.ping_interval)
                await emit(_PING)
        except OSError:
            return

    async def _watch_disconnect(
        self, receive: Receive, session: Session, cancel_scope: CancelScope
    ) -> None:
        """Drop the session as soon as the client goes away.

        The task group may still be waiting on a shielded tool call; the
        session must not stay reachable while it does.
        """
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                cancel_scope.cancel()
                self.transport.close_session(session.id)
                return
