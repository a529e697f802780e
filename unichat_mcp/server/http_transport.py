"""
HTTP + SSE transport for the unichat MCP server.

Endpoints:
- GET  /sse       - open a session (server-sent event stream)
- POST /message/  - deliver one client message (?session_id=... from the SSE endpoint event)
- GET  /health    - liveness check

Every SSE connection gets its own handler set. Posted messages are routed to
their session by the SDK's session_id, so concurrent connections do not
steal each other's traffic. The server is single-shot: once the first
session closes, uvicorn is asked to exit.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import uvicorn
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server.config import ServerConfig
from unichat_mcp.server.mcp_server import UnichatMCPServer

logger = logging.getLogger(__name__)


@dataclass
class SessionConnection:
    """One SSE channel bound to its handler set."""

    handlers: UnichatMCPServer
    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    opened_at: datetime = field(default_factory=datetime.now)


class SessionRegistry:
    """Live SSE sessions, keyed by connection id."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionConnection] = {}
        self.closed_count = 0

    def open(self, handlers: UnichatMCPServer) -> SessionConnection:
        connection = SessionConnection(handlers=handlers)
        self._sessions[connection.connection_id] = connection
        logger.info(
            "Session %s opened (%s active)", connection.connection_id, len(self._sessions)
        )
        return connection

    def close(self, connection: SessionConnection) -> None:
        """Drop the session and move its handler set to CLOSED."""
        self._sessions.pop(connection.connection_id, None)
        connection.handlers.close()
        self.closed_count += 1
        logger.info(
            "Session %s closed (%s active)", connection.connection_id, len(self._sessions)
        )

    @property
    def active(self) -> int:
        return len(self._sessions)

    def get(self, connection_id: str) -> SessionConnection | None:
        return self._sessions.get(connection_id)


def create_sse_app(
    backend: ChatBackend,
    config: ServerConfig,
    registry: SessionRegistry | None = None,
    on_session_closed: Callable[[SessionConnection], Any] | None = None,
) -> Starlette:
    """Build the Starlette app serving MCP over SSE.

    Args:
        backend: Shared chat backend
        config: Server configuration (endpoint paths)
        registry: Session registry (a fresh one if omitted)
        on_session_closed: Called after each session's handler set is closed

    Returns:
        Starlette application
    """
    registry = registry if registry is not None else SessionRegistry()
    transport = SseServerTransport(config.message_path)

    async def handle_sse(request: Request) -> Response:
        logger.info("Received connection")
        connection = registry.open(UnichatMCPServer(backend))
        handlers = connection.handlers

        try:
            async with transport.connect_sse(
                request.scope,
                request.receive,
                request._send,
            ) as (read, write):
                await handlers.server.run(read, write, handlers.initialization_options())
        finally:
            registry.close(connection)
            if on_session_closed is not None:
                on_session_closed(connection)

        return Response()

    async def health_check(request: Request) -> JSONResponse:
        """Lightweight liveness check."""
        return JSONResponse(
            {"status": "ok", "model": backend.model, "sessions": registry.active}
        )

    app = Starlette(
        routes=[
            Route(config.sse_path, endpoint=handle_sse, methods=["GET"]),
            Mount(config.message_path, app=transport.handle_post_message),
            Route("/health", endpoint=health_check, methods=["GET", "HEAD"]),
        ],
    )
    app.state.registry = registry
    return app


async def serve_sse(backend: ChatBackend, config: ServerConfig) -> None:
    """Run the SSE server until the first session closes.

    Args:
        backend: Shared chat backend
        config: Server configuration (host, port, paths, log level)
    """
    server: uvicorn.Server | None = None

    def _shutdown(connection: SessionConnection) -> None:
        logger.info("Session %s ended, stopping server", connection.connection_id)
        if server is not None:
            server.should_exit = True

    app = create_sse_app(backend, config, on_session_closed=_shutdown)

    logger.info("Starting unichat MCP server on %s:%s", config.host, config.port)
    logger.info("  GET  %s - open session", config.sse_path)
    logger.info("  POST %s - client messages", config.message_path)
    logger.info("  GET  /health - liveness check")

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
            access_log=False,
        )
    )

    try:
        await server.serve()
    except Exception as e:
        logger.exception("HTTP server error: %s", e)
        raise
