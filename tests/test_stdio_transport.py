"""Tests for the stdio transport lifecycle."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server import stdio_transport
from unichat_mcp.server.mcp_server import HandlerState, UnichatMCPServer


@asynccontextmanager
async def fake_stdio_server() -> AsyncIterator[tuple[MagicMock, MagicMock]]:
    yield MagicMock(name="read"), MagicMock(name="write")


class TestServeStdio:
    """Test one session per process over stdio."""

    @pytest.mark.asyncio
    async def test_runs_and_closes(self, backend: ChatBackend) -> None:
        """Test the handler set runs on the stdio streams and is closed on EOF."""
        created: list[UnichatMCPServer] = []

        def build(b: ChatBackend) -> UnichatMCPServer:
            handlers = UnichatMCPServer(b)
            handlers.server.run = AsyncMock()
            created.append(handlers)
            return handlers

        with (
            patch.object(stdio_transport, "stdio_server", fake_stdio_server),
            patch.object(stdio_transport, "UnichatMCPServer", side_effect=build),
            patch.object(stdio_transport, "_install_signal_handlers"),
        ):
            await stdio_transport.serve_stdio(backend)

        assert len(created) == 1
        handlers = created[0]
        handlers.server.run.assert_awaited_once()
        read, write, options = handlers.server.run.await_args.args
        assert options.server_name == "unichat-mcp-server"
        assert handlers.state is HandlerState.CLOSED

    @pytest.mark.asyncio
    async def test_cancellation_closes(self, backend: ChatBackend) -> None:
        """Test a termination signal (task cancel) still closes the handler set."""
        created: list[UnichatMCPServer] = []
        started = asyncio.Event()

        async def block_forever(*args: object) -> None:
            started.set()
            await asyncio.Event().wait()

        def build(b: ChatBackend) -> UnichatMCPServer:
            handlers = UnichatMCPServer(b)
            handlers.server.run = block_forever
            created.append(handlers)
            return handlers

        with (
            patch.object(stdio_transport, "stdio_server", fake_stdio_server),
            patch.object(stdio_transport, "UnichatMCPServer", side_effect=build),
            patch.object(stdio_transport, "_install_signal_handlers"),
        ):
            task = asyncio.create_task(stdio_transport.serve_stdio(backend))
            await started.wait()
            task.cancel()
            await task

        assert created[0].state is HandlerState.CLOSED
