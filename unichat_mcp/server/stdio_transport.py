"""stdio transport for the unichat MCP server.

One duplex channel to the host process, one handler set. Serves until the
host closes stdin or the process receives SIGINT/SIGTERM.
"""

import asyncio
import contextlib
import logging
import signal

from mcp.server.stdio import stdio_server

from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server.mcp_server import UnichatMCPServer

logger = logging.getLogger(__name__)


def _install_signal_handlers(task: asyncio.Task) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, task.cancel)


async def serve_stdio(backend: ChatBackend) -> None:
    """Serve one session over stdin/stdout.

    Args:
        backend: Shared chat backend
    """
    handlers = UnichatMCPServer(backend)
    current = asyncio.current_task()
    if current is not None:
        _install_signal_handlers(current)

    logger.info("Starting unichat MCP server on stdio")
    try:
        async with stdio_server() as (read, write):
            await handlers.server.run(read, write, handlers.initialization_options())
    except asyncio.CancelledError:
        logger.info("Termination signal received, shutting down")
    finally:
        handlers.close()
        logger.info("stdio session closed")
