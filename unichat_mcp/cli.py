"""unichat-mcp-server command-line entry point.

Example:
    # stdio (default), for MCP hosts that spawn the server
    UNICHAT_MODEL=gpt-4o-mini UNICHAT_API_KEY=... unichat-mcp-server

    # HTTP + SSE on port 3001
    unichat-mcp-server --sse --port 3001
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from unichat_mcp import __version__
from unichat_mcp.errors import ConfigurationError
from unichat_mcp.observability.logging import configure_logging
from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server.config import LOG_FORMATS, LOG_LEVELS, ServerConfig, Transport, load_config
from unichat_mcp.server.http_transport import serve_sse
from unichat_mcp.server.stdio_transport import serve_stdio

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unichat-mcp-server",
        description="Unichat MCP Server - chat completions and code prompts over MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  UNICHAT_MODEL      Model identifier (required, see supported catalog)
  UNICHAT_API_KEY    Provider API key (required)
  UNICHAT_BASE_URL   Override the provider endpoint
  PORT               SSE listen port (default: 3001)

Examples:
  # stdio transport (default)
  unichat-mcp-server

  # SSE transport on a custom port
  unichat-mcp-server --sse --port 8080

  # Settings from a YAML file, environment still wins
  unichat-mcp-server --config unichat.yml
        """,
    )

    transport = parser.add_mutually_exclusive_group()
    transport.add_argument(
        "--stdio",
        dest="transport",
        action="store_const",
        const=Transport.STDIO.value,
        help="Serve over stdin/stdout (default)",
    )
    transport.add_argument(
        "--sse",
        dest="transport",
        action="store_const",
        const=Transport.SSE.value,
        help="Serve over HTTP with server-sent events",
    )

    parser.add_argument("--config", "-c", type=str, default=None, help="YAML config file")
    parser.add_argument("--host", type=str, default=None, help="SSE bind address (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=None, help="SSE listen port (default: 3001)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=LOG_FORMATS,
        help="Log line format (default: text)",
    )
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    return parser


async def serve(config: ServerConfig) -> None:
    """Start the configured transport; returns when it stops."""
    backend = ChatBackend(config)

    if config.transport is Transport.SSE:
        await serve_sse(backend, config)
    else:
        await serve_stdio(backend)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server.

    Returns:
        Exit code (0 for success, 1 for configuration or server errors)
    """
    args = build_parser().parse_args(argv)

    # Until the config is known, log errors to stderr with defaults
    configure_logging(args.log_level or "INFO", args.log_format or "text")

    try:
        config = load_config(
            args.config,
            transport=args.transport,
            host=args.host,
            port=args.port,
            log_level=args.log_level,
            log_format=args.log_format,
        )
        configure_logging(config.log_level, config.log_format)
        asyncio.run(serve(config))
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.exception("Server error: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
