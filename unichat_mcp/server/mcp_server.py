"""Unichat MCP capability handlers.

This module provides the per-session MCP server that:
1. Advertises the ``unichat`` tool and the four code prompts
2. Validates tool/prompt requests
3. Maps them to a single ChatBackend completion
4. Shapes the reply into MCP content

Architecture:
- Transport → UnichatMCPServer (one per session) → ChatBackend (shared)
- Validation and backend failures surface as one generic
  "An error occurred: ..." error; the specific kind is only logged

Example:
    backend = ChatBackend(load_config())
    handlers = UnichatMCPServer(backend)

    async with stdio_server() as (read, write):
        await handlers.server.run(read, write, handlers.initialization_options())
"""

import logging
from enum import Enum
from typing import Any

from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.session import ServerSession
from mcp.types import (
    GetPromptResult,
    LoggingLevel,
    Prompt,
    PromptArgument,
    PromptMessage,
    TextContent,
    Tool,
)

from unichat_mcp import __version__, prompts
from unichat_mcp.errors import (
    BackendError,
    MissingArgumentsError,
    SessionClosedError,
    ToolInvocationError,
    UnknownToolError,
    ValidationError,
)
from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server.formatting import format_response
from unichat_mcp.server.schemas import UNICHAT_INPUT_SCHEMA, validate_messages

logger = logging.getLogger(__name__)

SERVER_NAME = "unichat-mcp-server"
TOOL_NAME = "unichat"
ANALYSIS_REQUEST = "Please provide your analysis."
PROMPT_RESULT_DESCRIPTION = "Requested code manipulation"

TOOL_DESCRIPTION = """Chat with an assistant.
Messages must follow a specific structure:
- First message should be a system message defining the task or context
- Second message should be a user message containing the specific query or request

Example tool use message:
Ask the unichat to review and evaluate your proposal."""


class HandlerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class UnichatMCPServer:
    """Capability handler set bound to one session.

    Attributes:
        backend: Shared chat backend
        server: Low-level MCP server with all handlers registered
        state: Lifecycle state; requests are served only while READY
        logging_level: Last level requested by the client, if any
    """

    def __init__(self, backend: ChatBackend, server_name: str | None = None) -> None:
        """Build the handler set and register it on a fresh MCP server.

        Args:
            backend: Validated chat backend shared across sessions
            server_name: Optional override for the advertised server name
        """
        self.state = HandlerState.UNINITIALIZED
        self.backend = backend
        self.logging_level: LoggingLevel | None = None

        self.server: Server = Server(server_name or SERVER_NAME, version=__version__)
        self._register_handlers()

        self.state = HandlerState.READY
        logger.debug("Handler set ready for model %s", backend.model)

    def _register_handlers(self) -> None:
        """Attach request handlers to the MCP server."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
            return await self.call_tool(name, arguments)

        @self.server.list_prompts()
        async def list_prompts() -> list[Prompt]:
            return self.list_prompts()

        @self.server.get_prompt()
        async def get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
            return await self.get_prompt(name, arguments)

        @self.server.set_logging_level()
        async def set_logging_level(level: LoggingLevel) -> None:
            await self.set_logging_level(level, self.server.request_context.session)

    def initialization_options(self) -> InitializationOptions:
        """Handshake options; capabilities derive from the registered handlers."""
        return self.server.create_initialization_options()

    def close(self) -> None:
        """Stop serving; called by the transport when the channel goes away."""
        if self.state is not HandlerState.CLOSED:
            logger.debug("Handler set closed")
        self.state = HandlerState.CLOSED

    def _require_ready(self) -> None:
        if self.state is not HandlerState.READY:
            msg = f"Session is not serving requests (state: {self.state.value})"
            raise SessionClosedError(msg)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def list_tools(self) -> list[Tool]:
        self._require_ready()
        return [
            Tool(
                name=TOOL_NAME,
                description=TOOL_DESCRIPTION,
                inputSchema=UNICHAT_INPUT_SCHEMA,
            )
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Run the ``unichat`` tool.

        Args:
            name: Requested tool name
            arguments: Tool arguments; must hold ``messages``

        Returns:
            One text content item with the trimmed completion

        Raises:
            UnknownToolError: If ``name`` is not ``unichat``
            ToolInvocationError: If validation or the backend call fails
        """
        self._require_ready()

        if name != TOOL_NAME:
            logger.error("Unknown tool requested: %s", name)
            raise UnknownToolError(name)

        try:
            messages = validate_messages((arguments or {}).get("messages"))
            invocation = self.backend.build_invocation(messages)
            response = await self.backend.complete(invocation)
        except (ValidationError, BackendError) as e:
            logger.error("Error calling tool (%s): %s", e.kind.value, e)
            raise ToolInvocationError(e) from e

        return [format_response(response)]

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def list_prompts(self) -> list[Prompt]:
        self._require_ready()
        return [
            Prompt(
                name=definition.name,
                description=definition.description,
                arguments=[
                    PromptArgument(name=arg.name, description=arg.description, required=arg.required)
                    for arg in definition.arguments
                ],
            )
            for definition in prompts.list_definitions()
        ]

    async def get_prompt(self, name: str, arguments: dict[str, str] | None) -> GetPromptResult:
        """Render a code prompt and return the backend's analysis.

        Args:
            name: One of the registered prompt names
            arguments: Prompt arguments (``code`` required, ``changes`` optional)

        Returns:
            GetPromptResult with one user-role message wrapping the reply

        Raises:
            UnknownPromptError: If ``name`` is not registered
            MissingArgumentsError: If ``arguments`` is absent
            MissingArgumentError: If ``code`` is absent
            ToolInvocationError: If the backend call fails
        """
        self._require_ready()

        kind = prompts.PromptKind.lookup(name)
        if arguments is None:
            logger.error("Missing arguments")
            raise MissingArgumentsError()

        system_content = prompts.render(kind.prompt_name, arguments)

        try:
            invocation = self.backend.build_invocation(
                validate_messages(
                    [
                        {"role": "system", "content": system_content},
                        {"role": "user", "content": ANALYSIS_REQUEST},
                    ]
                )
            )
            response = await self.backend.complete(invocation)
        except (ValidationError, BackendError) as e:
            logger.error("Error getting prompt completion (%s): %s", e.kind.value, e)
            raise ToolInvocationError(e) from e

        return GetPromptResult(
            description=PROMPT_RESULT_DESCRIPTION,
            messages=[PromptMessage(role="user", content=format_response(response))],
        )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    async def set_logging_level(self, level: LoggingLevel, session: ServerSession) -> None:
        """Record the client's level and echo it back as a log notification.

        The level is advisory: it does not gate any other handler.
        """
        self._require_ready()
        self.logging_level = level
        logger.info("Client logging level set to %s", level)

        await session.send_log_message(
            level="debug",
            data=f"Logging level set to: {level}",
            logger=SERVER_NAME,
        )
