"""
Unichat MCP Server

Exposes a chat-completion tool and four code prompts over the Model Context
Protocol, bridging each request to one configured chat model.

Modules:
- unichat_mcp.server: MCP handlers, schemas, config and transports
- unichat_mcp.providers: model catalog and chat backend adapter
- unichat_mcp.prompts: prompt template registry
- unichat_mcp.errors: error taxonomy
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("unichat-mcp-server")
except PackageNotFoundError:
    # Development checkout, not installed via pip
    __version__ = "0.1.0"

__all__ = ["__version__"]
