"""MCP Server Core - Protocol Implementation.

This package contains the MCP protocol side of the server:
- mcp_server.py: Capability handler set (tools, prompts, logging)
- schemas.py: Message validation for the unichat tool
- formatting.py: Completion text to MCP content
- stdio_transport.py: stdio transport
- http_transport.py: HTTP + SSE transport
- config.py: Server configuration
"""
