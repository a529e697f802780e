"""Shape raw completion text into MCP text content."""

import logging
from typing import Any

from mcp.types import TextContent

from unichat_mcp.errors import FormattingError

logger = logging.getLogger(__name__)


def _normalise(raw: Any) -> str:
    if not isinstance(raw, str):
        msg = f"expected completion text, got {type(raw).__name__}"
        raise FormattingError(msg)
    return raw.strip()


def format_response(raw: Any) -> TextContent:
    """Trim ``raw`` and wrap it as text content.

    Formatting never fails the request: any error while normalising is
    returned as the content text instead.
    """
    logger.debug("Formatting response")
    try:
        text = _normalise(raw)
    except FormattingError as e:
        logger.error("Error formatting response: %s", e)
        return TextContent(type="text", text=f"Error formatting response: {e}")

    logger.debug("Response formatted successfully")
    return TextContent(type="text", text=text)
