"""Request schemas and validation for the unichat tool.

The ``unichat`` tool accepts exactly one system message followed by one user
message. ``validate_messages`` enforces that shape and returns typed
``ChatMessage`` objects ready to be packed into a ``ChatInvocation``.

Example:
    from unichat_mcp.server.schemas import ChatInvocation, validate_messages

    messages = validate_messages([
        {"role": "system", "content": "You are helpful"},
        {"role": "user", "content": "2+2?"},
    ])
    invocation = ChatInvocation(model="gpt-4o-mini", messages=tuple(messages))
"""

import logging
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from unichat_mcp.errors import MessageValidationError

logger = logging.getLogger(__name__)

Role = Literal["system", "user"]


class MessageCheck(str, Enum):
    """Which rule a rejected message sequence broke."""

    MALFORMED = "malformed"
    WRONG_COUNT = "wrong_count"
    WRONG_FIRST_ROLE = "wrong_first_role"
    WRONG_SECOND_ROLE = "wrong_second_role"


class ChatMessage(BaseModel):
    """One message of a chat invocation."""

    role: Role = Field(..., description="Either 'system' or 'user'")
    content: str = Field(..., description="Message text")

    model_config = ConfigDict(frozen=True, extra="ignore")


class ChatInvocation(BaseModel):
    """A single (system, user) exchange submitted to the chat backend."""

    model: str = Field(..., min_length=1)
    messages: tuple[ChatMessage, ChatMessage]
    stream: Literal[False] = False

    model_config = ConfigDict(frozen=True)

    def as_payload(self) -> list[dict[str, str]]:
        """Messages in the chat completions wire shape."""
        return [message.model_dump() for message in self.messages]


UNICHAT_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "messages": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "role": {
                        "type": "string",
                        "description": "The role of the message sender. Must be either 'system' or 'user'",
                        "enum": ["system", "user"],
                    },
                    "content": {
                        "type": "string",
                        "description": (
                            "The content of the message. For system messages, this should "
                            "define the context or task. For user messages, this should "
                            "contain the specific query."
                        ),
                    },
                },
                "required": ["role", "content"],
            },
            "minItems": 2,
            "maxItems": 2,
            "description": (
                "Array of exactly two messages: first a system message defining the task, "
                "then a user message with the specific query"
            ),
        },
    },
    "required": ["messages"],
}


def _role_of(item: Any) -> Any:
    if isinstance(item, ChatMessage):
        return item.role
    if isinstance(item, dict):
        return item.get("role")
    return None


def validate_messages(messages: Any) -> list[ChatMessage]:
    """Check that ``messages`` is exactly a (system, user) pair.

    Args:
        messages: Raw ``messages`` argument of a tool call

    Returns:
        The two messages as ChatMessage objects

    Raises:
        MessageValidationError: With ``reason`` set to the MessageCheck that failed
    """
    if not isinstance(messages, list | tuple):
        msg = "Messages must be an array of {role, content} objects"
        raise MessageValidationError(msg, MessageCheck.MALFORMED.value)

    logger.debug("Validating messages: %s messages received", len(messages))

    if len(messages) != 2:
        logger.error("Invalid number of messages: %s", len(messages))
        msg = "Exactly two messages are required: one system message and one user message"
        raise MessageValidationError(msg, MessageCheck.WRONG_COUNT.value)

    if _role_of(messages[0]) != "system":
        logger.error("First message has incorrect role")
        msg = "First message must have role 'system'"
        raise MessageValidationError(msg, MessageCheck.WRONG_FIRST_ROLE.value)

    if _role_of(messages[1]) != "user":
        logger.error("Second message has incorrect role")
        msg = "Second message must have role 'user'"
        raise MessageValidationError(msg, MessageCheck.WRONG_SECOND_ROLE.value)

    try:
        return [ChatMessage.model_validate(item) for item in messages]
    except PydanticValidationError as e:
        logger.error("Malformed message: %s", e)
        msg = "Each message must have a string 'content'"
        raise MessageValidationError(msg, MessageCheck.MALFORMED.value) from e
