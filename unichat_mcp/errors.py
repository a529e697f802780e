"""Error types for the unichat MCP server.

Every error carries an ``ErrorKind`` discriminant so callers can branch on
the failure category without matching on concrete classes:

- CONFIGURATION: fatal at startup (missing/invalid model or credential)
- VALIDATION: bad request shape, unknown tool/prompt, missing arguments
- BACKEND: the chat-completion call failed or returned nothing usable
- FORMATTING: output shaping failed (never surfaced to callers)
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure category attached to every ``UnichatError``."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    BACKEND = "backend"
    FORMATTING = "formatting"


class UnichatError(Exception):
    """Base exception for all server errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(UnichatError):
    """Startup configuration is missing or invalid."""

    kind = ErrorKind.CONFIGURATION


class ValidationError(UnichatError):
    """A request failed validation at the handler boundary."""

    kind = ErrorKind.VALIDATION


class MessageValidationError(ValidationError):
    """Chat messages do not form a (system, user) pair."""

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason  # One of schemas.MessageCheck values


class UnknownToolError(ValidationError):
    """Tool name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownPromptError(ValidationError):
    """Prompt name is not one of the registered prompt kinds."""

    def __init__(self, name: str) -> None:
        super().__init__("Unknown prompt")
        self.name = name


class MissingArgumentsError(ValidationError):
    """Prompt request carried no arguments at all."""

    def __init__(self) -> None:
        super().__init__("Missing arguments")


class MissingArgumentError(ValidationError):
    """A required prompt argument is absent or empty."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"Missing required argument: {argument}")
        self.argument = argument


class SessionClosedError(ValidationError):
    """Request arrived for a handler set that is not serving."""


class BackendError(UnichatError):
    """The chat backend call failed or produced no content."""

    kind = ErrorKind.BACKEND


class FormattingError(UnichatError):
    """Response text could not be normalised."""

    kind = ErrorKind.FORMATTING


class ToolInvocationError(UnichatError):
    """Caller-facing error for a failed tool or prompt completion.

    Validation and backend failures collapse into this one type so the
    protocol boundary only ever sees "An error occurred: <description>".
    """

    def __init__(self, cause: UnichatError) -> None:
        super().__init__(f"An error occurred: {cause.message}")
        self.kind = cause.kind
        self.cause = cause
