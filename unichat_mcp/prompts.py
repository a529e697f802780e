"""Prompt template registry.

Four fixed prompt kinds turn a piece of code into a system instruction for
the chat backend. Each kind has a definition (what ``prompts/list``
advertises) and a template with ``{code}`` and ``{changes}`` placeholders.

Placeholders are substituted once each, first occurrence only, so a template
must mention each placeholder at most once.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from unichat_mcp.errors import MissingArgumentError, UnknownPromptError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptArgumentSpec:
    name: str
    description: str
    required: bool


@dataclass(frozen=True)
class PromptDefinition:
    name: str
    description: str
    arguments: tuple[PromptArgumentSpec, ...]


_CODE_REVIEW = """\
You are a senior software engineer conducting a thorough code review.
Review the following code for:
- Best practices
- Potential bugs
- Performance issues
- Security concerns
- Code style and readability

Code to review:
{code}"""

_DOCUMENT_CODE = """\
You are a technical documentation expert.
Generate comprehensive documentation for the following code.
Include:
- Overview
- Function/class documentation
- Parameter descriptions
- Return value descriptions
- Usage examples

Code to document:
{code}"""

_EXPLAIN_CODE = """\
You are a programming instructor explaining code to a beginner level programmer.
Explain how the following code works:

{code}

Break down:
- Overall purpose
- Key components
- How it works step by step
- Any important concepts used"""

_CODE_REWORK = """\
You are a software architect specializing in code optimization and modernization.
With a focus on:
- Modernizing syntax and approaches
- Improving structure and organization
- Enhancing maintainability
- Optimizing performance
- Applying current best practices
Do: {changes}

Code to transform:
{code}"""


def _code_arg(description: str) -> PromptArgumentSpec:
    return PromptArgumentSpec(name="code", description=description, required=True)


class PromptKind(Enum):
    """The registered prompts, in advertised order."""

    CODE_REVIEW = (
        PromptDefinition(
            name="code_review",
            description="Review code for best practices, potential issues, and improvements",
            arguments=(_code_arg("The code to review"),),
        ),
        _CODE_REVIEW,
    )
    DOCUMENT_CODE = (
        PromptDefinition(
            name="document_code",
            description="Generate documentation for code including docstrings and comments",
            arguments=(_code_arg("The code to document"),),
        ),
        _DOCUMENT_CODE,
    )
    EXPLAIN_CODE = (
        PromptDefinition(
            name="explain_code",
            description="Explain how a piece of code works in detail",
            arguments=(_code_arg("The code to explain"),),
        ),
        _EXPLAIN_CODE,
    )
    CODE_REWORK = (
        PromptDefinition(
            name="code_rework",
            description="Apply requested changes to the provided code",
            arguments=(
                PromptArgumentSpec(
                    name="changes", description="The changes to apply", required=False
                ),
                _code_arg("The code to rework"),
            ),
        ),
        _CODE_REWORK,
    )

    def __init__(self, definition: PromptDefinition, template: str) -> None:
        self.definition = definition
        self.template = template

    @property
    def prompt_name(self) -> str:
        return self.definition.name

    @classmethod
    def lookup(cls, name: str) -> "PromptKind":
        """Resolve a prompt name.

        Raises:
            UnknownPromptError: If ``name`` is not registered
        """
        for kind in cls:
            if kind.definition.name == name:
                return kind
        logger.error("Prompt not found: %s", name)
        raise UnknownPromptError(name)


def list_definitions() -> list[PromptDefinition]:
    """Prompt definitions in registration order."""
    return [kind.definition for kind in PromptKind]


def render(name: str, args: Mapping[str, Any] | None) -> str:
    """Render the system instruction for prompt ``name``.

    Args:
        name: Registered prompt name
        args: Prompt arguments; ``code`` is required, ``changes`` optional

    Returns:
        Template text with placeholders substituted

    Raises:
        UnknownPromptError: If ``name`` is not registered
        MissingArgumentError: If ``code`` is absent or empty
    """
    kind = PromptKind.lookup(name)
    args = args or {}

    code = args.get("code")
    if not code:
        logger.error("Missing required code argument")
        raise MissingArgumentError("code")

    logger.debug("Formatting prompt template %s", kind.prompt_name)
    return kind.template.replace("{code}", str(code), 1).replace(
        "{changes}", str(args.get("changes") or ""), 1
    )
