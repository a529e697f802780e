"""Shared fixtures: a validated config and a chat backend with a mocked client."""

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server.config import ServerConfig
from unichat_mcp.server.mcp_server import UnichatMCPServer


def make_completion(text: str | None) -> Any:
    """Minimal stand-in for an OpenAI ChatCompletion."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(model="gpt-4o-mini", api_key="sk-test")


@pytest.fixture
def chat_client() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion("4"))
    return client


@pytest.fixture
def backend(config: ServerConfig, chat_client: MagicMock) -> ChatBackend:
    return ChatBackend(config, client=chat_client)


@pytest.fixture
def handlers(backend: ChatBackend) -> UnichatMCPServer:
    return UnichatMCPServer(backend)
