"""Chat backend adapter.

Wraps the provider's OpenAI-compatible chat completions API behind a single
``complete`` operation. One adapter is built at startup and shared read-only
by every session.
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from unichat_mcp.errors import BackendError, ConfigurationError
from unichat_mcp.providers.catalog import PROVIDER_BASE_URLS, provider_for_model
from unichat_mcp.server.config import ServerConfig
from unichat_mcp.server.schemas import ChatInvocation

logger = logging.getLogger(__name__)


class ChatBackend:
    """Submit (system, user) exchanges to the configured model."""

    def __init__(self, config: ServerConfig, client: Any = None) -> None:
        """Initialize the adapter.

        Args:
            config: Validated server configuration
            client: Pre-built AsyncOpenAI-compatible client (tests)

        Raises:
            ConfigurationError: If the model is not in the catalog
                (ServerConfig already rejects an empty model or credential)
        """
        provider = provider_for_model(config.model)
        if provider is None:
            logger.error("Invalid model specified: %s", config.model)
            msg = f"Unsupported model: {config.model}"
            raise ConfigurationError(msg)

        self._model = config.model
        self._api_key = config.api_key
        self._provider = provider
        self._base_url = config.base_url or PROVIDER_BASE_URLS.get(provider)

        # Lazy-initialize client
        self._client = client

        logger.info("Chat backend ready: provider=%s model=%s", provider, self._model)

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return self._provider

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    def build_invocation(self, messages: Any) -> ChatInvocation:
        """Pack validated messages with the configured model."""
        return ChatInvocation(model=self._model, messages=tuple(messages))

    async def complete(self, invocation: ChatInvocation) -> str:
        """Run one chat completion.

        Args:
            invocation: The (system, user) exchange

        Returns:
            Text of the first returned choice

        Raises:
            BackendError: On any client failure or an empty completion
        """
        client = self._get_client()
        logger.debug("Submitting completion to %s/%s", self._provider, invocation.model)

        try:
            response = await client.chat.completions.create(
                model=invocation.model,
                messages=invocation.as_payload(),
                stream=invocation.stream,
            )
        except Exception as e:
            logger.exception("Chat completion failed: %s", e)
            msg = f"{type(e).__name__}: {e}"
            raise BackendError(msg) from e

        choices = getattr(response, "choices", None)
        if not choices:
            msg = "Chat completion returned no choices"
            raise BackendError(msg)

        content = choices[0].message.content
        if content is None:
            msg = "Chat completion returned no content"
            raise BackendError(msg)

        return content
