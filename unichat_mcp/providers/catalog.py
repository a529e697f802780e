"""Static catalog of supported chat models.

Each provider is reached through its OpenAI-compatible chat completions
endpoint, so a single ``AsyncOpenAI`` client covers the whole catalog.
"""

from types import MappingProxyType

MODELS_LIST: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "openai": (
            "gpt-4o",
            "gpt-4o-mini",
            "gpt-4.1",
            "gpt-4.1-mini",
            "gpt-4.1-nano",
            "o1",
            "o1-mini",
            "o3-mini",
        ),
        "anthropic": (
            "claude-3-5-haiku-latest",
            "claude-3-5-sonnet-latest",
            "claude-3-7-sonnet-latest",
            "claude-3-opus-latest",
        ),
        "gemini": (
            "gemini-1.5-flash",
            "gemini-1.5-pro",
            "gemini-2.0-flash",
            "gemini-2.0-flash-lite",
        ),
        "mistral": (
            "mistral-large-latest",
            "mistral-small-latest",
            "codestral-latest",
            "pixtral-large-latest",
        ),
        "xai": (
            "grok-2-latest",
            "grok-beta",
        ),
        "deepseek": (
            "deepseek-chat",
            "deepseek-reasoner",
        ),
    }
)

# None means the SDK default (api.openai.com)
PROVIDER_BASE_URLS: MappingProxyType[str, str | None] = MappingProxyType(
    {
        "openai": None,
        "anthropic": "https://api.anthropic.com/v1/",
        "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "mistral": "https://api.mistral.ai/v1",
        "xai": "https://api.x.ai/v1",
        "deepseek": "https://api.deepseek.com",
    }
)


def supported_models() -> list[str]:
    """Flattened list of every model id in the catalog."""
    return [model for models in MODELS_LIST.values() for model in models]


def provider_for_model(model: str) -> str | None:
    """Return the provider serving ``model``, or None if it is not in the catalog."""
    for provider, models in MODELS_LIST.items():
        if model in models:
            return provider
    return None
