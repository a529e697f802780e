"""Server configuration.

Configuration is built once at startup and passed explicitly to the chat
backend and transports; nothing reads the environment after that.

Precedence (highest to lowest):
1. Command-line overrides
2. Environment variables (UNICHAT_*, PORT)
3. YAML config file
4. Default values

Example unichat.yml:
    model: gpt-4o-mini
    transport: sse
    port: 3001
    log_level: DEBUG

Usage:
    config = load_config("unichat.yml")
    backend = ChatBackend(config)
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from unichat_mcp.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3001
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")

# Environment variable -> config field
ENV_VARS: dict[str, str] = {
    "UNICHAT_MODEL": "model",
    "UNICHAT_API_KEY": "api_key",
    "UNICHAT_BASE_URL": "base_url",
    "UNICHAT_TRANSPORT": "transport",
    "UNICHAT_HOST": "host",
    "PORT": "port",
    "UNICHAT_LOG_LEVEL": "log_level",
    "UNICHAT_LOG_FORMAT": "log_format",
}


class Transport(str, Enum):
    """Transport binding; exactly one is active per process."""

    STDIO = "stdio"
    SSE = "sse"


@dataclass(frozen=True)
class ServerConfig:
    """Validated process-wide settings.

    Attributes:
        model: Chat model identifier (must be in the provider catalog)
        api_key: Credential for the model's provider
        transport: Which binding to serve on
        host: Bind address for the SSE binding
        port: Listen port for the SSE binding
        sse_path: Event-stream endpoint path
        message_path: Endpoint receiving posted client messages
        log_level: Root log level name
        log_format: "text" or "json" log lines
        base_url: Override for the provider's OpenAI-compatible endpoint
    """

    model: str
    api_key: str = ""
    transport: Transport = Transport.STDIO
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    sse_path: str = "/sse"
    message_path: str = "/message/"
    log_level: str = "INFO"
    log_format: str = "text"
    base_url: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.model:
            msg = "UNICHAT_MODEL environment variable required"
            raise ConfigurationError(msg)

        if not self.api_key:
            msg = "UNICHAT_API_KEY environment variable required"
            raise ConfigurationError(msg)

        if not isinstance(self.transport, Transport):
            msg = f"transport must be a Transport, got {self.transport!r}"
            raise ConfigurationError(msg)

        if not (0 < self.port < 65536):
            msg = f"port must be 1-65535, got {self.port}"
            raise ConfigurationError(msg)

        for name in ("sse_path", "message_path"):
            value = getattr(self, name)
            if not value.startswith("/"):
                msg = f"{name} must start with '/', got '{value}'"
                raise ConfigurationError(msg)

        if self.log_level not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'"
            raise ConfigurationError(msg)

        if self.log_format not in LOG_FORMATS:
            msg = f"log_format must be 'text' or 'json', got '{self.log_format}'"
            raise ConfigurationError(msg)

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks
        return (
            f"ServerConfig(model={self.model!r}, transport={self.transport.value!r}, "
            f"host={self.host!r}, port={self.port}, log_level={self.log_level!r})"
        )


def _read_yaml(config_path: str | Path) -> dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise ConfigurationError(msg)

    try:
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {path}: {e}"
        raise ConfigurationError(msg) from e

    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)

    known = {f.name for f in fields(ServerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown config keys in {path}: {', '.join(unknown)}"
        raise ConfigurationError(msg)

    logger.debug("Loaded config file %s", path)
    return data


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Convert raw string/YAML values into field types."""
    coerced = dict(values)

    if "transport" in coerced and not isinstance(coerced["transport"], Transport):
        try:
            coerced["transport"] = Transport(str(coerced["transport"]).lower())
        except ValueError:
            msg = f"transport must be 'stdio' or 'sse', got '{coerced['transport']}'"
            raise ConfigurationError(msg) from None

    if "port" in coerced:
        try:
            coerced["port"] = int(coerced["port"])
        except (TypeError, ValueError):
            msg = f"port must be an integer, got '{coerced['port']}'"
            raise ConfigurationError(msg) from None

    if "log_level" in coerced:
        coerced["log_level"] = str(coerced["log_level"]).upper()

    for key in ("model", "api_key", "host", "base_url"):
        if coerced.get(key) is not None:
            coerced[key] = str(coerced[key]).strip()

    return coerced


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ServerConfig:
    """Build the server configuration.

    Args:
        config_path: Optional YAML file with ServerConfig fields
        env: Environment mapping (defaults to os.environ)
        **overrides: Field values from the command line; None values are ignored

    Returns:
        Validated ServerConfig

    Raises:
        ConfigurationError: If any setting is missing or invalid
    """
    env = os.environ if env is None else env
    values: dict[str, Any] = {"model": ""}

    if config_path is not None:
        values.update(_read_yaml(config_path))

    for var, field_name in ENV_VARS.items():
        if env.get(var):
            values[field_name] = env[var]

    values.update({k: v for k, v in overrides.items() if v is not None})

    values = _coerce(values)
    if values.get("base_url") == "":
        values["base_url"] = None

    return ServerConfig(**values)
