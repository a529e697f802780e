"""Tests for the command-line entry point."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest

from unichat_mcp import cli
from unichat_mcp.providers.chat_backend import ChatBackend
from unichat_mcp.server.config import ServerConfig, Transport

ENV = {"UNICHAT_MODEL": "gpt-4o-mini", "UNICHAT_API_KEY": "sk-test"}


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    """Keep main() from replacing the test run's root log handlers."""
    with patch("unichat_mcp.cli.configure_logging"):
        yield


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("UNICHAT_MODEL", "UNICHAT_API_KEY", "UNICHAT_TRANSPORT", "PORT"):
        monkeypatch.delenv(key, raising=False)
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)


class TestParser:
    """Test argument parsing."""

    def test_defaults(self) -> None:
        args = cli.build_parser().parse_args([])

        assert args.transport is None
        assert args.port is None

    def test_sse(self) -> None:
        args = cli.build_parser().parse_args(["--sse", "--port", "8080"])

        assert args.transport == "sse"
        assert args.port == 8080

    def test_transports_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--stdio", "--sse"])

    def test_log_level_case_insensitive(self) -> None:
        assert cli.build_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"


class TestMain:
    """Test startup and exit codes."""

    @pytest.mark.usefixtures("env")
    def test_defaults_to_stdio(self) -> None:
        with (
            patch("unichat_mcp.cli.serve_stdio", new_callable=AsyncMock) as stdio,
            patch("unichat_mcp.cli.serve_sse", new_callable=AsyncMock) as sse,
        ):
            assert cli.main([]) == 0

        stdio.assert_awaited_once()
        assert isinstance(stdio.await_args.args[0], ChatBackend)
        sse.assert_not_awaited()

    @pytest.mark.usefixtures("env")
    def test_sse_selected(self) -> None:
        with (
            patch("unichat_mcp.cli.serve_stdio", new_callable=AsyncMock) as stdio,
            patch("unichat_mcp.cli.serve_sse", new_callable=AsyncMock) as sse,
        ):
            assert cli.main(["--sse", "--port", "3002"]) == 0

        stdio.assert_not_awaited()
        config: ServerConfig = sse.await_args.args[1]
        assert config.transport is Transport.SSE
        assert config.port == 3002

    def test_missing_model(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("UNICHAT_MODEL", raising=False)
        monkeypatch.setenv("UNICHAT_API_KEY", "sk-test")

        with patch("unichat_mcp.cli.serve_stdio", new_callable=AsyncMock) as stdio:
            assert cli.main([]) == 1

        stdio.assert_not_awaited()

    @pytest.mark.usefixtures("env")
    def test_unsupported_model_never_serves(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an unknown model stops startup before any handler exists."""
        monkeypatch.setenv("UNICHAT_MODEL", "gpt-imaginary")

        with (
            patch("unichat_mcp.cli.serve_stdio", new_callable=AsyncMock) as stdio,
            patch("unichat_mcp.cli.serve_sse", new_callable=AsyncMock) as sse,
            patch("unichat_mcp.server.mcp_server.UnichatMCPServer.__init__") as handler_init,
        ):
            assert cli.main(["--sse"]) == 1

        stdio.assert_not_awaited()
        sse.assert_not_awaited()
        handler_init.assert_not_called()

    @pytest.mark.usefixtures("env")
    def test_server_error(self) -> None:
        with patch(
            "unichat_mcp.cli.serve_stdio", new_callable=AsyncMock, side_effect=OSError("closed")
        ):
            assert cli.main([]) == 1
