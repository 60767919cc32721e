"""Tests for command-line parsing and the application context."""

import asyncio
from pathlib import Path

import pytest

from game_catalog.main import VERSION, ApplicationContext, CliOptions, parse_arguments
from game_catalog.models import AppConfig
from game_catalog.services import CatalogApiClient, ConfigurationService


class TestParseArguments:
    """Tests for parse_arguments."""

    def test_defaults(self) -> None:
        assert parse_arguments([]) == CliOptions()

    def test_log_level_is_case_insensitive(self) -> None:
        assert parse_arguments(["--log-level", "debug"]).log_level == "DEBUG"

    def test_all_options(self) -> None:
        args = parse_arguments([
            "--config", "cfg.json",
            "--api-url", "http://server:5000/api",
            "--log-level", "DEBUG",
            "--log-dir", "out",
        ])

        assert args.config == Path("cfg.json")
        assert args.api_url == "http://server:5000/api"
        assert args.log_level == "DEBUG"
        assert args.log_dir == Path("out")

    def test_invalid_log_level_exits(self) -> None:
        with pytest.raises(SystemExit):
            parse_arguments(["--log-level", "LOUD"])

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            parse_arguments(["--version"])

        assert VERSION in capsys.readouterr().out


class TestApplicationContext:
    """Tests for lazy service creation."""

    def test_config_comes_from_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        ConfigurationService(config_path).save_config(
            AppConfig(api_base_url="http://saved:5000/api", log_level="ERROR")
        )

        context = ApplicationContext(config_path=config_path)

        assert context.config.api_base_url == "http://saved:5000/api"
        assert context.config.log_level == "ERROR"

    def test_api_url_overrides_saved_url_only(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        ConfigurationService(config_path).save_config(
            AppConfig(api_base_url="http://saved:5000/api", log_level="ERROR")
        )

        context = ApplicationContext(config_path=config_path, api_url="http://other:8000/api")

        assert context.config.api_base_url == "http://other:8000/api"
        assert context.config.log_level == "ERROR"
        assert context.api_client.base_url == "http://other:8000/api/"

    def test_cleanup_closes_client(self, tmp_path: Path) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        client = context.api_client

        asyncio.run(context.cleanup())

        assert client._client.is_closed
        assert context.api_client is not client

    def test_adopted_client_is_closed_at_cleanup(self, tmp_path: Path) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        replacement = CatalogApiClient("http://other:8000/api")

        context.adopt_client(replacement)
        asyncio.run(context.cleanup())

        assert replacement._client.is_closed

    def test_adopting_nothing_keeps_current_client(self, tmp_path: Path) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        client = context.api_client

        context.adopt_client(None)

        assert context.api_client is client
        asyncio.run(context.cleanup())
