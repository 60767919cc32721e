"""Tests for the logging service."""

import json
import logging
import os
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, strategies as st

from game_catalog.services.logging import (
    APP_LOG_NAME,
    ERROR_LOG_NAME,
    LoggingService,
    set_log_level,
    setup_logging,
)


RESERVED_KEYS = {
    "event", "level", "logger", "timestamp", "self",
    "exc_info", "stack_info", "exception", "positional_args",
}


def read_events(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestLoggingService:
    """Test cases for LoggingService."""

    def test_development_logging_format(self) -> None:
        """Development logging without a log directory is human-readable."""
        with patch.dict(os.environ, {"ENVIRONMENT": "development"}):
            with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
                service = LoggingService(log_level="INFO")
                service.configure()

                logger = service.get_logger("test")
                logger.info("test message", key="value")

                output = mock_stdout.getvalue()

        assert "test message" in output
        assert not output.strip().startswith("{")

    def test_file_logging_setup(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            service = LoggingService(log_level="INFO", log_dir=tmp_path)
            service.configure()

            logger = service.get_logger("test")
            logger.info("test file message", data="test")

        app_log = tmp_path / APP_LOG_NAME
        assert app_log.name == "catalog.log"
        assert app_log.exists()
        assert (tmp_path / ERROR_LOG_NAME).exists()

        events = [e for e in read_events(app_log) if e["event"] == "test file message"]
        assert len(events) == 1
        assert events[0]["data"] == "test"
        assert events[0]["level"] == "info"

    def test_error_file_only_receives_errors(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            service = LoggingService(log_level="DEBUG", log_dir=tmp_path)
            service.configure()

            logger = service.get_logger("test")
            logger.info("routine message")
            logger.error("test error message", status_code=500)

        events = read_events(tmp_path / ERROR_LOG_NAME)
        assert [e["event"] for e in events] == ["test error message"]
        assert events[0]["status_code"] == 500
        assert events[0]["level"] == "error"

    def test_tui_mode_has_no_console_handler(self, tmp_path: Path) -> None:
        service = LoggingService(log_level="INFO", log_dir=tmp_path, tui_mode=True)
        service.configure()

        handlers = logging.getLogger().handlers
        assert handlers
        assert all(isinstance(h, logging.FileHandler) for h in handlers)

    def test_httpx_request_logging_is_quiet(self) -> None:
        service = LoggingService(log_level="DEBUG", tui_mode=True)
        service.configure()

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_set_log_level_keeps_error_threshold(self, tmp_path: Path) -> None:
        service = LoggingService(log_level="INFO", log_dir=tmp_path, tui_mode=True)
        service.configure()

        set_log_level("DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        levels = {Path(h.baseFilename).name: h.level for h in root.handlers if isinstance(h, logging.FileHandler)}
        assert levels == {APP_LOG_NAME: logging.DEBUG, ERROR_LOG_NAME: logging.ERROR}


class TestStructuredLoggingProperties:
    """Property-based tests for structured logging consistency."""

    @given(
        log_level=st.sampled_from(["debug", "info", "warning", "error", "critical"]),
        message=st.text(min_size=1, max_size=200),
        context_data=st.dictionaries(
            keys=st.text(min_size=1, max_size=20).filter(lambda x: x.isidentifier() and x not in RESERVED_KEYS),
            values=st.one_of(
                st.text(max_size=100),
                st.integers(),
                st.booleans(),
            ),
            max_size=5,
        ),
    )
    def test_structured_logging_consistency(
        self,
        log_level: str,
        message: str,
        context_data: dict[str, str | int | bool],
    ) -> None:
        """Every record keeps its event, level, logger name and key/value context."""
        stream = StringIO()
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            with patch("sys.stdout", stream):
                service = LoggingService(log_level="DEBUG")
                service.configure()
                logger = service.get_logger("catalog_test")
                getattr(logger, log_level)(message, **context_data)

        lines = [line for line in stream.getvalue().splitlines() if line.strip()]
        parsed = json.loads(lines[-1])

        assert parsed["event"] == message
        assert parsed["level"] == log_level
        assert parsed["logger"] == "catalog_test"
        assert "T" in parsed["timestamp"]
        for key, value in context_data.items():
            assert parsed[key] == value


def test_setup_logging_function(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    service = setup_logging(
        log_level="warning",
        log_dir=tmp_path,
        environment="production",
        tui_mode=True,
    )

    assert isinstance(service, LoggingService)
    assert service.log_level == "WARNING"
    assert os.environ["ENVIRONMENT"] == "production"
    assert logging.getLogger().level == logging.WARNING
