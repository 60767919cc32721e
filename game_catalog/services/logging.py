"""Structured logging for the Game Catalog application.

structlog renders each event and the standard library handlers decide where
it goes. The TUI owns the terminal, so in TUI mode events only go to the
rotating files under the log directory.

Environment variables:
    ENVIRONMENT: "development" (default) renders readable console output
    LOG_FORMAT: "json" or "console", overriding the environment default
    LOG_MAX_BYTES: size at which a log file rotates (default 5MB)
    LOG_BACKUP_COUNT: rotated files to keep (default 3)
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog
from structlog.typing import Processor


APP_LOG_NAME = "catalog.log"
ERROR_LOG_NAME = "error.log"

_ERROR_HANDLER_NAME = "catalog-errors"

# Libraries that log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _level_number(log_level: str) -> int:
    return logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)


def _quiet_chatty_loggers(level: int) -> None:
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


class LoggingService:
    """Configures structlog on top of the standard library logging handlers."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
    ) -> None:
        """
        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for catalog.log and error.log (None for no files)
            tui_mode: If True, never write to the console
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.is_development = os.getenv("ENVIRONMENT", "development") == "development"

    @property
    def renders_json(self) -> bool:
        log_format = os.getenv("LOG_FORMAT", "").lower()
        if log_format:
            return log_format == "json"
        return not (self.is_development and self.log_dir is None)

    def build_handlers(self) -> list[logging.Handler]:
        handlers: list[logging.Handler] = []
        if not self.tui_mode:
            handlers.append(logging.StreamHandler(sys.stdout))

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            max_bytes = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
            backup_count = int(os.getenv("LOG_BACKUP_COUNT", "3"))

            handlers.append(RotatingFileHandler(
                self.log_dir / APP_LOG_NAME,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            ))

            error_handler = RotatingFileHandler(
                self.log_dir / ERROR_LOG_NAME,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            error_handler.set_name(_ERROR_HANDLER_NAME)
            error_handler.setLevel(logging.ERROR)
            handlers.append(error_handler)

        # No handler at all would let logging's last-resort handler print to stderr
        return handlers or [logging.NullHandler()]

    def processors(self) -> list[Processor]:
        shared: list[Processor] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]
        if self.renders_json:
            return [
                *shared,
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer(),
            ]
        return [
            *shared,
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    def configure(self) -> None:
        level = _level_number(self.log_level)
        logging.basicConfig(
            format="%(message)s",
            handlers=self.build_handlers(),
            level=level,
            force=True,
        )
        _quiet_chatty_loggers(level)

        structlog.configure(
            processors=self.processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
    tui_mode: bool = False,
) -> LoggingService:
    """Configure logging for the whole process.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: Overrides the ENVIRONMENT variable when given
        tui_mode: If True, disable console logging

    Returns:
        The configured LoggingService
    """
    if environment:
        os.environ["ENVIRONMENT"] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir, tui_mode=tui_mode)
    service.configure()
    return service


def set_log_level(log_level: str) -> None:
    """Change the capture level of an already configured setup.

    error.log keeps its ERROR threshold.
    """
    level = _level_number(log_level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        if handler.get_name() != _ERROR_HANDLER_NAME:
            handler.setLevel(level)
    _quiet_chatty_loggers(level)
