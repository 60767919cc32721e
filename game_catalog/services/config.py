"""Loading, validating and saving the JSON settings file."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

import structlog

from ..models import AppConfig
from .errors import ConfigurationError

log = structlog.stdlib.get_logger()


VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "game-catalog" / "config.json"


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_api_url(url: str) -> str | None:
    """Return an error message if url is not an absolute http(s) URL."""
    if not url.strip():
        return "API URL cannot be empty"
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        return "API URL must start with http:// or https://"
    if not parsed.netloc:
        return "API URL must include a host"
    return None


def config_field_errors(config: AppConfig) -> dict[str, str]:
    """Map each invalid AppConfig field to its error message."""
    errors: dict[str, str] = {}
    if url_error := validate_api_url(config.api_base_url):
        errors["api_base_url"] = url_error
    if config.log_level not in VALID_LOG_LEVELS:
        errors["log_level"] = f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
    return errors


class ConfigurationService:
    """Reads and writes AppConfig as JSON at ``config_path``.

    A missing, unreadable or invalid file yields the defaults; the app
    always starts.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or DEFAULT_CONFIG_PATH
        log.debug("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            log.info("Configuration file not found, using defaults", config_path=str(self.config_path))
            return AppConfig()
        except (OSError, json.JSONDecodeError) as e:
            log.error("Failed to read configuration, using defaults", error=str(e))
            return AppConfig()

        if not isinstance(data, dict):
            log.error("Configuration file is not a JSON object, using defaults")
            return AppConfig()

        config = AppConfig.from_dict(data)
        result = self.validate_config(config)
        if not result.is_valid:
            log.warning("Invalid configuration loaded, using defaults", errors=result.errors)
            return AppConfig()

        log.info("Configuration loaded", api_base_url=config.api_base_url, log_level=config.log_level)
        return config

    def save_config(self, config: AppConfig) -> None:
        """Validate and write ``config``, replacing the file atomically.

        Raises:
            ConfigurationError: If the configuration does not validate
            OSError: If the file cannot be written
        """
        result = self.validate_config(config)
        if not result.is_valid:
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(result.errors)}",
                expected="an http(s) API URL and a standard log level",
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        partial = self.config_path.with_suffix(".tmp")
        try:
            partial.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
            os.replace(partial, self.config_path)
        except OSError as e:
            log.error("Failed to save configuration", error=str(e), config_path=str(self.config_path))
            partial.unlink(missing_ok=True)
            raise

        log.info("Configuration saved", config_path=str(self.config_path))

    def validate_config(self, config: AppConfig) -> ValidationResult:
        errors = list(config_field_errors(config).values())
        return ValidationResult(not errors, errors)
