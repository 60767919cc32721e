"""Configuration data models."""

from dataclasses import asdict, dataclass
from typing import Any


DEFAULT_API_BASE_URL = "http://localhost:5000/api"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    api_base_url: str = DEFAULT_API_BASE_URL
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """Build a config from saved JSON, keeping defaults for missing keys."""
        defaults = cls()
        return cls(
            api_base_url=str(data.get("api_base_url", defaults.api_base_url)).strip(),
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
