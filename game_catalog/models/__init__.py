"""Data models for the Game Catalog application."""

from .catalog import Category, Game
from .config import DEFAULT_API_BASE_URL, AppConfig

__all__ = [
    "AppConfig",
    "Category",
    "DEFAULT_API_BASE_URL",
    "Game",
]
