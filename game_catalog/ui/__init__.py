"""User interface components using Textual framework."""

from .app import AppState, CatalogApp
from .screens import (
    BaseScreen,
    HomeScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)

__all__ = [
    "AppState",
    "BaseScreen",
    "CatalogApp",
    "HomeScreen",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
