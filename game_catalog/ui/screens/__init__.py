"""Screen components for the TUI application."""

from typing import Any

from .base import BaseScreen
from .category_form import CategoryFormScreen
from .category_list import CategoryListScreen
from .game_form import GameFormScreen
from .game_list import GameListScreen
from .home import HomeScreen
from .resource_form import ResourceFormScreen
from .resource_list import ResourceListScreen
from .settings import SettingsScreen

# Screen registry for navigation
_SCREEN_REGISTRY: dict[str, type[BaseScreen]] = {
    "home": HomeScreen,
    "game_list": GameListScreen,
    "game_form": GameFormScreen,
    "category_list": CategoryListScreen,
    "category_form": CategoryFormScreen,
    "settings": SettingsScreen,
}


def get_screen_by_name(name: str, **params: Any) -> BaseScreen | None:
    """Get a screen instance by its registered name.

    Args:
        name: The registered name of the screen
        **params: Constructor arguments, e.g. ``entity_id`` for the forms

    Returns:
        A new instance of the screen, or None if not found
    """
    screen_class = _SCREEN_REGISTRY.get(name)
    if screen_class:
        return screen_class(**params)
    return None


def register_screen(name: str, screen_class: type[BaseScreen]) -> None:
    """Register a screen class with a name for navigation."""
    _SCREEN_REGISTRY[name] = screen_class


def get_registered_screens() -> list[str]:
    """Get a list of all registered screen names."""
    return list(_SCREEN_REGISTRY.keys())


__all__ = [
    "BaseScreen",
    "CategoryFormScreen",
    "CategoryListScreen",
    "GameFormScreen",
    "GameListScreen",
    "HomeScreen",
    "ResourceFormScreen",
    "ResourceListScreen",
    "SettingsScreen",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
