"""Create/edit form for a game."""

from typing import Any, ClassVar, override

from textual.app import ComposeResult
from textual.markup import escape
from textual.widgets import Input, Select, TextArea

import structlog

from game_catalog.models.catalog import Game
from game_catalog.services.api_client import ResourceApi
from game_catalog.services.validation import (
    GAME_DESCRIPTION_MAX,
    GAME_DEVELOPER_MAX,
    GAME_FIELDS,
    GAME_NAME_MAX,
    FormValidationResult,
    validate_game_form,
)

from .resource_form import ResourceFormScreen

log = structlog.stdlib.get_logger()


class GameFormScreen(ResourceFormScreen):
    """Form for creating or editing a game.

    Category options are loaded from the backend when the form opens. If
    that fails the form stays usable with an empty category list.
    """

    SCREEN_TITLE: ClassVar[str] = "Game"
    SCREEN_NAME: ClassVar[str] = "game_form"
    RESOURCE_LABEL: ClassVar[str] = "game"
    FIELDS: ClassVar[tuple[str, ...]] = GAME_FIELDS

    CSS: ClassVar[str] = ResourceFormScreen.CSS + """
    GameFormScreen {
        align: center middle;
    }
    """

    @override
    def resource(self) -> ResourceApi[Any]:
        return self.api.games

    @override
    def validate(self, values: dict[str, str]) -> FormValidationResult:
        return validate_game_form(values)

    @override
    def compose_fields(self) -> ComposeResult:
        yield from self.field_group(
            "Name *",
            "name",
            Input(placeholder="Enter the game name", id="input-name", max_length=GAME_NAME_MAX),
        )
        yield from self.field_group(
            "Description",
            "description",
            TextArea(id="input-description"),
            hint=f"0/{GAME_DESCRIPTION_MAX} characters",
        )
        yield from self.field_group(
            "Release date *",
            "release_date",
            Input(placeholder="YYYY-MM-DD", id="input-release_date"),
        )
        yield from self.field_group(
            "Price *",
            "price",
            Input(placeholder="0.00", id="input-price", type="number"),
            hint="Between 0 and 999.99",
        )
        yield from self.field_group(
            "Developer *",
            "developer",
            Input(
                placeholder="Enter the developer name",
                id="input-developer",
                max_length=GAME_DEVELOPER_MAX,
            ),
        )
        yield from self.field_group(
            "Category *",
            "category_id",
            Select[int]([], prompt="Select a category", id="input-category_id"),
        )

    @override
    async def load_options(self) -> None:
        try:
            categories = await self.api.categories.list()
        except Exception as e:
            log.error("Failed to load categories for game form", error=str(e))
            return
        if not self.is_showing:
            return
        select = self.query_one("#input-category_id", Select)
        select.set_options([(escape(c.name), c.id) for c in categories])

    @override
    def values_from(self, entity: Game) -> dict[str, str]:
        return {
            "name": entity.name,
            "description": entity.description or "",
            "release_date": entity.release_date.isoformat(),
            "price": f"{entity.price:g}",
            "developer": entity.developer,
            "category_id": str(entity.category_id),
        }

    @override
    def update_hints(self) -> None:
        length = len(self.query_one("#input-description", TextArea).text)
        self.set_hint("description", f"{length}/{GAME_DESCRIPTION_MAX} characters")
