"""Game list screen: search, filter by category, edit and delete games."""

import asyncio
from typing import Any, ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.markup import escape
from textual.widgets import Input, Select, Static

import structlog

from game_catalog.models.catalog import Category, Game
from game_catalog.services.api_client import ResourceApi
from game_catalog.services.sync import filter_games

from .resource_list import ResourceListScreen

log = structlog.stdlib.get_logger()


def format_price(price: float) -> str:
    return f"{price:.2f}"


class GameListScreen(ResourceListScreen):
    """Browse games with live text search and a category filter.

    Filtering is local: every keystroke or category change recomputes the
    visible rows from the games fetched on load.
    """

    SCREEN_TITLE: ClassVar[str] = "Games"
    SCREEN_NAME: ClassVar[str] = "game_list"
    RESOURCE_LABEL: ClassVar[str] = "game"
    RESOURCE_LABEL_PLURAL: ClassVar[str] = "games"
    FORM_SCREEN: ClassVar[str] = "game_form"
    EMPTY_MESSAGE: ClassVar[str] = "No games registered yet. Press 'n' to add the first game to the catalog!"
    NO_MATCH_MESSAGE: ClassVar[str] = "No games found. Try adjusting the search filters."

    BINDINGS: ClassVar[list[Binding]] = [
        *ResourceListScreen.BINDINGS,
        Binding("/", "focus_search", "Search", show=True),
    ]

    CSS: ClassVar[str] = """
    GameListScreen {
        align: center middle;
    }

    #list-container {
        width: 95%;
        height: 95%;
        padding: 1 2;
        border: solid $primary;
    }

    #search-row {
        height: 3;
    }

    #search-input {
        width: 2fr;
    }

    #category-select {
        width: 1fr;
        margin-left: 1;
    }

    #records-table {
        height: 1fr;
    }

    #game-details {
        height: auto;
        max-height: 6;
        padding: 0 1;
        color: $text-muted;
        border: solid $primary-darken-2;
    }

    #empty-state {
        text-align: center;
        color: $text-muted;
        padding: 2;
    }

    #button-row {
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #button-row Button {
        margin: 0 1;
    }
    """

    _search_text: str
    _category_filter: int | None
    _categories: list[Category]

    def __init__(self) -> None:
        super().__init__()
        self._search_text = ""
        self._category_filter = None
        self._categories = []

    @override
    def compose(self) -> ComposeResult:
        with Container(id="list-container"):
            yield self.create_title_widget("🎮 Games")
            yield from self.compose_list()
            yield Static("", id="game-details")

    @override
    def compose_filters(self) -> ComposeResult:
        with Horizontal(id="search-row"):
            yield Input(
                placeholder="Search by game name or developer...",
                id="search-input",
            )
            yield Select[int](
                [],
                prompt="All categories",
                id="category-select",
            )

    @override
    def resource(self) -> ResourceApi[Any]:
        return self.api.games

    @override
    def table_columns(self) -> tuple[str, ...]:
        return ("Name", "Category", "Developer", "Release", "Price")

    @override
    def row_for(self, item: Game) -> tuple[str, ...]:
        return (
            escape(item.name[:50]),
            escape(item.category_name),
            escape(item.developer[:30]),
            item.release_date.strftime("%d/%m/%Y"),
            format_price(item.price),
        )

    @override
    def filter_items(self, items: list[Game]) -> list[Game]:
        return filter_games(items, self._search_text, self._category_filter)

    @override
    async def fetch(self) -> None:
        games, categories = await asyncio.gather(
            self.api.games.list(),
            self.api.categories.list(),
        )
        self._categories = categories
        self._set_category_options()
        self._records.replace(games)

    def _set_category_options(self) -> None:
        select = self.query_one("#category-select", Select)
        current = self._category_filter
        select.set_options([(escape(c.name), c.id) for c in self._categories])
        if current is not None and any(c.id == current for c in self._categories):
            select.value = current
        else:
            self._category_filter = None

    @override
    def after_render(self) -> None:
        count = len(self._records.visible)
        noun = "game" if count == 1 else "games"
        self.query_one("#list-heading", Static).update(f"{noun.capitalize()} ({count} found)")
        self._show_selected_details()

    def _show_selected_details(self) -> None:
        details = self.query_one("#game-details", Static)
        game = self.selected_item()
        if game is None:
            details.display = False
            return
        details.display = True
        lines = [f"[b]{escape(game.name)}[/b]  ·  {escape(game.category_name)}"]
        if game.description:
            lines.append(escape(game.description))
        lines.append(f"Developer: {escape(game.developer)}  ·  Released: {game.release_date.strftime('%d/%m/%Y')}")
        details.update("\n".join(lines))

    @override
    def on_data_table_row_highlighted(self, event: Any) -> None:
        super().on_data_table_row_highlighted(event)
        self._show_selected_details()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Live filtering on each keystroke."""
        if event.input.id == "search-input":
            self._search_text = event.value
            self.refilter()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "category-select":
            value = event.value
            self._category_filter = value if isinstance(value, int) and not isinstance(value, bool) else None
            log.debug("Category filter changed", category_id=self._category_filter)
            self.refilter()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()
