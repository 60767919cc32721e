"""Category list screen."""

from typing import Any, ClassVar, override

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.markup import escape
from textual.widgets import Static

from game_catalog.models.catalog import Category
from game_catalog.services.api_client import ResourceApi
from game_catalog.services.sync import category_summary, check_category_deletable

from .resource_list import ResourceListScreen


class CategoryListScreen(ResourceListScreen):
    """List categories with their game counts.

    A category that still has games cannot be deleted; the attempt is
    refused before any confirmation or request.
    """

    SCREEN_TITLE: ClassVar[str] = "Categories"
    SCREEN_NAME: ClassVar[str] = "category_list"
    RESOURCE_LABEL: ClassVar[str] = "category"
    RESOURCE_LABEL_PLURAL: ClassVar[str] = "categories"
    FORM_SCREEN: ClassVar[str] = "category_form"
    EMPTY_MESSAGE: ClassVar[str] = "No categories registered yet. Press 'n' to create the first category!"

    CSS: ClassVar[str] = """
    CategoryListScreen {
        align: center middle;
    }

    #list-container {
        width: 90%;
        height: 95%;
        padding: 1 2;
        border: solid $primary;
    }

    #category-stats {
        height: 3;
    }

    .stat-card {
        width: 1fr;
        content-align: center middle;
        text-align: center;
        border: round $primary-darken-2;
    }

    #records-table {
        height: 1fr;
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

    @override
    def compose(self) -> ComposeResult:
        with Container(id="list-container"):
            yield self.create_title_widget("🏷️ Categories")
            yield from self.compose_list()

    @override
    def compose_filters(self) -> ComposeResult:
        with Horizontal(id="category-stats"):
            yield Static("", id="stat-categories", classes="stat-card")
            yield Static("", id="stat-games", classes="stat-card")
            yield Static("", id="stat-with-games", classes="stat-card")

    @override
    def resource(self) -> ResourceApi[Any]:
        return self.api.categories

    @override
    def table_columns(self) -> tuple[str, ...]:
        return ("Name", "Description", "Games")

    @override
    def row_for(self, item: Category) -> tuple[str, ...]:
        description = item.description or "No description"
        if len(description) > 60:
            description = description[:57] + "..."
        return (escape(item.name), escape(description), f"{item.game_count} game(s)")

    @override
    def check_deletable(self, item: Category) -> None:
        check_category_deletable(item)

    @override
    def after_render(self) -> None:
        summary = category_summary(self._records.items)
        self.query_one("#list-heading", Static).update(f"Categories ({summary.total_categories})")
        self.query_one("#stat-categories", Static).update(f"{summary.total_categories} categories")
        self.query_one("#stat-games", Static).update(f"{summary.total_games} games")
        self.query_one("#stat-with-games", Static).update(f"{summary.categories_with_games} with games")
