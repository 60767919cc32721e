"""Home screen: catalog dashboard and navigation menu."""

import asyncio
from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Static

import structlog

from game_catalog.services.sync import CatalogSummary, catalog_summary

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class HomeScreen(BaseScreen):
    """Entry screen showing catalog totals and the most recent games.

    The dashboard is loaded on mount and again whenever the user returns
    from another screen. Menu options:
    - Games: browse, search and delete games
    - New game / New category: open a blank form
    - Categories: browse and delete categories
    - Settings: backend URL and log level
    """

    SCREEN_TITLE: ClassVar[str] = "Home"
    SCREEN_NAME: ClassVar[str] = "home"

    CSS: ClassVar[str] = """
    HomeScreen {
        align: center middle;
    }

    #home-container {
        width: 90;
        height: auto;
        max-height: 95%;
        padding: 1 4;
        border: solid $primary;
        background: $surface;
    }

    #home-subtitle {
        text-align: center;
        color: $text-muted;
        margin-bottom: 1;
    }

    #stats-row {
        height: 3;
    }

    .stat-card {
        width: 1fr;
        content-align: center middle;
        text-align: center;
        border: round $primary-darken-2;
    }

    #recent-games {
        height: auto;
        padding: 0 1;
    }

    #dashboard-error {
        display: none;
    }

    .menu-button {
        width: 100%;
        margin-bottom: 1;
    }

    .menu-button:focus {
        background: $primary;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Quit", show=True),
        Binding("1", "navigate('game_list')", "Games", show=False),
        Binding("2", "navigate('game_form')", "New game", show=False),
        Binding("3", "navigate('category_list')", "Categories", show=False),
        Binding("4", "navigate('category_form')", "New category", show=False),
        Binding("5", "navigate('settings')", "Settings", show=False),
        Binding("r", "refresh", "Refresh", show=True),
    ]

    # Menu options with their navigation targets
    MENU_OPTIONS: ClassVar[list[tuple[str, str, str]]] = [
        ("games", "1. Games", "game_list"),
        ("new-game", "2. New game", "game_form"),
        ("categories", "3. Categories", "category_list"),
        ("new-category", "4. New category", "category_form"),
        ("settings", "5. Settings", "settings"),
    ]

    _summary: CatalogSummary | None
    _refresh_on_resume: bool

    def __init__(self) -> None:
        super().__init__()
        self._summary = None
        self._refresh_on_resume = False

    @property
    def summary(self) -> CatalogSummary | None:
        return self._summary

    @override
    def compose(self) -> ComposeResult:
        with Container(id="home-container"):
            yield self.create_title_widget("🎮 Game Catalog")
            yield Static("Manage your games and categories", id="home-subtitle")

            with Horizontal(id="stats-row"):
                yield Static("- games", id="stat-games", classes="stat-card")
                yield Static("- categories", id="stat-categories", classes="stat-card")
                yield Static("-", id="stat-value", classes="stat-card")

            yield Static("Recent games", classes="section-title")
            yield Static("Loading...", id="recent-games", markup=False)
            yield Static("", id="dashboard-error", classes="error-banner", markup=False)

            with Vertical(id="menu-buttons"):
                for option_id, label, _ in self.MENU_OPTIONS:
                    yield Button(label, id=f"btn-{option_id}", classes="menu-button")

    async def on_mount(self) -> None:
        await super().on_mount()
        self.load_dashboard()

    def on_screen_resume(self) -> None:
        super().on_screen_resume()
        if self._refresh_on_resume:
            self._refresh_on_resume = False
            self.load_dashboard()

    def load_dashboard(self) -> None:
        self.run_worker(self._load_dashboard(), name="dashboard_worker", exclusive=True)

    async def _load_dashboard(self) -> None:
        try:
            games, categories = await asyncio.gather(
                self.api.games.list(),
                self.api.categories.list(),
            )
        except Exception as e:
            if self.is_showing:
                report = self.report_failure(e, "load dashboard", notify=False)
                self._show_error(report.message)
            return

        if not self.is_showing:
            return
        self._summary = catalog_summary(games, categories)
        self._render_summary(self._summary)
        log.info(
            "Dashboard loaded",
            total_games=self._summary.total_games,
            total_categories=self._summary.total_categories,
        )

    def _show_error(self, message: str) -> None:
        error = self.query_one("#dashboard-error", Static)
        error.update(f"Error loading data: {message}")
        error.display = True
        self.query_one("#recent-games", Static).update("")

    def _render_summary(self, summary: CatalogSummary) -> None:
        self.query_one("#dashboard-error", Static).display = False
        self.query_one("#stat-games", Static).update(f"{summary.total_games} games")
        self.query_one("#stat-categories", Static).update(f"{summary.total_categories} categories")
        self.query_one("#stat-value", Static).update(f"Total value: {summary.total_value:.2f}")

        if not summary.recent_games:
            recent = "No games registered yet."
        else:
            recent = "\n".join(
                f"• {g.name}  ({g.category_name}, {g.developer})  {g.price:.2f}"
                for g in summary.recent_games
            )
        self.query_one("#recent-games", Static).update(recent)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if not button_id:
            return

        option = button_id.removeprefix("btn-")
        for opt_id, _, target in self.MENU_OPTIONS:
            if opt_id == option:
                log.info("Menu option selected", option=option, target=target)
                await self.action_navigate(target)
                return

        log.warning("Unknown menu option", button_id=button_id)

    async def action_navigate(self, screen_name: str) -> None:
        """Navigate to a screen by name."""
        self._refresh_on_resume = True
        await self.catalog_app.push_screen_with_tracking(screen_name)

    def action_refresh(self) -> None:
        self.load_dashboard()

    @override
    async def action_go_back(self) -> None:
        """Back from the home screen quits the application."""
        log.info("Quit requested from home screen")
        self.catalog_app.exit()
