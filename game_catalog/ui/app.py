"""Main Textual application with screen management."""

from dataclasses import dataclass
from typing import Any, ClassVar, override

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.reactive import reactive
from textual.widgets import Footer, Header

import structlog

from game_catalog.models.config import AppConfig
from game_catalog.services.api_client import CatalogApiClient
from game_catalog.services.config import ConfigurationService
from game_catalog.services.logging import set_log_level


log = structlog.stdlib.get_logger()


@dataclass
class AppState:
    """Application-wide state. Catalog data is owned by each screen, not here."""

    current_config: AppConfig | None = None


class CatalogApp(App[None]):
    """Main TUI application for managing the game catalog.

    The root Textual application owns the API client and the configuration
    service and tracks a navigation stack of named screens. Screens own
    their fetched data; the backend is the only state they share.
    """

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    .section-title {
        text-style: bold;
        color: $secondary;
        margin-top: 1;
    }

    .error-banner {
        color: $error;
        padding: 1;
        border: solid $error;
        height: auto;
    }

    .field-error {
        color: $error;
        height: auto;
    }

    .form-hint {
        color: $text-muted;
        text-style: italic;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    app_state: reactive[AppState] = reactive(AppState, init=False)

    _config_service: ConfigurationService | None
    _api_client: CatalogApiClient | None
    _navigation_stack: list[str]

    def __init__(
        self,
        api_client: CatalogApiClient | None = None,
        config_service: ConfigurationService | None = None,
        config: AppConfig | None = None,
    ) -> None:
        """Initialize the application with optional service injection.

        Args:
            api_client: Gateway to the catalog backend
            config_service: Configuration service for loading/saving settings
            config: Configuration in effect for this run
        """
        super().__init__()
        self.title = "Game Catalog"  # type: ignore[assignment]
        self.sub_title = "Games & Categories"  # type: ignore[assignment]
        self._api_client = api_client
        self._config_service = config_service
        self._navigation_stack = []
        self.app_state = AppState(current_config=config)

        log.info("CatalogApp initialized")

    @property
    def api_client(self) -> CatalogApiClient | None:
        """Get the API client."""
        return self._api_client

    @property
    def config_service(self) -> ConfigurationService | None:
        """Get the configuration service."""
        return self._config_service

    @property
    def navigation_stack(self) -> list[str]:
        """Get a copy of the current navigation stack."""
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        """Load configuration if none was injected, then show the home screen."""
        if self.app_state.current_config is None and self._config_service:
            self.app_state = AppState(current_config=self._config_service.load_config())

        if self._api_client is None and self.app_state.current_config is not None:
            self._api_client = CatalogApiClient(self.app_state.current_config.api_base_url)

        await self.push_screen_with_tracking("home")

    async def push_screen_with_tracking(self, screen_name: str, **params: Any) -> None:
        """Push a screen by registered name and track it in the navigation stack.

        Args:
            screen_name: Name of the screen to push
            **params: Constructor arguments for the screen (e.g. entity_id)
        """
        from game_catalog.ui.screens import get_screen_by_name

        screen = get_screen_by_name(screen_name, **params)
        if screen:
            self._navigation_stack.append(screen_name)
            await self.push_screen(screen)
            log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))
        else:
            log.warning("Unknown screen requested", screen=screen_name)

    async def action_go_back(self) -> None:
        """Navigate back to the previous screen."""
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify(
            "Esc: back  q: quit  n: new  e: edit  d: delete  r: refresh  ctrl+s: save"
        )

    async def apply_config(self, config: AppConfig) -> None:
        """Switch to a new configuration, reconnecting if the API URL changed.

        Args:
            config: The newly saved configuration
        """
        previous = self.app_state.current_config
        self.app_state = AppState(current_config=config)

        if previous is None or previous.log_level != config.log_level:
            set_log_level(config.log_level)
            log.info("Log level changed", log_level=config.log_level)

        url_changed = previous is None or previous.api_base_url != config.api_base_url
        if url_changed or self._api_client is None:
            old_client = self._api_client
            transport = old_client.transport if old_client is not None else None
            self._api_client = CatalogApiClient(config.api_base_url, transport=transport)
            if old_client is not None:
                await old_client.close()
            log.info("API client reconnected", base_url=config.api_base_url)
