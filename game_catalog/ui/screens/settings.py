"""Settings screen: backend URL and log level."""

from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Select, Static

import structlog

from game_catalog.models.config import AppConfig
from game_catalog.services.api_client import CatalogApiClient
from game_catalog.services.config import VALID_LOG_LEVELS, config_field_errors, validate_api_url

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class SettingsScreen(BaseScreen):
    """Edit, test and persist the application configuration.

    Errors are shown under each field when saving and cleared as soon as
    that field is edited. A saved URL change reconnects the API client; a
    saved log level change takes effect immediately.
    """

    SCREEN_TITLE: ClassVar[str] = "Settings"
    SCREEN_NAME: ClassVar[str] = "settings"

    CSS: ClassVar[str] = """
    SettingsScreen {
        align: center middle;
    }

    #settings-container {
        width: 80;
        height: auto;
        max-height: 90%;
        padding: 1 2;
        border: solid $primary;
        background: $surface;
    }

    .settings-field {
        height: auto;
        margin-bottom: 1;
    }

    #connection-status {
        height: auto;
        margin-top: 1;
    }

    #settings-buttons {
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #settings-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("ctrl+s", "save", "Save", show=True),
        Binding("ctrl+t", "test_connection", "Test", show=True),
        Binding("ctrl+r", "reset", "Reset", show=True),
    ]

    _saved: AppConfig
    _errors: dict[str, str]
    connection_status: str

    def __init__(self) -> None:
        super().__init__()
        self._saved = AppConfig()
        self._errors = {}
        self.connection_status = ""

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @override
    def compose(self) -> ComposeResult:
        with Vertical(id="settings-container"):
            yield self.create_title_widget("⚙️ Settings")

            with Vertical(classes="settings-field"):
                yield Label("Catalog API URL *")
                yield Input(placeholder="http://localhost:5000/api", id="input-api-url")
                yield Static("Base URL of the catalog backend", classes="form-hint")
                yield Static("", id="error-api_base_url", classes="field-error")

            with Vertical(classes="settings-field"):
                yield Label("Log level")
                yield Select(
                    [(level.title(), level) for level in VALID_LOG_LEVELS],
                    id="select-log-level",
                    allow_blank=False,
                    value="INFO",
                )
                yield Static("", id="error-log_level", classes="field-error")

            yield Static("", id="connection-status", markup=False)

            with Horizontal(id="settings-buttons"):
                yield Button("Save", id="btn-save", variant="primary")
                yield Button("Test connection", id="btn-test")
                yield Button("Reset", id="btn-reset")
                yield Button("Cancel", id="btn-cancel", variant="error")

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        config = self.catalog_app.app_state.current_config
        if config is None and self.catalog_app.config_service is not None:
            config = self.catalog_app.config_service.load_config()
        self._saved = config or AppConfig()
        self._fill(self._saved)

    def _fill(self, config: AppConfig) -> None:
        self.query_one("#input-api-url", Input).value = config.api_base_url
        self.query_one("#select-log-level", Select).value = config.log_level  # type: ignore[type-arg]
        self._show_errors({})

    def form_config(self) -> AppConfig:
        """The configuration currently entered, trimmed but not validated."""
        level = self.query_one("#select-log-level", Select).value  # type: ignore[type-arg]
        return AppConfig(
            api_base_url=self.query_one("#input-api-url", Input).value.strip(),
            log_level=level if isinstance(level, str) else "",
        )

    def _show_errors(self, errors: dict[str, str]) -> None:
        self._errors = errors
        for field_name in ("api_base_url", "log_level"):
            self.query_one(f"#error-{field_name}", Static).update(errors.get(field_name, ""))

    def _set_status(self, text: str) -> None:
        self.connection_status = text
        self.query_one("#connection-status", Static).update(text)

    def _clear_error(self, field_name: str) -> None:
        if field_name in self._errors:
            self._show_errors({k: v for k, v in self._errors.items() if k != field_name})

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "input-api-url":
            self._clear_error("api_base_url")
            self._set_status("")

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "select-log-level":
            self._clear_error("log_level")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "btn-save":
                await self.action_save()
            case "btn-test":
                self.action_test_connection()
            case "btn-reset":
                self.action_reset()
            case "btn-cancel":
                await self.action_go_back()

    async def action_save(self) -> None:
        config = self.form_config()
        errors = config_field_errors(config)
        self._show_errors(errors)
        if errors:
            self.announce("Please fix the highlighted settings", "warning")
            return

        service = self.catalog_app.config_service
        if service is not None:
            try:
                service.save_config(config)
            except Exception as e:
                self.report_failure(e, "save settings")
                return

        await self.catalog_app.apply_config(config)
        self._saved = config
        self.announce("Settings saved" if service is not None else "Settings applied for this session")
        log.info("Settings saved", api_base_url=config.api_base_url, log_level=config.log_level)

    def action_reset(self) -> None:
        self._fill(self._saved)
        self._set_status("")
        self.announce("Settings reset to last saved values")

    def action_test_connection(self) -> None:
        config = self.form_config()
        if url_error := validate_api_url(config.api_base_url):
            self._show_errors({**self._errors, "api_base_url": url_error})
            return
        self._set_status("Connecting...")
        self.run_worker(self._probe(config.api_base_url), exclusive=True, group="probe")

    async def _probe(self, base_url: str) -> None:
        """List categories against ``base_url`` without touching the app's client."""
        client = self.catalog_app.api_client
        transport = client.transport if client is not None else None
        try:
            async with CatalogApiClient(base_url, transport=transport) as probe:
                categories = await probe.categories.list()
        except Exception as e:
            report = self.report_failure(e, "test connection", notify=False, url=base_url)
            status = f"✗ {report.message}"
        else:
            status = f"✓ Connected ({len(categories)} categories)"
            log.info("Connection test succeeded", base_url=base_url)

        if self.is_showing:
            self._set_status(status)
