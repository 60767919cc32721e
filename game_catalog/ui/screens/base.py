"""Shared plumbing for every catalog screen."""

from typing import TYPE_CHECKING, Any, ClassVar, Literal

from textual.binding import Binding
from textual.markup import escape
from textual.screen import Screen
from textual.widgets import Static

import structlog

from game_catalog.services.api_client import CatalogApiClient
from game_catalog.services.errors import ErrorReport, ErrorSeverity, report_error

if TYPE_CHECKING:
    from game_catalog.ui.app import CatalogApp

log = structlog.stdlib.get_logger()

NoticeLevel = Literal["information", "warning", "error"]


class BaseScreen(Screen[None]):
    """A named screen attached to a CatalogApp.

    Subclasses set SCREEN_NAME (the registry key) and SCREEN_TITLE, reach the
    backend through ``api`` and route failures through ``report_failure`` so
    each user action produces at most one notification.
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)

    @property
    def catalog_app(self) -> "CatalogApp":
        from game_catalog.ui.app import CatalogApp

        if isinstance(self.app, CatalogApp):
            return self.app
        raise RuntimeError("Screen is not attached to a CatalogApp")

    @property
    def api(self) -> CatalogApiClient:
        """The app's API client.

        Raises:
            RuntimeError: If the application has no API client configured
        """
        client = self.catalog_app.api_client
        if client is None:
            raise RuntimeError("API client is not configured")
        return client

    @property
    def is_showing(self) -> bool:
        """False once the screen has been dismissed; late results are then dropped."""
        return self.is_attached

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME)

    def on_screen_resume(self) -> None:
        """Hook for subclasses that refresh when they come back into view."""
        log.debug("Screen resumed", screen=self.SCREEN_NAME)

    async def action_go_back(self) -> None:
        await self.catalog_app.action_go_back()

    def create_title_widget(self, title: str | None = None) -> Static:
        return Static(title or self.SCREEN_TITLE, classes="title")

    def announce(self, message: str, level: NoticeLevel = "information") -> None:
        """Show ``message`` as plain text in a toast and log it at the matching level."""
        self.notify(escape(message), severity=level)
        emit = {"information": log.info, "warning": log.warning, "error": log.error}[level]
        emit("User notification", message=message, screen=self.SCREEN_NAME)

    def report_failure(
        self,
        error: Exception,
        operation: str,
        notify: bool = True,
        **context: Any,
    ) -> ErrorReport:
        """Log ``error`` with its technical details and show one short message.

        Args:
            error: The exception that occurred
            operation: What the user was doing, e.g. "delete game"
            notify: If False, only log; the caller shows the message itself
            **context: Extra key/value pairs for the log record

        Returns:
            The report, whose ``message`` is safe to show the user
        """
        report = report_error(error, operation, self.SCREEN_NAME, **context)
        if notify:
            level: NoticeLevel = "warning" if report.severity == ErrorSeverity.WARNING else "error"
            self.announce(report.render(with_hints=False), level)
        return report
