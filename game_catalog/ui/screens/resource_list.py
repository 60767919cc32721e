"""Shared behaviour for the game and category list screens."""

from functools import partial
from typing import Any, ClassVar

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Static
from textual.widgets.data_table import CellDoesNotExist

import structlog

from game_catalog.services.api_client import ResourceApi
from game_catalog.services.errors import ValidationError
from game_catalog.services.sync import ResourceList
from game_catalog.ui.widgets import ConfirmDialog

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class ResourceListScreen(BaseScreen):
    """List screen for one resource: fetch, filter, open forms, delete.

    The full fetched list lives in a ResourceList; the table shows its
    visible subset. A successful delete removes the row locally without a
    re-fetch. The list is fetched again only on mount, on an explicit
    refresh or retry, and when returning from one of the forms.

    Subclasses provide the table layout (``table_columns``/``row_for``),
    the resource gateway and, optionally, extra controls.
    """

    RESOURCE_LABEL: ClassVar[str] = "item"
    RESOURCE_LABEL_PLURAL: ClassVar[str] = "items"
    FORM_SCREEN: ClassVar[str] = ""
    EMPTY_MESSAGE: ClassVar[str] = "Nothing here yet."
    NO_MATCH_MESSAGE: ClassVar[str] = "Nothing matches your filters."

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("n", "new_record", "New", show=True),
        Binding("e", "edit_selected", "Edit", show=True),
        Binding("d", "delete_selected", "Delete", show=True),
        Binding("r", "refresh", "Refresh", show=True),
    ]

    _records: ResourceList[Any]
    _refresh_on_resume: bool
    _loading: bool
    _load_error: str | None

    def __init__(self) -> None:
        super().__init__()
        self._records = ResourceList(self.filter_items)
        self._refresh_on_resume = False
        self._loading = False
        self._load_error = None

    # Hooks for subclasses

    def resource(self) -> ResourceApi[Any]:
        raise NotImplementedError

    def table_columns(self) -> tuple[str, ...]:
        raise NotImplementedError

    def row_for(self, item: Any) -> tuple[str, ...]:
        raise NotImplementedError

    def filter_items(self, items: list[Any]) -> list[Any]:
        """Visible subset of the fetched items; everything by default."""
        return items

    async def fetch(self) -> None:
        """Fetch the records from the backend into the local list."""
        self._records.replace(await self.resource().list())

    def check_deletable(self, item: Any) -> None:
        """Raise ValidationError to block a delete before confirmation."""

    def after_render(self) -> None:
        """Update subclass widgets (headings, statistics) after the table is redrawn."""

    def compose_filters(self) -> ComposeResult:
        """Extra controls shown above the table."""
        yield from ()

    # Layout

    def compose_list(self) -> ComposeResult:
        """Heading, status widgets, table and action buttons shared by list screens."""
        yield from self.compose_filters()
        yield Static("", id="list-heading", classes="section-title")
        with Vertical(id="load-error", classes="error-banner"):
            yield Static("", id="load-error-message", markup=False)
            yield Button("Try again", id="btn-retry", variant="warning")
        yield Static(f"Loading {self.RESOURCE_LABEL_PLURAL}...", id="loading")
        yield DataTable(id="records-table", cursor_type="row", zebra_stripes=True)
        yield Static("", id="empty-state")
        with Horizontal(id="button-row"):
            yield Button(f"New {self.RESOURCE_LABEL}", id="btn-new", variant="success")
            yield Button("Edit", id="btn-edit", variant="primary", disabled=True)
            yield Button("Delete", id="btn-delete", variant="error", disabled=True)
            yield Button("Refresh", id="btn-refresh", variant="default")
            yield Button("Back", id="btn-back", variant="default")

    async def on_mount(self) -> None:
        await super().on_mount()
        table = self.query_one("#records-table", DataTable)
        table.add_columns(*self.table_columns())
        self.query_one("#load-error", Vertical).display = False
        self.load()

    def on_screen_resume(self) -> None:
        super().on_screen_resume()
        if self._refresh_on_resume:
            self._refresh_on_resume = False
            self.load()

    # Loading

    def load(self) -> None:
        """Fetch the list in a worker; a newer load supersedes an older one."""
        self._records.begin_refresh()
        self._loading = True
        self._load_error = None
        self._update_status_widgets()
        self.run_worker(self._load(), name="load_worker", group="load", exclusive=True)

    async def _load(self) -> None:
        try:
            await self.fetch()
        except Exception as e:
            if self.is_showing:
                report = self.report_failure(e, f"load {self.RESOURCE_LABEL_PLURAL}", notify=False)
                self._loading = False
                self._load_error = report.message
                self._update_status_widgets()
            return

        if not self.is_showing:
            return
        self._loading = False
        log.info("List loaded", screen=self.SCREEN_NAME, count=len(self._records))
        self.render_records()

    def refilter(self) -> None:
        """Recompute the visible subset after a filter input changed."""
        self._records.refilter()
        self.render_records()

    def render_records(self) -> None:
        """Redraw the table from the visible subset."""
        table = self.query_one("#records-table", DataTable)
        table.clear()
        for item in self._records.visible:
            table.add_row(*self.row_for(item), key=str(item.id))
        self._update_status_widgets()
        self.after_render()
        self._update_action_buttons()

    def _update_status_widgets(self) -> None:
        error_banner = self.query_one("#load-error", Vertical)
        loading = self.query_one("#loading", Static)
        table = self.query_one("#records-table", DataTable)
        empty_state = self.query_one("#empty-state", Static)

        loading.display = self._loading
        error_banner.display = self._load_error is not None
        if self._load_error is not None:
            self.query_one("#load-error-message", Static).update(f"Error: {self._load_error}")

        ready = not self._loading and self._load_error is None
        has_rows = bool(self._records.visible)
        table.display = ready and has_rows
        empty_state.display = ready and not has_rows
        if len(self._records) == 0:
            empty_state.update(self.EMPTY_MESSAGE)
        else:
            empty_state.update(self.NO_MATCH_MESSAGE)

    # Selection

    def selected_item(self) -> Any | None:
        """The record under the table cursor, if any."""
        table = self.query_one("#records-table", DataTable)
        if table.row_count == 0:
            return None
        try:
            row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        except CellDoesNotExist:
            return None
        if row_key.value is None:
            return None
        return self._records.find(int(row_key.value))

    def _update_action_buttons(self) -> None:
        item = self.selected_item()
        edit_btn = self.query_one("#btn-edit", Button)
        delete_btn = self.query_one("#btn-delete", Button)

        edit_btn.disabled = item is None
        deleting = item is not None and self._records.is_deleting(item.id)
        delete_btn.disabled = item is None or deleting
        delete_btn.label = "Deleting..." if deleting else "Delete"

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._update_action_buttons()

    async def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        await self.action_edit_selected()

    # Navigation to forms

    async def action_new_record(self) -> None:
        self._refresh_on_resume = True
        await self.catalog_app.push_screen_with_tracking(self.FORM_SCREEN)

    async def action_edit_selected(self) -> None:
        item = self.selected_item()
        if item is None:
            self.announce(f"No {self.RESOURCE_LABEL} selected", "warning")
            return
        self._refresh_on_resume = True
        await self.catalog_app.push_screen_with_tracking(self.FORM_SCREEN, entity_id=item.id)

    def action_refresh(self) -> None:
        self.load()

    # Deleting

    def action_delete_selected(self) -> None:
        """Confirm, then delete the selected record."""
        item = self.selected_item()
        if item is None:
            self.announce(f"No {self.RESOURCE_LABEL} selected", "warning")
            return
        if self._records.is_deleting(item.id):
            return

        try:
            self.check_deletable(item)
        except ValidationError as e:
            self.announce(e.message, "warning")
            return

        _ = self.app.push_screen(
            ConfirmDialog(f'Are you sure you want to delete the {self.RESOURCE_LABEL} "{item.name}"?'),
            callback=partial(self._on_delete_confirmed, item),
        )

    def _on_delete_confirmed(self, item: Any, confirmed: bool | None) -> None:
        if not confirmed:
            log.debug("Delete cancelled", screen=self.SCREEN_NAME, entity_id=item.id)
            return
        if not self._records.begin_delete(item.id):
            return
        self._update_action_buttons()
        self.run_worker(self._delete(item), name=f"delete_{item.id}", group="delete")

    async def _delete(self, item: Any) -> None:
        try:
            await self.resource().delete(item.id)
        except Exception as e:
            if self.is_showing:
                self.report_failure(e, f"delete {self.RESOURCE_LABEL}", id=item.id)
            return
        finally:
            self._records.end_delete(item.id)
            if self.is_showing:
                self._update_action_buttons()

        self._records.remove(item.id)
        if self.is_showing:
            self.render_records()
            self.announce(f'Deleted {self.RESOURCE_LABEL} "{item.name}"')

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id

        if button_id == "btn-new":
            await self.action_new_record()
        elif button_id == "btn-edit":
            await self.action_edit_selected()
        elif button_id == "btn-delete":
            self.action_delete_selected()
        elif button_id in ("btn-refresh", "btn-retry"):
            self.load()
        elif button_id == "btn-back":
            await self.action_go_back()
