"""Shared behaviour for the create/edit form screens."""

from collections.abc import Iterable
from typing import Any, ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Select, Static, TextArea
from textual.widgets.select import InvalidSelectValueError

import structlog

from game_catalog.services.api_client import ResourceApi
from game_catalog.services.validation import FormValidationResult, clear_field_error

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class ResourceFormScreen(BaseScreen):
    """Create or edit one record.

    With an ``entity_id`` the screen starts in edit mode: the record is
    fetched and the fields populated before saving is enabled. Without
    one it starts blank. Every field is validated on save; a field's
    error is cleared as soon as that field is edited. A successful save
    navigates back to the list, which fetches again.

    Each input widget has the id ``input-<field>`` and its error line
    ``error-<field>`` where ``<field>`` is one of FIELDS.
    """

    FIELDS: ClassVar[tuple[str, ...]] = ()
    RESOURCE_LABEL: ClassVar[str] = "item"

    CSS: ClassVar[str] = """
    #form-container {
        width: 90;
        height: 95%;
        padding: 1 2;
        border: solid $primary;
    }

    #form-fields {
        height: 1fr;
    }

    .form-group {
        height: auto;
        margin-bottom: 1;
    }

    .form-group TextArea {
        height: 6;
    }

    #form-status {
        text-align: center;
        height: auto;
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

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("ctrl+s", "save", "Save", show=True),
    ]

    entity_id: int | None
    _errors: dict[str, str]
    _loading: bool
    _saving: bool

    def __init__(self, entity_id: int | None = None) -> None:
        super().__init__()
        self.entity_id = entity_id
        self._errors = {}
        self._loading = False
        self._saving = False

    @property
    def is_edit(self) -> bool:
        return self.entity_id is not None

    @property
    def errors(self) -> dict[str, str]:
        """Copy of the currently displayed field errors."""
        return dict(self._errors)

    # Hooks for subclasses

    def resource(self) -> ResourceApi[Any]:
        raise NotImplementedError

    def validate(self, values: dict[str, str]) -> FormValidationResult:
        raise NotImplementedError

    def compose_fields(self) -> ComposeResult:
        raise NotImplementedError

    def values_from(self, entity: Any) -> dict[str, str]:
        """Form values that represent a fetched record."""
        raise NotImplementedError

    async def load_options(self) -> None:
        """Fetch anything the fields need (select options) before the record."""

    def update_hints(self) -> None:
        """Refresh hints such as character counters after a field changed."""

    # Layout

    def field_group(
        self,
        label: str,
        field_name: str,
        widget: Widget,
        hint: str | None = None,
    ) -> ComposeResult:
        """Label, input, hint and error line for one field."""
        with Vertical(classes="form-group"):
            yield Label(label)
            yield widget
            if hint is not None:
                yield Static(hint, id=f"hint-{field_name}", classes="form-hint")
            yield Static("", id=f"error-{field_name}", classes="field-error")

    @override
    def compose(self) -> ComposeResult:
        verb = "Edit" if self.is_edit else "New"
        with Container(id="form-container"):
            yield self.create_title_widget(f"{verb} {self.RESOURCE_LABEL}")
            with VerticalScroll(id="form-fields"):
                yield from self.compose_fields()
            yield Static("", id="form-status")
            with Horizontal(id="button-row"):
                yield Button(self._save_label(), id="btn-save", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="default")

    async def on_mount(self) -> None:
        await super().on_mount()
        self._show_errors()
        self._loading = True
        self._update_buttons()
        self.run_worker(self._prepare(), name="prepare_form", exclusive=True)

    async def _prepare(self) -> None:
        await self.load_options()
        if self.entity_id is None:
            self._finish_loading()
            return

        try:
            entity = await self.resource().get(self.entity_id)
        except Exception as e:
            if self.is_showing:
                self.report_failure(e, f"load {self.RESOURCE_LABEL}", id=self.entity_id)
                await self.action_go_back()
            return

        if not self.is_showing:
            return
        self.set_form_values(self.values_from(entity))
        self._finish_loading()
        log.info("Form populated", screen=self.SCREEN_NAME, entity_id=self.entity_id)

    def _finish_loading(self) -> None:
        self._loading = False
        self._errors = {}
        self._show_errors()
        self.update_hints()
        self._update_buttons()

    # Field access

    def _widget_for(self, field_name: str) -> Widget:
        return self.query_one(f"#input-{field_name}")

    def get_form_values(self) -> dict[str, str]:
        """Raw string values of every field keyed by field name."""
        values: dict[str, str] = {}
        for field_name in self.FIELDS:
            widget = self._widget_for(field_name)
            if isinstance(widget, TextArea):
                values[field_name] = widget.text
            elif isinstance(widget, Select):
                selected = widget.value
                values[field_name] = str(selected) if isinstance(selected, (int, str)) and not isinstance(selected, bool) else ""
            elif isinstance(widget, Input):
                values[field_name] = widget.value
        return values

    def set_form_values(self, values: dict[str, str]) -> None:
        for field_name, raw in values.items():
            if field_name not in self.FIELDS:
                continue
            widget = self._widget_for(field_name)
            if isinstance(widget, TextArea):
                widget.text = raw
            elif isinstance(widget, Select):
                if not raw:
                    widget.clear()
                    continue
                try:
                    widget.value = int(raw) if raw.isdigit() else raw
                except InvalidSelectValueError:
                    log.warning("Value not among select options", field=field_name, value=raw)
                    widget.clear()
            elif isinstance(widget, Input):
                widget.value = raw

    @staticmethod
    def _field_of(widget_id: str | None) -> str | None:
        if widget_id and widget_id.startswith("input-"):
            return widget_id.removeprefix("input-")
        return None

    def _field_edited(self, widget_id: str | None) -> None:
        field_name = self._field_of(widget_id)
        if field_name is None:
            return
        if field_name in self._errors:
            self._errors = clear_field_error(self._errors, field_name)
            self._show_errors()
        self.update_hints()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._field_edited(event.input.id)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._field_edited(event.text_area.id)

    def on_select_changed(self, event: Select.Changed) -> None:
        self._field_edited(event.select.id)

    def _show_errors(self) -> None:
        for field_name in self.FIELDS:
            error_line = self.query_one(f"#error-{field_name}", Static)
            message = self._errors.get(field_name)
            error_line.update(message or "")
            error_line.display = message is not None

    def set_hint(self, field_name: str, text: str) -> None:
        self.query_one(f"#hint-{field_name}", Static).update(text)

    # Saving

    def _save_label(self) -> str:
        if self._saving:
            return "Saving..."
        verb = "Update" if self.is_edit else "Create"
        return f"{verb} {self.RESOURCE_LABEL}"

    def _update_buttons(self) -> None:
        save_btn = self.query_one("#btn-save", Button)
        save_btn.label = self._save_label()
        save_btn.disabled = self._saving or self._loading
        status = self.query_one("#form-status", Static)
        status.update(f"Loading {self.RESOURCE_LABEL}..." if self._loading else "")

    def action_save(self) -> None:
        """Validate every field; submit only when all pass."""
        if self._saving or self._loading:
            return

        result = self.validate(self.get_form_values())
        self._errors = dict(result.errors)
        self._show_errors()
        if not result.is_valid or result.payload is None:
            self.announce(self._error_summary(result.errors.values()), "warning")
            return

        self._saving = True
        self._update_buttons()
        self.run_worker(self._save(result.payload), name="save_worker", group="save", exclusive=True)

    @staticmethod
    def _error_summary(messages: Iterable[str]) -> str:
        listed = list(messages)
        if len(listed) == 1:
            return listed[0]
        return f"Please fix {len(listed)} fields before saving"

    async def _save(self, payload: dict[str, Any]) -> None:
        try:
            if self.entity_id is None:
                await self.resource().create(payload)
            else:
                await self.resource().update(self.entity_id, payload)
        except Exception as e:
            if self.is_showing:
                self.report_failure(e, f"save {self.RESOURCE_LABEL}")
                self._saving = False
                self._update_buttons()
            return

        if not self.is_showing:
            return
        verb = "updated" if self.is_edit else "created"
        self.announce(f"{self.RESOURCE_LABEL.capitalize()} {verb} successfully!")
        log.info("Record saved", screen=self.SCREEN_NAME, entity_id=self.entity_id)
        await self.action_go_back()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self.action_save()
        elif event.button.id == "btn-cancel":
            await self.action_go_back()
