"""Modal confirmation dialog."""

from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

import structlog

log = structlog.stdlib.get_logger()


class ConfirmDialog(ModalScreen[bool]):
    """Yes/no question dismissed with True only on explicit confirmation.

    Escape or the cancel button dismiss with False.
    """

    DEFAULT_CSS: ClassVar[str] = """
    ConfirmDialog {
        align: center middle;
    }

    ConfirmDialog #dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $error;
        background: $surface;
    }

    ConfirmDialog #dialog-message {
        margin-bottom: 1;
    }

    ConfirmDialog #dialog-buttons {
        height: auto;
        align: center middle;
    }

    ConfirmDialog #dialog-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "cancel", "Cancel", show=True),
        Binding("y", "confirm", "Yes", show=False),
        Binding("n", "cancel", "No", show=False),
    ]

    def __init__(self, message: str, confirm_label: str = "Delete") -> None:
        super().__init__()
        self._message = message
        self._confirm_label = confirm_label

    @override
    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self._message, id="dialog-message", markup=False)
            with Horizontal(id="dialog-buttons"):
                yield Button(self._confirm_label, id="btn-confirm", variant="error")
                yield Button("Cancel", id="btn-cancel", variant="default")

    def on_mount(self) -> None:
        # Cancel is focused so a stray Enter does not confirm
        self.query_one("#btn-cancel", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "btn-confirm")

    def action_confirm(self) -> None:
        log.debug("Confirmation accepted", message=self._message)
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
