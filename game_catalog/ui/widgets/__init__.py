"""Custom widgets for the TUI application."""

from .confirm import ConfirmDialog

__all__ = [
    "ConfirmDialog",
]
