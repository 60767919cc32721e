"""Create/edit form for a category."""

from typing import Any, ClassVar, override

from textual.app import ComposeResult
from textual.widgets import Input, TextArea

from game_catalog.models.catalog import Category
from game_catalog.services.api_client import ResourceApi
from game_catalog.services.validation import (
    CATEGORY_DESCRIPTION_MAX,
    CATEGORY_FIELDS,
    CATEGORY_NAME_MAX,
    FormValidationResult,
    validate_category_form,
)

from .resource_form import ResourceFormScreen


class CategoryFormScreen(ResourceFormScreen):
    """Form for creating or editing a category."""

    SCREEN_TITLE: ClassVar[str] = "Category"
    SCREEN_NAME: ClassVar[str] = "category_form"
    RESOURCE_LABEL: ClassVar[str] = "category"
    FIELDS: ClassVar[tuple[str, ...]] = CATEGORY_FIELDS

    CSS: ClassVar[str] = ResourceFormScreen.CSS + """
    CategoryFormScreen {
        align: center middle;
    }
    """

    @override
    def resource(self) -> ResourceApi[Any]:
        return self.api.categories

    @override
    def validate(self, values: dict[str, str]) -> FormValidationResult:
        return validate_category_form(values)

    @override
    def compose_fields(self) -> ComposeResult:
        yield from self.field_group(
            "Name *",
            "name",
            Input(
                placeholder="Enter the category name",
                id="input-name",
                max_length=CATEGORY_NAME_MAX,
            ),
            hint=f"0/{CATEGORY_NAME_MAX} characters",
        )
        yield from self.field_group(
            "Description",
            "description",
            TextArea(id="input-description"),
            hint=f"0/{CATEGORY_DESCRIPTION_MAX} characters",
        )

    @override
    def values_from(self, entity: Category) -> dict[str, str]:
        return {"name": entity.name, "description": entity.description or ""}

    @override
    def update_hints(self) -> None:
        name_length = len(self.query_one("#input-name", Input).value)
        description_length = len(self.query_one("#input-description", TextArea).text)
        self.set_hint("name", f"{name_length}/{CATEGORY_NAME_MAX} characters")
        self.set_hint("description", f"{description_length}/{CATEGORY_DESCRIPTION_MAX} characters")
