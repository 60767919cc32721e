"""Form validation for catalog entities.

Raw form values (strings keyed by field name) are turned into either a
normalized request payload or a set of per-field error messages, never both.
Every violated field is reported at once so the user can fix them together.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import structlog

log = structlog.stdlib.get_logger()


CATEGORY_NAME_MAX = 100
CATEGORY_DESCRIPTION_MAX = 500
GAME_NAME_MAX = 200
GAME_DESCRIPTION_MAX = 1000
GAME_DEVELOPER_MAX = 150
PRICE_MIN = 0.0
PRICE_MAX = 999.99

# Form field names; payload keys use the backend's names.
CATEGORY_FIELDS: tuple[str, ...] = ("name", "description")
GAME_FIELDS: tuple[str, ...] = (
    "name",
    "description",
    "release_date",
    "price",
    "developer",
    "category_id",
)


@dataclass(frozen=True)
class FormValidationResult:
    """Outcome of validating a form: a payload or field errors."""
    payload: dict[str, Any] | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _finish(payload: dict[str, Any], errors: dict[str, str], form: str) -> FormValidationResult:
    if errors:
        log.debug("Form validation failed", form=form, fields=sorted(errors))
        return FormValidationResult(payload=None, errors=errors)
    return FormValidationResult(payload=payload, errors={})


def _optional_description(raw: str) -> str | None:
    return raw.strip() or None


def validate_category_form(values: dict[str, str]) -> FormValidationResult:
    """Validate category form values.

    Args:
        values: Raw field values keyed by "name" and "description"

    Returns:
        FormValidationResult with a payload ready for the categories endpoint,
        or the per-field errors
    """
    errors: dict[str, str] = {}
    name = values.get("name", "")
    description = values.get("description", "")

    if not name.strip():
        errors["name"] = "Category name is required"
    elif len(name) > CATEGORY_NAME_MAX:
        errors["name"] = f"Name must be at most {CATEGORY_NAME_MAX} characters"

    if len(description) > CATEGORY_DESCRIPTION_MAX:
        errors["description"] = f"Description must be at most {CATEGORY_DESCRIPTION_MAX} characters"

    payload: dict[str, Any] = {"nome": name.strip()}
    desc = _optional_description(description)
    if desc:
        payload["descricao"] = desc
    return _finish(payload, errors, "category")


def parse_price(raw: str) -> float | None:
    """Parse a price string, returning None unless it is a finite number in range."""
    try:
        price = float(raw.strip())
    except ValueError:
        return None
    # float() also accepts "nan", "inf" and digit separators like "1_0"
    if not math.isfinite(price) or "_" in raw:
        return None
    if price < PRICE_MIN or price > PRICE_MAX:
        return None
    return price


def validate_game_form(values: dict[str, str]) -> FormValidationResult:
    """Validate game form values.

    Args:
        values: Raw field values keyed by the names in GAME_FIELDS

    Returns:
        FormValidationResult with a payload ready for the games endpoint,
        or the per-field errors
    """
    errors: dict[str, str] = {}
    name = values.get("name", "")
    description = values.get("description", "")
    release_raw = values.get("release_date", "").strip()
    price_raw = values.get("price", "")
    developer = values.get("developer", "")
    category_raw = values.get("category_id", "").strip()

    if not name.strip():
        errors["name"] = "Game name is required"
    elif len(name) > GAME_NAME_MAX:
        errors["name"] = f"Name must be at most {GAME_NAME_MAX} characters"

    if len(description) > GAME_DESCRIPTION_MAX:
        errors["description"] = f"Description must be at most {GAME_DESCRIPTION_MAX} characters"

    release_date: date | None = None
    if not release_raw:
        errors["release_date"] = "Release date is required"
    else:
        try:
            release_date = date.fromisoformat(release_raw)
        except ValueError:
            errors["release_date"] = "Release date must be a valid date (YYYY-MM-DD)"

    price: float | None = None
    if not price_raw.strip():
        errors["price"] = "Price is required"
    else:
        price = parse_price(price_raw)
        if price is None:
            errors["price"] = f"Price must be a number between {PRICE_MIN:g} and {PRICE_MAX}"

    if not developer.strip():
        errors["developer"] = "Developer is required"
    elif len(developer) > GAME_DEVELOPER_MAX:
        errors["developer"] = f"Developer name must be at most {GAME_DEVELOPER_MAX} characters"

    category_id: int | None = None
    if not category_raw:
        errors["category_id"] = "Category is required"
    else:
        try:
            category_id = int(category_raw)
        except ValueError:
            errors["category_id"] = "Category must be a valid category identifier"

    payload: dict[str, Any] = {
        "nome": name.strip(),
        "dataLancamento": release_date.isoformat() if release_date else None,
        "preco": price,
        "desenvolvedor": developer.strip(),
        "categoriaId": category_id,
    }
    desc = _optional_description(description)
    if desc:
        payload["descricao"] = desc
    return _finish(payload, errors, "game")


def clear_field_error(errors: dict[str, str], field_name: str) -> dict[str, str]:
    """Return a copy of errors without the entry for one edited field."""
    return {name: message for name, message in errors.items() if name != field_name}
