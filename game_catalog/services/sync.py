"""Local list state kept consistent with the backend across mutations."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

import structlog

from ..models import Category, Game
from .errors import CategoryInUseError

log = structlog.stdlib.get_logger()


class Identified(Protocol):
    @property
    def id(self) -> int: ...


T = TypeVar("T", bound=Identified)


def filter_games(
    games: list[Game],
    search_text: str,
    category_id: int | None = None,
) -> list[Game]:
    """Filter games by free text and category.

    The search text matches case-insensitively anywhere in the game's name
    or developer. The source list is never modified.

    Args:
        games: Full list of fetched games
        search_text: Free-text query; blank matches everything
        category_id: Optional category identifier to restrict to

    Returns:
        New list holding the matching games in their original order
    """
    result = list(games)

    query = search_text.strip().lower()
    if query:
        result = [
            g for g in result
            if query in g.name.lower() or query in g.developer.lower()
        ]

    if category_id is not None:
        result = [g for g in result if g.category_id == category_id]

    return result


class ResourceList(Generic[T]):
    """The fetched list of one resource plus its derived visible subset.

    The visible subset is recomputed from the full list through the filter
    function whenever the list or the filter changes. Deletes are tracked
    per row so the same row cannot be deleted twice concurrently. Rows
    removed since the last ``begin_refresh`` are kept out of ``replace``,
    since a fetch that overlapped their delete may still contain them.
    """

    def __init__(self, apply_filter: Callable[[list[T]], list[T]] | None = None) -> None:
        self._items: list[T] = []
        self._apply_filter = apply_filter
        self._visible: list[T] = []
        self._deleting: set[int] = set()
        self._removed: set[int] = set()

    @property
    def items(self) -> list[T]:
        """Copy of the full fetched list."""
        return list(self._items)

    @property
    def visible(self) -> list[T]:
        """Copy of the currently visible (filtered) items."""
        return list(self._visible)

    def __len__(self) -> int:
        return len(self._items)

    def begin_refresh(self) -> None:
        """Mark the start of a fetch whose result will go to ``replace``."""
        self._removed.clear()

    def replace(self, items: Iterable[T]) -> None:
        """Replace the full list after a fetch."""
        self._items = [item for item in items if item.id not in self._removed]
        self.refilter()

    def set_filter(self, apply_filter: Callable[[list[T]], list[T]] | None) -> None:
        """Install a new filter and recompute the visible subset."""
        self._apply_filter = apply_filter
        self.refilter()

    def refilter(self) -> None:
        """Recompute the visible subset from the full list."""
        if self._apply_filter is None:
            self._visible = list(self._items)
        else:
            self._visible = self._apply_filter(list(self._items))

    def find(self, entity_id: int) -> T | None:
        """Look an item up by identifier."""
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def remove(self, entity_id: int) -> bool:
        """Drop an item after the backend confirmed its deletion.

        Returns:
            True if an item with that identifier was present
        """
        before = len(self._items)
        self._items = [item for item in self._items if item.id != entity_id]
        self._removed.add(entity_id)
        removed = len(self._items) != before
        if removed:
            self.refilter()
            log.debug("Removed item from list", entity_id=entity_id, remaining=len(self._items))
        return removed

    def begin_delete(self, entity_id: int) -> bool:
        """Mark a row's delete as in flight.

        Returns:
            False if a delete for that row is already pending
        """
        if entity_id in self._deleting:
            return False
        self._deleting.add(entity_id)
        return True

    def end_delete(self, entity_id: int) -> None:
        """Clear a row's in-flight delete flag, whatever the outcome."""
        self._deleting.discard(entity_id)

    def is_deleting(self, entity_id: int) -> bool:
        return entity_id in self._deleting


def check_category_deletable(category: Category) -> None:
    """Refuse to delete a category that still has games.

    Raises:
        CategoryInUseError: If one or more games reference the category
    """
    if category.game_count > 0:
        raise CategoryInUseError(category.name, category.game_count)


@dataclass(frozen=True)
class CatalogSummary:
    """Dashboard figures for the whole catalog."""
    total_games: int
    total_categories: int
    total_value: float
    recent_games: list[Game]


@dataclass(frozen=True)
class CategorySummary:
    """Statistics shown under the category list."""
    total_categories: int
    total_games: int
    categories_with_games: int


def catalog_summary(
    games: list[Game],
    categories: list[Category],
    recent_count: int = 6,
) -> CatalogSummary:
    """Summarize the catalog; recent games are the first ones the backend lists."""
    return CatalogSummary(
        total_games=len(games),
        total_categories=len(categories),
        total_value=round(sum(g.price for g in games), 2),
        recent_games=games[:recent_count],
    )


def category_summary(categories: list[Category]) -> CategorySummary:
    return CategorySummary(
        total_categories=len(categories),
        total_games=sum(c.game_count for c in categories),
        categories_with_games=sum(1 for c in categories if c.game_count > 0),
    )
