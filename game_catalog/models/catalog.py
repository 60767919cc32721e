"""Catalog data models: games and the categories they belong to."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any


def _parse_release_date(raw: str) -> date:
    """Parse a backend date value, dropping any time part (``2017-03-03T00:00:00``)."""
    return date.fromisoformat(raw.split("T", 1)[0])


@dataclass(frozen=True)
class Category:
    """A game category as returned by the backend."""
    id: int
    name: str
    description: str | None = None
    games: list["Game"] = field(default_factory=list)  # Backend join, read-only
    
    @property
    def game_count(self) -> int:
        """Number of games associated with this category."""
        return len(self.games)
    
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Category":
        """Build a Category from its JSON representation."""
        return cls(
            id=int(data["id"]),
            name=str(data["nome"]),
            description=data.get("descricao") or None,
            games=[Game.from_api(g) for g in data.get("games") or []],
        )


@dataclass(frozen=True)
class Game:
    """A catalog game as returned by the backend."""
    id: int
    name: str
    release_date: date
    price: float
    developer: str
    category_id: int
    description: str | None = None
    category: Category | None = None  # Backend join, read-only
    
    @property
    def category_name(self) -> str:
        """Name of the joined category, or a placeholder when absent."""
        return self.category.name if self.category else "No category"
    
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Game":
        """Build a Game from its JSON representation."""
        raw_category = data.get("categoria")
        return cls(
            id=int(data["id"]),
            name=str(data["nome"]),
            release_date=_parse_release_date(str(data["dataLancamento"])),
            price=float(data["preco"]),
            developer=str(data["desenvolvedor"]),
            category_id=int(data["categoriaId"]),
            description=data.get("descricao") or None,
            category=Category.from_api(raw_category) if raw_category else None,
        )
