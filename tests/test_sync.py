"""Property-based tests for local list state and catalog summaries."""

from datetime import date

import pytest
from hypothesis import given, strategies as st

from game_catalog.models import Category, Game
from game_catalog.services.errors import CategoryInUseError, ValidationError
from game_catalog.services.sync import (
    ResourceList,
    catalog_summary,
    category_summary,
    check_category_deletable,
    filter_games,
)


def make_game(
    game_id: int,
    name: str = "Game",
    developer: str = "Studio",
    category_id: int = 1,
    price: float = 10.0,
) -> Game:
    return Game(
        id=game_id,
        name=name,
        release_date=date(2020, 1, 1),
        price=price,
        developer=developer,
        category_id=category_id,
    )


game_lists = st.lists(
    st.builds(
        make_game,
        game_id=st.integers(min_value=1, max_value=10_000),
        name=st.text(min_size=1, max_size=30),
        developer=st.text(min_size=1, max_size=20),
        category_id=st.integers(min_value=1, max_value=5),
        price=st.floats(min_value=0, max_value=999.99, allow_nan=False),
    ),
    max_size=30,
    unique_by=lambda g: g.id,
)


class TestFilterGames:
    """Tests for free-text and category filtering."""

    def test_zelda_matches_only_the_zelda_entry(self) -> None:
        games = [
            make_game(1, "Super Mario Odyssey", "Nintendo"),
            make_game(2, "The Legend of Zelda: Breath of the Wild", "Nintendo"),
            make_game(3, "Hollow Knight", "Team Cherry"),
        ]

        result = filter_games(games, "zelda")

        assert [g.id for g in result] == [2]

    def test_search_matches_developer(self) -> None:
        games = [make_game(1, "Hades", "Supergiant"), make_game(2, "Celeste", "Maddy Makes Games")]

        assert [g.id for g in filter_games(games, "SUPERGIANT")] == [1]

    def test_category_filter(self) -> None:
        games = [make_game(1, category_id=1), make_game(2, category_id=2), make_game(3, category_id=1)]

        assert [g.id for g in filter_games(games, "", category_id=1)] == [1, 3]

    def test_text_and_category_combine(self) -> None:
        games = [
            make_game(1, "Zelda", category_id=1),
            make_game(2, "Zelda II", category_id=2),
        ]

        assert [g.id for g in filter_games(games, "zelda", category_id=2)] == [2]

    @given(game_lists, st.text(max_size=5))
    def test_filter_never_mutates_source(self, games: list[Game], query: str) -> None:
        snapshot = list(games)
        _ = filter_games(games, query)

        assert games == snapshot

    @given(game_lists, st.text(max_size=5))
    def test_result_is_ordered_subset(self, games: list[Game], query: str) -> None:
        result = filter_games(games, query)
        positions = [games.index(g) for g in result]

        assert positions == sorted(positions)
        needle = query.strip().lower()
        for game in result:
            assert needle in game.name.lower() or needle in game.developer.lower()

    @given(game_lists)
    def test_blank_query_keeps_everything(self, games: list[Game]) -> None:
        assert filter_games(games, "   ") == games


class TestResourceList:
    """Tests for the fetched list and its visible subset."""

    @given(game_lists, st.data())
    def test_removed_item_is_absent_without_refetch(self, games: list[Game], data: st.DataObject) -> None:
        """After a confirmed delete the item is gone from both the full and visible lists."""
        records: ResourceList[Game] = ResourceList()
        records.replace(games)
        if not games:
            return
        victim = data.draw(st.sampled_from(games))

        assert records.remove(victim.id) is True

        assert records.find(victim.id) is None
        assert victim not in records.visible
        assert len(records) == len(games) - 1

    def test_remove_unknown_id_returns_false(self) -> None:
        records: ResourceList[Game] = ResourceList()
        records.replace([make_game(1)])

        assert records.remove(99) is False
        assert len(records) == 1

    def test_visible_follows_filter(self) -> None:
        games = [make_game(1, "Zelda"), make_game(2, "Mario")]
        query = {"text": ""}
        records: ResourceList[Game] = ResourceList(lambda items: filter_games(items, query["text"]))
        records.replace(games)
        assert len(records.visible) == 2

        query["text"] = "mario"
        records.refilter()

        assert [g.id for g in records.visible] == [2]
        assert len(records.items) == 2

    def test_removal_keeps_filter_applied(self) -> None:
        games = [make_game(1, "Zelda"), make_game(2, "Zelda II"), make_game(3, "Mario")]
        records: ResourceList[Game] = ResourceList(lambda items: filter_games(items, "zelda"))
        records.replace(games)

        _ = records.remove(1)

        assert [g.id for g in records.visible] == [2]

    def test_set_filter_recomputes(self) -> None:
        records: ResourceList[Game] = ResourceList()
        records.replace([make_game(1, category_id=1), make_game(2, category_id=2)])

        records.set_filter(lambda items: [g for g in items if g.category_id == 2])

        assert [g.id for g in records.visible] == [2]

    def test_copies_are_returned(self) -> None:
        records: ResourceList[Game] = ResourceList()
        records.replace([make_game(1)])

        records.items.clear()
        records.visible.clear()

        assert len(records) == 1
        assert len(records.visible) == 1

    def test_same_row_cannot_be_deleted_twice_concurrently(self) -> None:
        records: ResourceList[Game] = ResourceList()
        records.replace([make_game(1), make_game(2)])

        assert records.begin_delete(1) is True
        assert records.begin_delete(1) is False
        assert records.begin_delete(2) is True
        assert records.is_deleting(1)

        records.end_delete(1)

        assert not records.is_deleting(1)
        assert records.begin_delete(1) is True

    def test_end_delete_unknown_row_is_harmless(self) -> None:
        records: ResourceList[Game] = ResourceList()

        records.end_delete(42)

        assert not records.is_deleting(42)

    def test_stale_fetch_does_not_bring_back_removed_row(self) -> None:
        records: ResourceList[Game] = ResourceList()
        records.replace([make_game(1), make_game(2)])
        records.begin_refresh()
        snapshot = [make_game(1), make_game(2)]

        _ = records.remove(1)
        records.replace(snapshot)

        assert [g.id for g in records.items] == [2]

    def test_next_refresh_accepts_every_fetched_row(self) -> None:
        records: ResourceList[Game] = ResourceList()
        records.replace([make_game(1), make_game(2)])
        _ = records.remove(1)

        records.begin_refresh()
        records.replace([make_game(1), make_game(2)])

        assert [g.id for g in records.items] == [1, 2]


class TestCategoryDeletion:
    """Tests for the category-in-use guard."""

    @given(st.integers(min_value=1, max_value=20))
    def test_category_with_games_cannot_be_deleted(self, game_count: int) -> None:
        category = Category(
            id=1,
            name="RPG",
            games=[make_game(i) for i in range(1, game_count + 1)],
        )

        with pytest.raises(CategoryInUseError) as exc_info:
            check_category_deletable(category)

        assert exc_info.value.game_count == game_count
        assert "RPG" in exc_info.value.message
        assert isinstance(exc_info.value, ValidationError)

    def test_empty_category_can_be_deleted(self) -> None:
        check_category_deletable(Category(id=1, name="Empty"))


class TestSummaries:
    """Tests for dashboard and category statistics."""

    def test_catalog_summary(self) -> None:
        games = [make_game(i, price=10.005) for i in range(1, 9)]
        categories = [Category(id=1, name="A"), Category(id=2, name="B")]

        summary = catalog_summary(games, categories)

        assert summary.total_games == 8
        assert summary.total_categories == 2
        assert summary.total_value == round(8 * 10.005, 2)
        assert [g.id for g in summary.recent_games] == [1, 2, 3, 4, 5, 6]

    def test_catalog_summary_empty(self) -> None:
        summary = catalog_summary([], [])

        assert summary.total_games == 0
        assert summary.total_value == 0
        assert summary.recent_games == []

    @given(game_lists)
    def test_recent_games_never_exceed_limit(self, games: list[Game]) -> None:
        summary = catalog_summary(games, [], recent_count=6)

        assert len(summary.recent_games) == min(6, len(games))

    def test_category_summary(self) -> None:
        categories = [
            Category(id=1, name="RPG", games=[make_game(1), make_game(2)]),
            Category(id=2, name="Puzzle"),
            Category(id=3, name="Racing", games=[make_game(3)]),
        ]

        summary = category_summary(categories)

        assert summary.total_categories == 3
        assert summary.total_games == 3
        assert summary.categories_with_games == 2
