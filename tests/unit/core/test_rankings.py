"""Unit tests for merging runs into the persisted ranking lists."""

import random

import pytest

from screenrank.elo_ranker.models import RankerConfig
from screenrank.elo_ranker.tournament import TournamentRun
from screenrank.errors import DuplicateItem, PersistenceUnavailable, RunNotComplete
from screenrank.models import Category, Item
from screenrank.rankings import RankingListManager
from screenrank.storage import MemoryStore, RankingRepository

pytestmark = pytest.mark.unit


def make_item(item_id: str, rating: int = 1000, category: Category = Category.MOVIE) -> Item:
    return Item(id=item_id, title=f"Title {item_id}", category=category, rating=rating)


def make_manager(store: MemoryStore | None = None) -> RankingListManager:
    return RankingListManager(RankingRepository(store or MemoryStore()))


def play_out(run: TournamentRun, preference: list[str]) -> TournamentRun:
    """Resolve every matchup in favor of the earlier id in ``preference``."""
    while not run.is_complete:
        winner = min(run.current_matchup.participants, key=preference.index)
        run.choose_winner(winner)
    return run


class RefusingStore(MemoryStore):
    def set(self, key, value):
        return False


class TestMergeFullRun:
    """Tests for merge_full_run."""

    def test_first_run_populates_list_sorted(self):
        manager = make_manager()
        items = [make_item(i) for i in ["C", "A", "B"]]
        run = play_out(TournamentRun.round_robin(Category.MOVIE, items, random.Random(3)), ["A", "B", "C"])

        outcome = manager.merge_full_run(run)

        assert [i.id for i in outcome.rankings] == ["A", "B", "C"]
        assert [i.id for i in manager.load(Category.MOVIE)] == ["A", "B", "C"]
        assert outcome.total == 3
        assert [m.matchup for m in outcome.matches] == list(run.matchups)

    def test_reload_reproduces_merge(self):
        """Reading the list back gives the same order and ratings, every time."""
        manager = make_manager()
        items = [make_item(i) for i in ["A", "B", "C", "D"]]
        run = play_out(TournamentRun.round_robin(Category.MOVIE, items, random.Random(9)), ["B", "D", "A", "C"])

        outcome = manager.merge_full_run(run)
        first = manager.load(Category.MOVIE)
        second = manager.load(Category.MOVIE)

        expected = [(i.id, i.rating, i.display_rating) for i in outcome.rankings]
        assert [(i.id, i.rating, i.display_rating) for i in first] == expected
        assert [(i.id, i.rating, i.display_rating) for i in second] == expected

    def test_items_outside_run_untouched(self):
        store = MemoryStore()
        manager = make_manager(store)
        RankingRepository(store).save(Category.MOVIE, [make_item("X", 1100), make_item("A"), make_item("B")])

        run = play_out(
            TournamentRun.round_robin(Category.MOVIE, [make_item("A"), make_item("B")]),
            ["B", "A"],
        )
        outcome = manager.merge_full_run(run)

        ratings = {i.id: i.rating for i in outcome.rankings}
        assert ratings == {"X": 1100, "B": 1016, "A": 984}
        assert [i.id for i in outcome.rankings] == ["X", "B", "A"]

    def test_ties_keep_previous_order(self):
        store = MemoryStore()
        RankingRepository(store).save(Category.MOVIE, [make_item("P"), make_item("Q")])
        manager = make_manager(store)

        run = TournamentRun.round_robin(Category.MOVIE, [make_item("R")])
        outcome = manager.merge_full_run(run)

        assert [i.id for i in outcome.rankings] == ["P", "Q", "R"]

    def test_incomplete_run_rejected(self):
        manager = make_manager()
        run = TournamentRun.round_robin(Category.MOVIE, [make_item("A"), make_item("B")])

        with pytest.raises(RunNotComplete):
            manager.merge_full_run(run)
        assert manager.load(Category.MOVIE) == []

    def test_save_failure_carries_outcome(self):
        manager = make_manager(RefusingStore())
        run = TournamentRun.round_robin(Category.MOVIE, [make_item("A")])

        with pytest.raises(PersistenceUnavailable) as exc_info:
            manager.merge_full_run(run)

        assert exc_info.value.outcome is not None
        assert [i.id for i in exc_info.value.outcome.rankings] == ["A"]


class TestMergeSeededRun:
    """Tests for merge_seeded_run."""

    def seed_list(self, store: MemoryStore, ratings: dict[str, int]) -> None:
        items = [make_item(i, r) for i, r in ratings.items()]
        RankingRepository(store).save(Category.MOVIE, items)

    def test_empty_list_inserts_at_rank_one(self):
        manager = make_manager()
        run = TournamentRun.seeding(make_item("D"), manager.top(Category.MOVIE))

        outcome = manager.merge_seeded_run(run.new_item_final(), run)

        assert (outcome.rank, outcome.total) == (1, 1)
        assert outcome.item.rating == 1000
        assert outcome.item.display_rating == 9.0

    def test_new_item_beating_everyone_goes_first(self):
        store = MemoryStore()
        self.seed_list(store, {"a": 1040, "b": 1020, "c": 1000, "d": 990, "e": 980, "f": 900})
        manager = make_manager(store)

        top = manager.top(Category.MOVIE)
        assert [i.id for i in top] == ["a", "b", "c", "d", "e"]

        run = TournamentRun.seeding(make_item("new"), top)
        while not run.is_complete:
            run.choose_winner("new")
        outcome = manager.merge_seeded_run(run.new_item_final(), run)

        assert outcome.rank == 1
        assert outcome.total == 7
        assert [m.winner for m in outcome.matches] == ["new"] * 5
        ratings = {i.id: i.rating for i in outcome.rankings}
        assert ratings["f"] == 900
        assert all(ratings[i] < r for i, r in {"a": 1040, "b": 1020, "c": 1000}.items())

    def test_new_item_losing_everything_goes_below_top_set(self):
        store = MemoryStore()
        self.seed_list(store, {"a": 1040, "b": 1020})
        manager = make_manager(store)

        run = TournamentRun.seeding(make_item("new"), manager.top(Category.MOVIE))
        while not run.is_complete:
            run.choose_winner(run.current_matchup.opponent_of("new"))
        outcome = manager.merge_seeded_run(run.new_item_final(), run)

        assert (outcome.rank, outcome.total) == (3, 3)
        assert [i.id for i in manager.load(Category.MOVIE)] == ["a", "b", "new"]

    def test_already_ranked_item_rejected(self):
        store = MemoryStore()
        self.seed_list(store, {"a": 1000})
        manager = make_manager(store)
        run = TournamentRun.seeding(make_item("a"), [])

        with pytest.raises(DuplicateItem):
            manager.merge_seeded_run(run.new_item_final(), run)


class TestTop:
    """Tests for top."""

    def test_top_defaults_to_config(self):
        store = MemoryStore()
        RankingRepository(store).save(Category.SHOW, [make_item(str(i), 1000 - i, Category.SHOW) for i in range(8)])

        assert len(make_manager(store).top(Category.SHOW)) == 5
        assert len(RankingListManager(RankingRepository(store), RankerConfig(top_n=3)).top(Category.SHOW)) == 3
        assert len(make_manager(store).load(Category.SHOW)) == 8
