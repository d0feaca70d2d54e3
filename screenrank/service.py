"""Ranking workflow: onboarding picks, runs, and merges per category.

This is the surface UI actions call into:

    pick item          -> select_favorite / start_insertion
    start ranking      -> start_full_run
    answer comparison  -> choose_winner / invoke_draw
    schedule exhausted -> merged automatically, outcome returned

Each category owns at most one run at a time. Starting another one while
a run is active is rejected unless ``replace=True``, which drops the
active run without merging it.
"""

import random

from screenrank.config import DATA_DIR, ranker_config_from_env, shuffle_seed_from_env
from screenrank.elo_ranker.models import MatchResult, RankerConfig, RunKind
from screenrank.elo_ranker.tournament import TournamentRun
from screenrank.errors import (
    DuplicateItem,
    NoActiveRun,
    PersistenceUnavailable,
    RunAlreadyActive,
    RunNotComplete,
)
from screenrank.events import EventHandler
from screenrank.logging import get_logger
from screenrank.models import Category, FavoritesSelection, Item
from screenrank.rankings import RankingListManager, RunOutcome
from screenrank.storage import FavoritesRepository, JsonFileStore, KeyValueStore, RankingRepository

log = get_logger(__name__)


class RankingService:
    """Coordinates runs with the persisted lists of every category."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        config: RankerConfig | None = None,
        rng: random.Random | None = None,
        event_handler: EventHandler | None = None
    ):
        """Initialize the service.

        Args:
            store: Key-value store (JsonFileStore under DATA_DIR if None)
            config: Engine configuration (read from the environment if None)
            rng: Random source for round-robin order (seeded from
                SCREENRANK_SEED if None)
            event_handler: Listener passed to every run
        """
        self.store = store if store is not None else JsonFileStore(DATA_DIR)
        self.config = config or ranker_config_from_env()
        self.rng = rng or random.Random(shuffle_seed_from_env())
        self.event_handler = event_handler

        self.rankings = RankingListManager(RankingRepository(self.store), self.config)
        self.favorites = FavoritesRepository(self.store)

        self.active_runs: dict[Category, TournamentRun] = {}
        # Merged results whose save failed, kept for retry_save
        self.unsaved: dict[Category, RunOutcome] = {}

    def select_favorite(self, item: Item) -> FavoritesSelection:
        """Toggle an onboarding pick and persist the snapshot."""
        selection = self.favorites.load(item.category)
        picked = selection.toggle(item)
        self.favorites.save(selection)
        log.info(
            "favorite_toggled",
            category=item.category.value,
            item_id=item.id,
            picked=picked,
            count=len(selection.items),
        )
        return selection

    def top(self, category: Category, n: int | None = None) -> list[Item]:
        return self.rankings.top(category, n)

    def active_run(self, category: Category) -> TournamentRun | None:
        return self.active_runs.get(category)

    def start_full_run(
        self,
        category: Category,
        items: list[Item] | None = None,
        replace: bool = False
    ) -> TournamentRun:
        """Start a round robin over ``items`` (the onboarding picks if None).

        Items already in the category's list start from their stored
        rating, others from the baseline. With fewer than two items the
        returned run is already complete; call ``finish`` to merge it.
        """
        self._check_can_start(category, replace)

        if items is None:
            items = self.favorites.load(category).items
        known = {item.id: item.rating for item in self.rankings.load(category)}
        participants = [
            item.model_copy(update={"rating": known.get(item.id, self.config.initial_rating)})
            for item in items
        ]

        run = TournamentRun.round_robin(
            category,
            participants,
            rng=self.rng,
            config=self.config,
            event_handler=self.event_handler,
        )
        self._register(run)
        return run

    def start_insertion(self, item: Item, replace: bool = False) -> TournamentRun:
        """Start placing ``item`` against the current top set.

        With an empty list the returned run is already complete; call
        ``finish`` to insert the item at rank 1.

        Raises:
            DuplicateItem: the item is already in the category's list
        """
        self._check_can_start(item.category, replace)

        rankings = self.rankings.load(item.category)
        if any(ranked.id == item.id for ranked in rankings):
            raise DuplicateItem(f"Item {item.id!r} is already ranked")

        run = TournamentRun.seeding(
            item,
            rankings[:self.config.top_n],
            config=self.config,
            event_handler=self.event_handler,
        )
        self._register(run)
        return run

    def choose_winner(self, category: Category, item_id: str) -> tuple[MatchResult, RunOutcome | None]:
        """Answer the current comparison of the category's run.

        Returns:
            The resolved matchup, and the merged outcome if this answer
            completed the run (None otherwise)
        """
        run = self._require_run(category)
        result = run.choose_winner(item_id)
        return result, self._finish_if_complete(run)

    def invoke_draw(self, category: Category) -> tuple[MatchResult, RunOutcome | None]:
        """Spend the run's single draw on the current comparison."""
        run = self._require_run(category)
        result = run.invoke_draw()
        return result, self._finish_if_complete(run)

    def finish(self, category: Category) -> RunOutcome:
        """Merge the category's completed run and release it.

        Raises:
            PersistenceUnavailable: the stored list could not be read (the
                run stays active, call ``finish`` again) or the merge could
                not be saved (the outcome is kept for ``retry_save``)
        """
        run = self._require_run(category)
        if not run.is_complete:
            raise RunNotComplete(f"The {category.value} run still has matchups to resolve")

        try:
            if run.kind == RunKind.SEEDING:
                outcome = self.rankings.merge_seeded_run(run.new_item_final(), run)
            else:
                outcome = self.rankings.merge_full_run(run)
        except PersistenceUnavailable as e:
            if e.outcome is not None:
                self.unsaved[category] = e.outcome
                del self.active_runs[category]
            raise

        del self.active_runs[category]
        return outcome

    def retry_save(self, category: Category) -> RunOutcome:
        """Write a previously merged outcome whose save failed."""
        outcome = self.unsaved.get(category)
        if outcome is None:
            raise NoActiveRun(f"No unsaved result for {category.value}")

        self.rankings.save(outcome)
        del self.unsaved[category]
        log.info("unsaved_outcome_written", category=category.value, total=outcome.total)
        return outcome

    def abandon(self, category: Category) -> None:
        """Drop the category's run without merging anything."""
        run = self.active_runs.pop(category, None)
        if run is not None:
            log.info("run_abandoned", category=category.value, progress=list(run.progress))

    def _finish_if_complete(self, run: TournamentRun) -> RunOutcome | None:
        if not run.is_complete:
            return None
        return self.finish(run.category)

    def _check_can_start(self, category: Category, replace: bool) -> None:
        if category in self.active_runs and not replace:
            log.warning("run_start_rejected", category=category.value)
            raise RunAlreadyActive(f"A {category.value} run is already in progress")
        # A new merge would read the stale stored list
        if category in self.unsaved:
            self.retry_save(category)

    def _register(self, run: TournamentRun) -> None:
        previous = self.active_runs.get(run.category)
        if previous is not None:
            log.info("run_replaced", category=run.category.value, progress=list(previous.progress))
        self.active_runs[run.category] = run

    def _require_run(self, category: Category) -> TournamentRun:
        run = self.active_runs.get(category)
        if run is None:
            raise NoActiveRun(f"No {category.value} run is in progress")
        return run
