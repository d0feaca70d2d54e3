"""Ranking list manager: merges completed runs into the persisted lists."""

from pydantic import BaseModel

from screenrank.elo_ranker.models import MatchResult, RankerConfig, RunKind
from screenrank.elo_ranker.scoring import rescore
from screenrank.elo_ranker.tournament import TournamentRun
from screenrank.errors import DuplicateItem, PersistenceUnavailable, RunNotComplete
from screenrank.logging import get_logger
from screenrank.models import Category, Item
from screenrank.storage import RankingRepository

log = get_logger(__name__)


class RunOutcome(BaseModel):
    """Result of merging a completed run into a category's list."""
    category: Category
    kind: RunKind
    rankings: list[Item]      # full list, best first, as persisted
    item: Item | None = None  # seeded item with its final rating
    rank: int | None = None   # 1-indexed position of ``item``
    matches: list[MatchResult] = []  # comparisons of the run, in order

    @property
    def total(self) -> int:
        return len(self.rankings)

    def top(self, n: int = 5) -> list[Item]:
        return self.rankings[:n]


def _sort_by_rating(items: list[Item]) -> list[Item]:
    # sorted() is stable: ties keep their previous relative order
    return sorted(items, key=lambda item: item.rating, reverse=True)


class RankingListManager:
    """Owns the per-category ranked lists.

    The full list is always persisted; callers display only the first
    ``config.top_n`` entries.
    """

    def __init__(self, repository: RankingRepository, config: RankerConfig | None = None):
        self.repository = repository
        self.config = config or RankerConfig()

    def load(self, category: Category) -> list[Item]:
        return self.repository.load(category)

    def top(self, category: Category, n: int | None = None) -> list[Item]:
        """The first ``n`` entries (``config.top_n`` by default)."""
        return self.load(category)[:self.config.top_n if n is None else n]

    def merge_full_run(self, run: TournamentRun) -> RunOutcome:
        """Write a completed run's ratings into the category's list.

        Items in the run replace the stored ratings of matching ids;
        participants not yet stored are added; everything else is left
        untouched.
        """
        final = self._final_ratings(run)
        existing = self.load(run.category)
        stored_ids = {item.id for item in existing}

        merged = [
            rescore(item, final[item.id].rating) if item.id in final else item
            for item in existing
        ]
        merged.extend(
            rescore(item, final[item_id].rating)
            for item_id, item in run.participants.items()
            if item_id not in stored_ids
        )

        outcome = RunOutcome(
            category=run.category,
            kind=run.kind,
            rankings=_sort_by_rating(merged),
            matches=list(run.match_history),
        )
        self._persist(outcome)
        log.info(
            "full_run_merged",
            category=run.category.value,
            participants=len(final),
            total=outcome.total,
        )
        return outcome

    def merge_seeded_run(self, new_item_final: Item, run: TournamentRun) -> RunOutcome:
        """Insert a seeded item and apply the run's updates to the top set.

        With an empty stored list the run has no matchups, so the item
        lands at the baseline rating with rank 1 of 1.
        """
        final = self._final_ratings(run)
        existing = self.load(run.category)
        if any(item.id == new_item_final.id for item in existing):
            raise DuplicateItem(f"Item {new_item_final.id!r} is already ranked")

        merged = [
            rescore(item, final[item.id].rating) if item.id in final else item
            for item in existing
        ]
        merged.append(rescore(new_item_final, new_item_final.rating))
        rankings = _sort_by_rating(merged)
        rank = next(i for i, item in enumerate(rankings, 1) if item.id == new_item_final.id)

        outcome = RunOutcome(
            category=run.category,
            kind=run.kind,
            rankings=rankings,
            item=rankings[rank - 1],
            rank=rank,
            matches=list(run.match_history),
        )
        self._persist(outcome)
        log.info(
            "seeded_run_merged",
            category=run.category.value,
            item_id=new_item_final.id,
            rank=rank,
            total=outcome.total,
        )
        return outcome

    def save(self, outcome: RunOutcome) -> None:
        """Persist an outcome whose earlier save failed."""
        self._persist(outcome)

    def _final_ratings(self, run: TournamentRun):
        if not run.is_complete:
            raise RunNotComplete("Only completed runs can be merged")
        return run.final_ratings()

    def _persist(self, outcome: RunOutcome) -> None:
        try:
            self.repository.save(outcome.category, outcome.rankings)
        except PersistenceUnavailable as e:
            log.error("ranking_save_failed", category=outcome.category.value, error=str(e))
            e.outcome = outcome
            raise
