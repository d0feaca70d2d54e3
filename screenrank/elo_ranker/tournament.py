"""Tournament run: the state machine behind one ranking pass."""

import random

from screenrank.elo_ranker.elo import apply_outcome
from screenrank.elo_ranker.models import (
    FinalRating,
    Matchup,
    MatchResult,
    RankerConfig,
    RunKind,
    RunStatus,
)
from screenrank.elo_ranker.pairing import build_round_robin, build_seeding
from screenrank.elo_ranker.scoring import rescore, to_display_rating
from screenrank.errors import (
    CategoryMismatch,
    DrawAlreadyUsed,
    InvalidChoice,
    RunNotAwaitingChoice,
    RunNotComplete,
)
from screenrank.events import EventHandler, NullEventHandler
from screenrank.logging import get_logger
from screenrank.models import Category, Item


class TournamentRun:
    """One ranking pass over a fixed schedule of matchups.

    The same run drives both the full round robin and the seeding of a
    new item against the top set; only the schedule differs. Matchups are
    served strictly in schedule order, each resolved exactly once, either
    by choosing a winner or by spending the run's single draw.

    Lifecycle:
        SCHEDULING -> AWAITING_CHOICE -> UPDATING -> AWAITING_CHOICE ... -> COMPLETE

    An empty schedule goes straight to COMPLETE with ratings unchanged.
    Nothing is persisted by the run itself; the caller merges a completed
    run into the ranking list and simply drops an abandoned one.
    """

    def __init__(
        self,
        category: Category,
        participants: list[Item],
        matchups: tuple[Matchup, ...],
        kind: RunKind = RunKind.FULL,
        new_item: Item | None = None,
        config: RankerConfig | None = None,
        event_handler: EventHandler | None = None
    ):
        """Initialize the run.

        Args:
            category: Category whose list the run will be merged into
            participants: Items taking part, carrying their starting ratings
            matchups: Fixed schedule; never reordered
            kind: Whether this is a full pass or a seeding pass
            new_item: The item being placed, for seeding runs
            config: Engine configuration (uses defaults if None)
            event_handler: Optional listener for progress (NullEventHandler if None)
        """
        self.category = category
        self.kind = kind
        self.log = get_logger(__name__, category=category.value, kind=kind.value)
        self.config = config or RankerConfig()
        self.event_handler = event_handler or NullEventHandler()
        self.status = RunStatus.SCHEDULING

        strays = [item.id for item in participants if item.category != category]
        if strays:
            self.log.warning("category_mismatch", item_ids=strays)
            raise CategoryMismatch(f"Items {strays} are not {category.value} items")

        self.participants: dict[str, Item] = {item.id: item for item in participants}
        for matchup in matchups:
            missing = [i for i in matchup.participants if i not in self.participants]
            if missing:
                raise ValueError(f"Matchup refers to unknown items: {missing}")

        self.matchups = tuple(matchups)
        self.new_item = new_item
        self.cursor = 0
        self.ratings: dict[str, int] = {
            item_id: item.rating for item_id, item in self.participants.items()
        }
        self.draw_used = False
        self.match_history: list[MatchResult] = []
        self.skipped = not self.matchups

        self.log.info(
            "run_started",
            participants=len(self.participants),
            matchups=len(self.matchups),
        )

        if self.skipped:
            self.log.info("empty_participant_set")
            self._complete()
        else:
            self.status = RunStatus.AWAITING_CHOICE
            self._announce_current()

    @classmethod
    def round_robin(
        cls,
        category: Category,
        items: list[Item],
        rng: random.Random | None = None,
        config: RankerConfig | None = None,
        event_handler: EventHandler | None = None
    ) -> "TournamentRun":
        """Create a full pass comparing every pair of ``items`` once."""
        return cls(
            category,
            participants=items,
            matchups=build_round_robin(items, rng),
            kind=RunKind.FULL,
            config=config,
            event_handler=event_handler,
        )

    @classmethod
    def seeding(
        cls,
        new_item: Item,
        top_items: list[Item],
        config: RankerConfig | None = None,
        event_handler: EventHandler | None = None
    ) -> "TournamentRun":
        """Create a pass placing ``new_item`` against the current top set.

        The new item always enters at the baseline rating.
        """
        config = config or RankerConfig()
        new_item = new_item.model_copy(update={"rating": config.initial_rating})
        return cls(
            new_item.category,
            participants=[new_item, *top_items],
            matchups=build_seeding(new_item, top_items),
            kind=RunKind.SEEDING,
            new_item=new_item,
            config=config,
            event_handler=event_handler,
        )

    @property
    def is_complete(self) -> bool:
        return self.status == RunStatus.COMPLETE

    @property
    def current_matchup(self) -> Matchup | None:
        """The matchup awaiting a choice, or None once the run is complete."""
        if self.status != RunStatus.AWAITING_CHOICE:
            return None
        return self.matchups[self.cursor]

    @property
    def progress(self) -> tuple[int, int]:
        """(resolved matchups, total matchups)."""
        return self.cursor, len(self.matchups)

    def choose_winner(self, item_id: str) -> MatchResult:
        """Resolve the current matchup in favor of ``item_id``.

        Raises:
            InvalidChoice: ``item_id`` is not in the current matchup
            RunNotAwaitingChoice: the run is already complete
        """
        matchup = self._require_matchup()
        item_id = str(item_id)
        if item_id not in matchup.participants:
            self.log.warning("invalid_choice", item_id=item_id, matchup=list(matchup.participants))
            raise InvalidChoice(item_id, matchup.participants)

        return self._resolve(matchup, winner=item_id)

    def invoke_draw(self) -> MatchResult:
        """Resolve the current matchup as a draw. Allowed once per run.

        Raises:
            DrawAlreadyUsed: the run's draw has already been spent
            RunNotAwaitingChoice: the run is already complete
        """
        matchup = self._require_matchup()
        if self.draw_used:
            self.log.warning("draw_rejected", cursor=self.cursor)
            raise DrawAlreadyUsed("The draw can only be used once per run")

        self.draw_used = True
        self.log.info("draw_used", cursor=self.cursor)
        return self._resolve(matchup, winner=None)

    def final_ratings(self) -> dict[str, FinalRating]:
        """Final rating and display score of every participant."""
        if not self.is_complete:
            raise RunNotComplete("Run has not reached completion")
        return {
            item_id: FinalRating(rating=rating, display_rating=to_display_rating(rating))
            for item_id, rating in self.ratings.items()
        }

    def standings(self) -> list[Item]:
        """Participants with their current ratings, best first.

        Ties keep participant order.
        """
        scored = [
            rescore(item, self.ratings[item_id])
            for item_id, item in self.participants.items()
        ]
        return sorted(scored, key=lambda item: item.rating, reverse=True)

    def new_item_final(self) -> Item:
        """The seeded item with its final rating."""
        if self.new_item is None:
            raise ValueError("Only seeding runs have a new item")
        if not self.is_complete:
            raise RunNotComplete("Run has not reached completion")
        return rescore(self.new_item, self.ratings[self.new_item.id])

    def _require_matchup(self) -> Matchup:
        matchup = self.current_matchup
        if matchup is None:
            self.log.warning("run_not_awaiting_choice", status=self.status.value)
            raise RunNotAwaitingChoice(f"Run is {self.status.value}, no matchup awaits a choice")
        return matchup

    def _resolve(self, matchup: Matchup, winner: str | None) -> MatchResult:
        self.status = RunStatus.UPDATING

        # For a draw the slots are positional
        first = winner if winner is not None else matchup.item_a
        second = matchup.opponent_of(first)

        old_ratings = {first: self.ratings[first], second: self.ratings[second]}
        new_first, new_second = apply_outcome(
            old_ratings[first],
            old_ratings[second],
            is_draw=winner is None,
            k_factor=self.config.k_factor,
        )
        self.ratings[first] = new_first
        self.ratings[second] = new_second

        result = MatchResult(
            matchup=matchup,
            winner=winner,
            old_ratings=old_ratings,
            new_ratings={first: new_first, second: new_second},
        )
        self.match_history.append(result)
        self.log.debug(
            "matchup_resolved",
            cursor=self.cursor,
            winner=winner,
            old_ratings=old_ratings,
            new_ratings=result.new_ratings,
        )
        self.event_handler.on_matchup_resolved(result=result)

        self.cursor += 1
        if self.cursor >= len(self.matchups):
            self._complete()
        else:
            self.status = RunStatus.AWAITING_CHOICE
            self._announce_current()

        return result

    def _announce_current(self) -> None:
        self.event_handler.on_matchup_start(
            matchup=self.matchups[self.cursor],
            index=self.cursor,
            total=len(self.matchups),
        )

    def _complete(self) -> None:
        self.status = RunStatus.COMPLETE
        standings = self.standings()
        self.log.info(
            "run_complete",
            matchups=len(self.matchups),
            draw_used=self.draw_used,
        )
        self.event_handler.on_run_complete(standings=standings)
