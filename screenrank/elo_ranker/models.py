"""Data models for the Elo ranking engine."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from screenrank.models import DEFAULT_RATING


class RankerConfig(BaseModel):
    """Configuration for the ranking engine."""
    initial_rating: int = DEFAULT_RATING
    k_factor: int = 32

    # Number of entries surfaced for display and used as the seeding set
    top_n: int = 5


class RunKind(str, Enum):
    """What a run was created for."""
    FULL = "full"          # round robin over a freshly onboarded set
    SEEDING = "seeding"    # one new item against the current top set


class RunStatus(str, Enum):
    SCHEDULING = "scheduling"
    AWAITING_CHOICE = "awaiting_choice"
    UPDATING = "updating"
    COMPLETE = "complete"


class Matchup(BaseModel):
    """An unordered pair of item ids to be compared once."""
    model_config = ConfigDict(frozen=True)

    item_a: str
    item_b: str

    @property
    def pair(self) -> frozenset[str]:
        return frozenset((self.item_a, self.item_b))

    @property
    def participants(self) -> tuple[str, str]:
        return (self.item_a, self.item_b)

    def opponent_of(self, item_id: str) -> str:
        return self.item_b if item_id == self.item_a else self.item_a


class MatchResult(BaseModel):
    """Resolution of a single matchup."""
    matchup: Matchup
    winner: str | None  # item id, or None for a draw
    old_ratings: dict[str, int]
    new_ratings: dict[str, int]

    @property
    def is_draw(self) -> bool:
        return self.winner is None


class FinalRating(BaseModel):
    """A participant's rating at the end of a run."""
    rating: int
    display_rating: float
