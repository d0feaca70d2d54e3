"""Conversion of skill ratings to the 0-10 score shown to users.

Baseline-centered: every onboarded item is a favorite, so the starting
rating maps to an excellent score and each 400 points moves it by 3.
"""

from screenrank.elo_ranker.elo import round_half_up
from screenrank.models import DEFAULT_RATING, Item

BASELINE_DISPLAY = 9.0
POINTS_PER_STEP = 400
DISPLAY_PER_STEP = 3.0
MIN_DISPLAY = 0.0
MAX_DISPLAY = 10.0


def to_display_rating(rating: int) -> float:
    """Map a skill rating to a display score in [0, 10], one decimal place."""
    change = (rating - DEFAULT_RATING) / POINTS_PER_STEP * DISPLAY_PER_STEP
    score = round_half_up((BASELINE_DISPLAY + change) * 10) / 10
    return max(MIN_DISPLAY, min(MAX_DISPLAY, score))


def rescore(item: Item, rating: int) -> Item:
    """Return a copy of ``item`` carrying ``rating`` and its display score."""
    return item.model_copy(
        update={"rating": rating, "display_rating": to_display_rating(rating)}
    )
