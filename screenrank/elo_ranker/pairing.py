"""Schedules of matchups for a ranking run."""

import random
from itertools import combinations

from screenrank.elo_ranker.models import Matchup
from screenrank.errors import DuplicateItem
from screenrank.models import Item


def _check_unique(items: list[Item]) -> None:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise DuplicateItem(f"Item {item.id!r} appears more than once")
        seen.add(item.id)


def build_round_robin(
    items: list[Item],
    rng: random.Random | None = None
) -> tuple[Matchup, ...]:
    """Every unordered pair of items exactly once, in shuffled order.

    Args:
        items: Participants (ids must be unique)
        rng: Random source for the shuffle; pass a seeded one for a
            reproducible order

    Returns:
        n*(n-1)/2 matchups, or an empty schedule for fewer than 2 items
    """
    _check_unique(items)
    if len(items) < 2:
        return ()

    matchups = [Matchup(item_a=a.id, item_b=b.id) for a, b in combinations(items, 2)]
    (rng or random.Random()).shuffle(matchups)
    return tuple(matchups)


def build_seeding(new_item: Item, top_items: list[Item]) -> tuple[Matchup, ...]:
    """One matchup of ``new_item`` against each of ``top_items``, rank-first.

    An empty top set gives an empty schedule; the item is then placed
    at the baseline rating without any comparisons.
    """
    _check_unique(top_items)
    if any(item.id == new_item.id for item in top_items):
        raise DuplicateItem(f"Item {new_item.id!r} is already ranked")

    return tuple(Matchup(item_a=new_item.id, item_b=item.id) for item in top_items)
