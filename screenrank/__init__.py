"""ScreenRank: personal movie and show rankings from pairwise choices."""

from screenrank.models import Category, FavoritesSelection, Item
from screenrank.rankings import RankingListManager, RunOutcome
from screenrank.service import RankingService

__all__ = [
    "Category",
    "FavoritesSelection",
    "Item",
    "RankingListManager",
    "RankingService",
    "RunOutcome",
]
