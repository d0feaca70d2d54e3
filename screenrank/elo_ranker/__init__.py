"""Elo ranking engine for personal title lists."""

from screenrank.elo_ranker.elo import apply_outcome, expected_score
from screenrank.elo_ranker.models import (
    FinalRating,
    Matchup,
    MatchResult,
    RankerConfig,
    RunKind,
    RunStatus,
)
from screenrank.elo_ranker.pairing import build_round_robin, build_seeding
from screenrank.elo_ranker.scoring import to_display_rating
from screenrank.elo_ranker.tournament import TournamentRun

__all__ = [
    "TournamentRun",
    "Matchup",
    "MatchResult",
    "FinalRating",
    "RankerConfig",
    "RunKind",
    "RunStatus",
    "apply_outcome",
    "expected_score",
    "build_round_robin",
    "build_seeding",
    "to_display_rating",
]
