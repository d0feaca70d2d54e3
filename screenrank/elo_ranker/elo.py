"""Pure Elo rating calculations."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def expected_score(rating_a: float, rating_b: float) -> float:
    """Calculate expected score for item A against item B.

    Uses the standard Elo formula: E_A = 1 / (1 + 10^((R_B - R_A) / 400))

    Args:
        rating_a: Rating of item A
        rating_b: Rating of item B

    Returns:
        Expected score (0.0 to 1.0) for item A
    """
    return 1.0 / (1.0 + math.pow(10.0, (rating_b - rating_a) / 400.0))


def apply_outcome(
    rating_winner: int,
    rating_loser: int,
    is_draw: bool = False,
    k_factor: int = 32
) -> tuple[int, int]:
    """Compute both ratings after a comparison.

    For a draw the winner/loser slots are only positional: each side
    scores 0.5.

    Args:
        rating_winner: Rating of the preferred item (or first item of a draw)
        rating_loser: Rating of the other item
        is_draw: True if the comparison was a draw
        k_factor: K-factor for rating updates

    Returns:
        (new_winner_rating, new_loser_rating), each rounded independently
    """
    expected_winner = expected_score(rating_winner, rating_loser)
    expected_loser = expected_score(rating_loser, rating_winner)

    if is_draw:
        actual_winner = actual_loser = 0.5
    else:
        actual_winner = 1.0
        actual_loser = 0.0

    # R' = R + K * (S - E)
    new_winner = round_half_up(rating_winner + k_factor * (actual_winner - expected_winner))
    new_loser = round_half_up(rating_loser + k_factor * (actual_loser - expected_loser))

    return new_winner, new_loser
