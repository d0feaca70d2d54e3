"""Event system for decoupling the ranking engine from presentation.

The engine emits events without knowing how (or whether) they are shown.
A UI subscribes by passing an object implementing ``EventHandler``.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from screenrank.elo_ranker.models import Matchup, MatchResult
    from screenrank.models import Item


class EventHandler(Protocol):
    """Protocol for handlers that receive events from a ranking run."""

    def on_matchup_start(
        self,
        matchup: "Matchup",
        index: int,
        total: int,
        **kwargs: Any
    ) -> None:
        """Called when a matchup becomes the current one.

        Args:
            matchup: The matchup awaiting a choice
            index: Zero-based position of the matchup in the schedule
            total: Number of matchups in the schedule
            **kwargs: Additional context
        """
        ...

    def on_matchup_resolved(
        self,
        result: "MatchResult",
        **kwargs: Any
    ) -> None:
        """Called after a choice or draw has updated the ratings."""
        ...

    def on_run_complete(
        self,
        standings: list["Item"],
        **kwargs: Any
    ) -> None:
        """Called once when the run reaches its terminal state.

        Args:
            standings: Participants with final ratings, best first
            **kwargs: Additional context
        """
        ...


class NullEventHandler:
    """Event handler that does nothing.

    Used as the default when no one is listening.
    """

    def on_matchup_start(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_matchup_resolved(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_run_complete(self, *args: Any, **kwargs: Any) -> None:
        pass
