"""Exceptions raised by the ranking engine.

None of these are fatal: a rejected operation leaves the run and the
persisted lists exactly as they were.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from screenrank.models import Category, Item
    from screenrank.rankings import RunOutcome


class RankingError(Exception):
    """Base class for all ranking errors."""


class InvalidChoice(RankingError, ValueError):
    """The chosen id is not a participant of the current matchup."""

    def __init__(self, item_id: str, participants: tuple[str, str]):
        self.item_id = item_id
        self.participants = participants
        super().__init__(
            f"{item_id!r} is not part of the current matchup {participants[0]!r} vs {participants[1]!r}"
        )


class DrawAlreadyUsed(RankingError):
    """The single draw of a run has already been spent."""


class RunNotAwaitingChoice(RankingError):
    """The run is complete, so no matchup awaits a choice."""


class RunNotComplete(RankingError):
    """The run still has matchups to resolve."""


class RunAlreadyActive(RankingError):
    """A run is already in progress for the category."""


class NoActiveRun(RankingError):
    """No run is in progress for the category."""


class DuplicateItem(RankingError, ValueError):
    """An id appears more than once where ids must be unique."""


class CategoryMismatch(RankingError, ValueError):
    """An item does not belong to the category of the run or list."""


class MalformedPersistedData(RankingError):
    """A stored value could not be decoded.

    Never escapes the storage layer; it is logged and the value is treated
    as an empty collection.
    """


class PersistenceUnavailable(RankingError):
    """The key-value store failed to read or write.

    When raised by a save, ``pending`` holds the list that was meant to be
    written so it can be saved again without redoing any comparisons, and
    ``outcome`` the merge result it belongs to (set by the list manager).
    """

    def __init__(
        self,
        message: str,
        category: "Category | None" = None,
        pending: "list[Item] | None" = None,
    ):
        self.category = category
        self.pending = pending
        self.outcome: "RunOutcome | None" = None
        super().__init__(message)
