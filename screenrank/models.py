from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_RATING = 1000
UNKNOWN_YEAR = "unknown"


class Category(str, Enum):
    """Kind of title being ranked. Each category keeps its own list."""
    MOVIE = "movie"
    SHOW = "show"


class Item(BaseModel):
    """A ranked candidate (a movie or a show).

    Accepts the field names written by older clients (``eloRating``,
    ``displayRating``, ``poster_path``, numeric ids) when loading; always
    dumps with its own field names.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str                                    # opaque, unique within a category
    title: str
    category: Category
    year: str = UNKNOWN_YEAR
    poster_ref: str | None = Field(
        default=None, validation_alias=AliasChoices("poster_ref", "poster_path")
    )
    rating: int = Field(
        default=DEFAULT_RATING, validation_alias=AliasChoices("rating", "eloRating")
    )
    # Derived from rating; filled in whenever the engine hands an item back
    display_rating: float | None = Field(
        default=None, validation_alias=AliasChoices("display_rating", "displayRating")
    )

    @field_validator("year", mode="before")
    @classmethod
    def _normalize_year(cls, value: Any) -> Any:
        if value is None or str(value).strip() == "":
            return UNKNOWN_YEAR
        return value

    @classmethod
    def from_search_result(cls, record: dict[str, Any], category: Category) -> "Item":
        """Build an Item from a metadata-provider search record.

        Movies carry ``title``/``release_date``; shows carry
        ``name``/``first_air_date``. The year is the first four characters
        of the date.
        """
        if category == Category.MOVIE:
            title = record.get("title") or record.get("name") or ""
            date = record.get("release_date") or ""
        else:
            title = record.get("name") or record.get("title") or ""
            date = record.get("first_air_date") or ""

        return cls(
            id=record["id"],
            title=title,
            category=category,
            year=str(date)[:4],
            poster_ref=record.get("poster_path"),
        )


class FavoritesSelection(BaseModel):
    """Onboarding pick list for one category.

    The picked items are the participants of the first full ranking pass.
    """
    category: Category
    items: list[Item] = Field(default_factory=list)
    min_items: int = 5
    max_items: int = 10

    @property
    def ids(self) -> set[str]:
        return {item.id for item in self.items}

    def toggle(self, item: Item) -> bool:
        """Pick or unpick an item.

        Returns:
            True if the item is picked after the call, False otherwise.
            Picking beyond ``max_items`` is ignored.
        """
        if item.id in self.ids:
            self.items = [i for i in self.items if i.id != item.id]
            return False
        if len(self.items) >= self.max_items:
            return False
        self.items.append(item)
        return True

    @property
    def can_finish(self) -> bool:
        return self.min_items <= len(self.items) <= self.max_items
