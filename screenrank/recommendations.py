"""Exchange records for the external recommendation service.

The ranking engine never calls the service. These helpers only build the
request payload from the ranked lists and validate what comes back.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from screenrank.logging import get_logger
from screenrank.models import Category, Item

log = get_logger(__name__)

# The service speaks in "movie" / "tv"
_SERVICE_TYPES = {Category.MOVIE: "movie", Category.SHOW: "tv"}


class Recommendation(BaseModel):
    """A title suggested by the recommendation service."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    title: str
    type: Literal["movie", "tv"]
    reason: str = ""
    poster_path: str | None = None
    year: str | None = None

    @property
    def category(self) -> Category:
        return Category.MOVIE if self.type == "movie" else Category.SHOW


_recommendations_adapter = TypeAdapter(list[Recommendation])


def build_favorites_payload(movies: list[Item], shows: list[Item]) -> dict[str, Any]:
    """Request body listing the user's top titles (title and type only)."""
    favorites = [
        {"title": item.title, "type": _SERVICE_TYPES[item.category]}
        for item in [*movies, *shows]
    ]
    return {"favorites": favorites}


def parse_recommendations(raw: str | dict[str, Any]) -> list[Recommendation]:
    """Validate a service response. Anything unreadable gives []."""
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        records = data.get("recommendations", []) if isinstance(data, dict) else data
        return _recommendations_adapter.validate_python(records)
    except (json.JSONDecodeError, ValidationError) as e:
        log.warning("recommendations_malformed", error=str(e))
        return []
