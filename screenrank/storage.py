"""Persistence for ranking lists and onboarding selections.

Everything is stored as whole JSON values in a key-value store. The store
contract is two calls: ``get(key)`` returning the string or None, and
``set(key, value)`` returning whether the write succeeded. Stores signal
an unreachable backend by raising ``OSError`` and an undecodable value
by raising ``MalformedPersistedData``.

Keys are derived from the category here and nowhere else:

    movieRankings / showRankings     full ranked lists
    movieFavorites / showFavorites   onboarding snapshots
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from screenrank.elo_ranker.scoring import rescore
from screenrank.errors import MalformedPersistedData, PersistenceUnavailable
from screenrank.logging import get_logger
from screenrank.models import Category, FavoritesSelection, Item

log = get_logger(__name__)

_items_adapter = TypeAdapter(list[Item])


class KeyValueStore(Protocol):
    """Whole-value string storage."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> bool:
        ...


class MemoryStore:
    """In-process store, mostly for tests and previews."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> bool:
        self.values[key] = value
        return True


class JsonFileStore:
    """Stores each key as a file in a directory.

    Creates a layout like:
    data/
    ├── movieRankings.json
    ├── showRankings.json
    └── movieFavorites.json
    """

    def __init__(self, base_dir: Path | str = "data"):
        """Initialize the store.

        Args:
            base_dir: Directory holding one file per key (default: "data")
        """
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Filesystem-safe file name
        slug = re.sub(r"[^\w-]", "_", key).strip("_") or "_"
        return self.base_dir / f"{slug}.json"

    def get(self, key: str) -> str | None:
        """Stored text of ``key``, or None if it was never written.

        Raises:
            MalformedPersistedData: the file is not valid UTF-8
        """
        path = self._path(key)
        if not path.exists():
            return None
        data = path.read_bytes()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPersistedData(f"{path.name} is not UTF-8 text: {e}") from e

    def set(self, key: str, value: str) -> bool:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            log.error("file_store_write_failed", key=key, path=str(path), error=str(e))
            return False
        return True


class _JsonListRepository:
    """Shared encode/decode of item lists stored under per-category keys."""

    key_suffix = ""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def key(self, category: Category) -> str:
        return f"{category.value}{self.key_suffix}"

    def _read_items(self, category: Category) -> list[Item]:
        key = self.key(category)
        try:
            raw = self.store.get(key)
        except OSError as e:
            log.error("store_read_failed", key=key, error=str(e))
            raise PersistenceUnavailable(f"Could not read {key!r}: {e}", category=category) from e
        except MalformedPersistedData as e:
            log.warning("stored_list_malformed", key=key, error=str(e))
            return []

        if raw is None:
            return []

        try:
            return self._decode(raw, category)
        except MalformedPersistedData as e:
            log.warning("stored_list_malformed", key=key, error=str(e))
            return []

    def _decode(self, raw: str, category: Category) -> list[Item]:
        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedPersistedData(f"Invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise MalformedPersistedData(f"Expected a list, got {type(data).__name__}")

        # Older records do not carry their category
        records = [
            {"category": category.value, **entry} if isinstance(entry, dict) else entry
            for entry in data
        ]
        try:
            items = _items_adapter.validate_python(records)
        except ValidationError as e:
            raise MalformedPersistedData(f"Invalid item record: {e}") from e

        return [rescore(item, item.rating) for item in items]

    def _write_items(self, category: Category, items: list[Item]) -> None:
        key = self.key(category)
        value = json.dumps([item.model_dump(mode="json") for item in items])
        try:
            ok = self.store.set(key, value)
        except OSError as e:
            log.error("store_write_failed", key=key, error=str(e))
            ok = False

        if not ok:
            raise PersistenceUnavailable(
                f"Could not write {key!r}", category=category, pending=list(items)
            )
        log.info("list_saved", key=key, count=len(items))


class RankingRepository(_JsonListRepository):
    """Full ranked list per category."""

    key_suffix = "Rankings"

    def load(self, category: Category) -> list[Item]:
        """Stored list, best first. Absent or unreadable data gives []."""
        return self._read_items(category)

    def save(self, category: Category, items: list[Item]) -> None:
        """Replace the stored list.

        Raises:
            PersistenceUnavailable: the write failed; ``pending`` holds ``items``
        """
        self._write_items(category, items)


class FavoritesRepository(_JsonListRepository):
    """Onboarding selection snapshot per category."""

    key_suffix = "Favorites"

    def load(self, category: Category) -> FavoritesSelection:
        return FavoritesSelection(category=category, items=self._read_items(category))

    def save(self, selection: FavoritesSelection) -> None:
        self._write_items(selection.category, selection.items)
