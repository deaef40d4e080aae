"""Normalization of stored favorites: kind migration and deduplication.

Older app versions stored favorites without a ``kind``. Those records are
classified by checking the book id against the canonical list of scripture
books, which ships as a JSON data file and can be replaced through the
SCRIPTURE_BOOKS_PATH setting.
"""

import json
from pathlib import Path
from typing import Iterable, Optional, Union

from favsync.models.favorite import FavoriteKind, FavoriteRecord, NaturalKey

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "scripture_books.json"


class ScriptureCatalog:
    """Closed set of canonical scripture-book identifiers."""

    def __init__(self, book_ids: Iterable[str]):
        self._book_ids = frozenset(book_id.strip().lower() for book_id in book_ids)

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "ScriptureCatalog":
        """Load a catalog from a JSON array of book ids.

        Args:
            path: JSON file to read. Defaults to the bundled catalog.
        """
        catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
        with catalog_path.open(encoding="utf-8") as f:
            return cls(json.load(f))

    def __contains__(self, book_id: str) -> bool:
        return book_id.lower() in self._book_ids

    def __len__(self) -> int:
        return len(self._book_ids)

    def classify(self, book_id: str) -> FavoriteKind:
        """Scripture if the id is a canonical Bible book, otherwise book."""
        return FavoriteKind.SCRIPTURE if book_id in self else FavoriteKind.BOOK


def migrate_favorites(
    records: list[FavoriteRecord], catalog: ScriptureCatalog
) -> tuple[list[FavoriteRecord], bool]:
    """Fill in ``kind`` on records that lack it.

    Records that already carry a kind are returned untouched, so running
    this on migrated data is a no-op.

    Returns:
        Tuple of (migrated records, whether anything changed)
    """
    changed = False
    migrated = []
    for record in records:
        if record.kind is None:
            record = record.with_kind(catalog.classify(record.book_id))
            changed = True
        migrated.append(record)
    return migrated, changed


def dedupe_favorites(records: Iterable[FavoriteRecord]) -> list[FavoriteRecord]:
    """Keep one record per natural key, preferring the newest timestamp.

    On a timestamp tie the first record seen wins. Output follows the order
    in which each key was first seen.
    """
    seen: dict[NaturalKey, FavoriteRecord] = {}
    for record in records:
        current = seen.get(record.key)
        if current is None or record.timestamp > current.timestamp:
            seen[record.key] = record
    return list(seen.values())
