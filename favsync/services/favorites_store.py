"""On-device favorites collection.

The whole collection is stored as one JSON array under a single key. Every
mutation reads the full collection, changes it in memory and writes it back
whole; there is no partial update.
"""

import json
import logging

from favsync.exceptions import LocalStorageError
from favsync.models.favorite import FavoriteRecord
from favsync.services.key_value_store import KeyValueStore
from favsync.services.migration import ScriptureCatalog, dedupe_favorites, migrate_favorites

logger = logging.getLogger(__name__)


class LocalFavoritesStore:
    """Reads and writes the favorites blob."""

    def __init__(self, kv_store: KeyValueStore, storage_key: str, catalog: ScriptureCatalog):
        self.kv_store = kv_store
        self.storage_key = storage_key
        self.catalog = catalog

    async def load(self) -> list[FavoriteRecord]:
        """Return the stored records as-is.

        A missing or unreadable blob yields an empty list; read failures are
        logged and never raised, so startup is never blocked.
        """
        try:
            stored = await self.kv_store.get_item(self.storage_key)
            if not stored:
                return []
            data = json.loads(stored)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
        except Exception:
            logger.exception("Failed to read local favorites, treating as empty")
            return []

        records = []
        for item in data:
            try:
                records.append(FavoriteRecord.from_dict(item))
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning(f"Skipping malformed stored favorite: {item!r}")
        return records

    async def save(self, records: list[FavoriteRecord]) -> None:
        """Overwrite the whole collection.

        Raises:
            LocalStorageError: If the collection could not be written.
        """
        try:
            blob = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
            await self.kv_store.set_item(self.storage_key, blob)
        except Exception as e:
            logger.error(f"Failed to save local favorites: {e}")
            raise LocalStorageError(context={"count": len(records)}) from e

    async def load_favorites(self) -> list[FavoriteRecord]:
        """Load, migrate and deduplicate the collection.

        If any record needed a kind, the migrated and deduplicated collection
        is written back immediately. A failed write-back is logged; the
        migrated records are still returned.
        """
        records = await self.load()
        migrated, changed = migrate_favorites(records, self.catalog)
        favorites = dedupe_favorites(migrated)
        if changed:
            logger.info(f"Migrated {len(favorites)} local favorites to include kind")
            try:
                await self.save(favorites)
            except LocalStorageError:
                logger.warning("Could not persist migrated favorites, will retry on next read")
        return favorites

    async def clean_duplicates(self) -> int:
        """Remove duplicate natural keys from the stored collection.

        Returns:
            Number of records removed (0 on failure)
        """
        try:
            records = await self.load()
            cleaned = dedupe_favorites(records)
            removed = len(records) - len(cleaned)
            if removed > 0:
                await self.save(cleaned)
                logger.info(f"Removed {removed} duplicate favorite(s)")
            return removed
        except LocalStorageError:
            logger.error("Failed to clean duplicate favorites")
            return 0
