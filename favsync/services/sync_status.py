"""Persistence of the sync status record."""

import json
import logging

from favsync.models.sync_status import SyncStatus
from favsync.services.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class SyncStatusStore:
    """Reads and updates the SyncStatus blob.

    Status is advisory: read failures return defaults and write failures
    are logged, never raised.
    """

    def __init__(self, kv_store: KeyValueStore, storage_key: str):
        self.kv_store = kv_store
        self.storage_key = storage_key

    async def get(self) -> SyncStatus:
        try:
            stored = await self.kv_store.get_item(self.storage_key)
            if stored:
                return SyncStatus.from_dict(json.loads(stored))
        except Exception:
            logger.exception("Failed to read sync status")
        return SyncStatus()

    async def update(self, **changes) -> SyncStatus:
        """Merge ``changes`` into the stored status and persist it."""
        current = await self.get()
        updated = SyncStatus.from_dict({**current.to_dict(), **changes})
        try:
            await self.kv_store.set_item(self.storage_key, json.dumps(updated.to_dict()))
        except Exception:
            logger.exception("Failed to update sync status")
        return updated
