"""Local-first synchronization of favorites with the remote service.

Writes always land in the local store first; the remote side is updated on
a best-effort basis. A full sync merges both sides, with the local copy
winning whenever both hold the same natural key.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from favsync.config import Settings, get_settings
from favsync.models.favorite import FavoriteRecord, NaturalKey, now_millis
from favsync.models.remote_favorite import RemoteFavorite
from favsync.models.sync_status import SyncStatus
from favsync.services.favorites_api import FavoritesAPIClient, RemoteFavoritesGateway
from favsync.services.favorites_store import LocalFavoritesStore
from favsync.services.key_value_store import KeyValueStore
from favsync.services.migration import ScriptureCatalog
from favsync.services.record_mapping import from_remote, remote_key, to_remote
from favsync.services.sync_status import SyncStatusStore

logger = logging.getLogger(__name__)


def merge_favorites(
    local: Iterable[FavoriteRecord], remote: Iterable[FavoriteRecord]
) -> list[FavoriteRecord]:
    """Union of both sides with one record per natural key.

    A local record is never replaced by a remote one with the same key,
    whatever the timestamps.
    """
    merged: dict[NaturalKey, FavoriteRecord] = {}
    for record in local:
        merged.setdefault(record.key, record)
    for record in remote:
        merged.setdefault(record.key, record)
    return list(merged.values())


def _find_remote(remotes: list[RemoteFavorite], key: NaturalKey) -> Optional[RemoteFavorite]:
    for remote in remotes:
        if remote_key(remote) == key:
            return remote
    return None


class FavoritesSyncService:
    """The only component allowed to write to the remote favorites.

    Construct one instance at startup and pass it to consumers.
    """

    def __init__(
        self,
        store: LocalFavoritesStore,
        gateway: RemoteFavoritesGateway,
        status_store: SyncStatusStore,
    ):
        self.store = store
        self.gateway = gateway
        self.status_store = status_store
        self._sync_in_progress = False

    @property
    def catalog(self) -> ScriptureCatalog:
        return self.store.catalog

    async def get_local_favorites(self) -> list[FavoriteRecord]:
        return await self.store.load_favorites()

    async def get_sync_status(self) -> SyncStatus:
        return await self.status_store.get()

    async def clean_duplicates(self) -> int:
        return await self.store.clean_duplicates()

    async def add_favorite(self, record: FavoriteRecord) -> bool:
        """Add a favorite locally, then push it to the remote service.

        Adding a natural key that already exists is a no-op and keeps the
        stored payload.

        Returns:
            True if the record was added, False if it already existed

        Raises:
            LocalStorageError: If the local write fails.
        """
        favorites = await self.store.load_favorites()
        if any(f.key == record.key for f in favorites):
            logger.debug(f"Favorite {record.key} already exists locally, skipping")
            return False

        if record.kind is None:
            record = record.with_kind(self.catalog.classify(record.book_id))
        favorites.append(record)
        await self.store.save(favorites)

        try:
            await self.gateway.create(to_remote(record))
        except Exception as e:
            logger.warning(f"Favorite {record.key} saved locally, remote sync pending: {e}")
            await self.status_store.update(pending_sync=True)
        else:
            await self.status_store.update(pending_sync=False)
        return True

    async def remove_favorite(self, record: FavoriteRecord) -> None:
        """Remove a favorite locally, then delete its remote counterpart.

        Remote failures never undo the local removal.

        Raises:
            LocalStorageError: If the local write fails.
        """
        favorites = await self.store.load_favorites()
        await self.store.save([f for f in favorites if f.key != record.key])

        try:
            remotes = await self.gateway.list()
            remote = _find_remote(remotes, record.key)
            if remote is None:
                logger.warning(f"Favorite {record.key} not found remotely, nothing to delete")
                return
            await self.gateway.delete_by_id(remote.id)
            logger.info(f"Removed remote favorite {remote.id}")
        except Exception as e:
            logger.warning(f"Could not remove favorite {record.key} remotely: {e}")
            await self.status_store.update(pending_sync=True)

    async def remove_group(self, group_id: str) -> int:
        """Remove every favorite created together under ``group_id``.

        Returns:
            Number of local records removed
        """
        favorites = await self.store.load_favorites()
        removed = [f for f in favorites if f.group_id == group_id]
        if not removed:
            return 0
        await self.store.save([f for f in favorites if f.group_id != group_id])

        try:
            remotes = await self.gateway.list()
        except Exception as e:
            logger.warning(f"Could not remove group {group_id} remotely: {e}")
            await self.status_store.update(pending_sync=True)
            return len(removed)

        for record in removed:
            remote = _find_remote(remotes, record.key)
            if remote is None:
                logger.warning(f"Favorite {record.key} not found remotely, nothing to delete")
                continue
            try:
                await self.gateway.delete_by_id(remote.id)
            except Exception as e:
                logger.warning(f"Could not remove favorite {record.key} remotely: {e}")
                await self.status_store.update(pending_sync=True)
        return len(removed)

    async def clear_all_favorites(self) -> None:
        """Empty the local collection, then ask the remote to do the same.

        Raises:
            LocalStorageError: If the local write fails.
        """
        await self.store.save([])
        try:
            await self.gateway.delete_all()
        except Exception as e:
            logger.warning(f"Could not clear remote favorites: {e}")
            await self.status_store.update(pending_sync=True)

    async def sync_favorites(self) -> None:
        """Reconcile local and remote favorites.

        Only one sync runs at a time; a call made while another is running
        returns immediately. If the remote list cannot be fetched the error
        is recorded in the status and local data is left untouched.

        Raises:
            LocalStorageError: If the merged collection cannot be saved. The
                failure is also recorded in the sync status.
        """
        if self._sync_in_progress:
            logger.info("Sync already in progress, skipping")
            return

        self._sync_in_progress = True
        try:
            await self.status_store.update(is_syncing=True, error=None)

            local = await self.store.load_favorites()
            try:
                remotes = await self.gateway.list()
            except Exception as e:
                logger.warning(f"Sync failed, remote favorites unavailable: {e}")
                await self.status_store.update(
                    is_syncing=False, error=str(e), pending_sync=True
                )
                return

            remote_records = [
                record for record in (from_remote(r, self.catalog) for r in remotes)
                if record is not None
            ]
            merged = merge_favorites(local, remote_records)

            remote_keys = {record.key for record in remote_records}
            failed_pushes = 0
            for record in local:
                if record.key in remote_keys:
                    continue
                try:
                    await self.gateway.create(to_remote(record))
                except Exception as e:
                    failed_pushes += 1
                    logger.warning(f"Could not push favorite {record.key}: {e}")

            await self.store.save(merged)
            await self.status_store.update(
                is_syncing=False,
                last_sync_at=now_millis(),
                pending_sync=failed_pushes > 0,
                error=None,
            )
            logger.info(f"Sync complete: {len(merged)} favorites ({failed_pushes} push failures)")
        except Exception as e:
            logger.error(f"Sync failed: {e}")
            await self.status_store.update(is_syncing=False, error=str(e), pending_sync=True)
            raise
        finally:
            self._sync_in_progress = False


def build_sync_service(
    session_factory: async_sessionmaker[AsyncSession],
    gateway: Optional[RemoteFavoritesGateway] = None,
    settings: Optional[Settings] = None,
) -> FavoritesSyncService:
    """Wire a sync service from settings.

    Args:
        session_factory: Session factory of the local database
        gateway: Remote gateway; defaults to the HTTP client
        settings: Defaults to the cached application settings
    """
    settings = settings or get_settings()
    kv_store = KeyValueStore(session_factory)
    catalog = ScriptureCatalog.from_file(settings.scripture_books_path)
    return FavoritesSyncService(
        store=LocalFavoritesStore(kv_store, settings.favorites_storage_key, catalog),
        gateway=gateway or FavoritesAPIClient(),
        status_store=SyncStatusStore(kv_store, settings.sync_status_storage_key),
    )
