"""Favorites storage, remote client and synchronization services."""

from favsync.services.favorites_api import FavoritesAPIClient, RemoteFavoritesGateway
from favsync.services.favorites_query import FavoritesQuery, SortOrder
from favsync.services.favorites_store import LocalFavoritesStore
from favsync.services.key_value_store import KeyValueStore
from favsync.services.migration import ScriptureCatalog, dedupe_favorites, migrate_favorites
from favsync.services.sync_engine import FavoritesSyncService, build_sync_service, merge_favorites
from favsync.services.sync_status import SyncStatusStore

__all__ = [
    "FavoritesAPIClient",
    "RemoteFavoritesGateway",
    "FavoritesQuery",
    "SortOrder",
    "LocalFavoritesStore",
    "KeyValueStore",
    "ScriptureCatalog",
    "dedupe_favorites",
    "migrate_favorites",
    "FavoritesSyncService",
    "build_sync_service",
    "merge_favorites",
    "SyncStatusStore",
]
