"""Data models."""

from favsync.models.favorite import FavoriteKind, FavoriteRecord, NaturalKey
from favsync.models.remote_favorite import RemoteFavorite
from favsync.models.storage_item import StorageItem
from favsync.models.sync_status import SyncStatus
from favsync.models.user_favorite import UserFavorite

__all__ = [
    "FavoriteKind",
    "FavoriteRecord",
    "NaturalKey",
    "RemoteFavorite",
    "StorageItem",
    "SyncStatus",
    "UserFavorite",
]
