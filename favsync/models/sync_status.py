"""Persisted state of the favorites synchronization."""

from dataclasses import asdict, dataclass, fields
from typing import Optional


@dataclass
class SyncStatus:
    """Status of the last synchronization.

    Attributes:
        is_syncing: True while a full sync is running
        last_sync_at: Epoch millis of the last successful full sync
        pending_sync: A local change has not been confirmed remotely yet
        error: Message of the last failed sync, if any
    """

    is_syncing: bool = False
    last_sync_at: Optional[int] = None
    pending_sync: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SyncStatus":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
