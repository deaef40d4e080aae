"""Read model of the favorites for the UI.

Keeps a snapshot of the local collection, refreshed on a fixed interval and
after every mutating call. Also provides the filtering, sorting and grouping
used by the favorites screen.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from favsync.config import get_settings
from favsync.models.favorite import FavoriteKind, FavoriteRecord
from favsync.models.sync_status import SyncStatus
from favsync.services.sync_engine import FavoritesSyncService

logger = logging.getLogger(__name__)


class SortOrder(str, Enum):
    """Orderings offered by the favorites screen."""

    RECENT = "recent"
    OLDEST = "oldest"
    BOOK = "book"
    CHAPTER = "chapter"


@dataclass
class FavoriteGroup:
    """One entry of the favorites list: a group or a single favorite."""

    records: list[FavoriteRecord]

    @property
    def first(self) -> FavoriteRecord:
        return self.records[0]

    @property
    def is_group(self) -> bool:
        return len(self.records) > 1

    @property
    def group_id(self) -> Optional[str]:
        return self.first.group_id if self.is_group else None


def filter_favorites(
    records: Iterable[FavoriteRecord], kind: Optional[FavoriteKind] = None
) -> list[FavoriteRecord]:
    """Favorites of the given kind, or all of them when kind is None."""
    if kind is None:
        return list(records)
    return [r for r in records if r.kind == kind]


def sort_favorites(records: Iterable[FavoriteRecord], order: SortOrder) -> list[FavoriteRecord]:
    if order == SortOrder.RECENT:
        return sorted(records, key=lambda r: r.timestamp, reverse=True)
    if order == SortOrder.OLDEST:
        return sorted(records, key=lambda r: r.timestamp)
    if order == SortOrder.BOOK:
        return sorted(records, key=lambda r: r.book_title.casefold())
    return sorted(
        records,
        key=lambda r: (r.book_title.casefold(), r.book_id, r.chapter_id, r.paragraph_number),
    )


def group_favorites(records: Iterable[FavoriteRecord]) -> list[FavoriteGroup]:
    """Collapse favorites sharing a group id into one entry.

    Each group appears where its first member appears. A group id with a
    single member left is shown as a plain favorite.
    """
    records = list(records)
    members: dict[str, list[FavoriteRecord]] = {}
    for record in records:
        if record.group_id:
            members.setdefault(record.group_id, []).append(record)

    entries = []
    emitted = set()
    for record in records:
        if not record.group_id:
            entries.append(FavoriteGroup([record]))
        elif record.group_id not in emitted:
            entries.append(FavoriteGroup(members[record.group_id]))
            emitted.add(record.group_id)
    return entries


def make_group(records: list[FavoriteRecord]) -> list[FavoriteRecord]:
    """Tag a multi-paragraph selection as one group.

    All records get the same fresh group id and a ``"first-last"`` range of
    paragraph numbers. A single record is returned unchanged.
    """
    if len(records) < 2:
        return list(records)
    numbers = [r.paragraph_number for r in records]
    group_id = uuid.uuid4().hex
    group_range = f"{min(numbers)}-{max(numbers)}"
    return [r.with_group(group_id, group_range) for r in records]


class FavoritesQuery:
    """Polling snapshot of the favorites plus the mutating operations.

    Usage:
        async with FavoritesQuery(service) as query:
            await query.add_favorite(record)
            query.is_favorite("caminho", 1, 5)
    """

    def __init__(self, service: FavoritesSyncService, refresh_interval: Optional[float] = None):
        self.service = service
        self.refresh_interval = (
            refresh_interval if refresh_interval is not None else get_settings().refresh_interval
        )
        self._favorites: list[FavoriteRecord] = []
        self._loading = True
        self._poll_task: Optional[asyncio.Task] = None

    @property
    def favorites(self) -> list[FavoriteRecord]:
        return list(self._favorites)

    @property
    def loading(self) -> bool:
        return self._loading

    async def refresh(self) -> None:
        """Reload the snapshot from the local store."""
        try:
            self._favorites = await self.service.get_local_favorites()
        except Exception:
            logger.exception("Failed to load favorites")
        finally:
            self._loading = False

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            await self.refresh()

    async def start(self) -> None:
        """Load once, then keep refreshing in the background."""
        await self.refresh()
        if self._poll_task is None:
            self._poll_task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        if self._poll_task is None:
            return
        self._poll_task.cancel()
        try:
            await self._poll_task
        except asyncio.CancelledError:
            pass
        self._poll_task = None

    async def __aenter__(self) -> "FavoritesQuery":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def add_favorite(self, record: FavoriteRecord) -> bool:
        try:
            return await self.service.add_favorite(record)
        finally:
            await self.refresh()

    async def remove_favorite(self, record: FavoriteRecord) -> None:
        try:
            await self.service.remove_favorite(record)
        finally:
            await self.refresh()

    async def remove_group(self, group_id: str) -> int:
        try:
            return await self.service.remove_group(group_id)
        finally:
            await self.refresh()

    async def clear_all(self) -> None:
        try:
            await self.service.clear_all_favorites()
        finally:
            await self.refresh()

    async def sync_favorites(self) -> None:
        try:
            await self.service.sync_favorites()
        finally:
            await self.refresh()

    async def clean_duplicates(self) -> int:
        try:
            return await self.service.clean_duplicates()
        finally:
            await self.refresh()

    async def sync_status(self) -> SyncStatus:
        return await self.service.get_sync_status()

    def is_favorite(self, book_id: str, chapter_id: int, paragraph_number: int) -> bool:
        key = (book_id, chapter_id, paragraph_number)
        return any(f.key == key for f in self._favorites)

    async def toggle_paragraphs(self, records: list[FavoriteRecord]) -> tuple[int, int]:
        """Toggle a selection of paragraphs.

        Paragraphs already favorited are removed; the others are added as a
        single group.

        Returns:
            Tuple of (added count, removed count)
        """
        to_remove = [r for r in records if self.is_favorite(*r.key)]
        to_add = make_group([r for r in records if not self.is_favorite(*r.key)])

        added = 0
        try:
            for record in to_remove:
                await self.service.remove_favorite(record)
            for record in to_add:
                if await self.service.add_favorite(record):
                    added += 1
        finally:
            await self.refresh()
        return added, len(to_remove)
