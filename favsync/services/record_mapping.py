"""Translation between local favorite records and the remote API shape."""

import logging
from datetime import datetime, timezone
from typing import Optional

from favsync.models.favorite import FavoriteRecord, NaturalKey, now_millis
from favsync.models.remote_favorite import RemoteFavorite
from favsync.services.migration import ScriptureCatalog

logger = logging.getLogger(__name__)


def to_remote(record: FavoriteRecord) -> dict:
    """Build the POST /favorites body for a local record."""
    return {
        "book_slug": record.book_id,
        "chapter_id": str(record.chapter_id),
        "paragraph_index": record.paragraph_number,
        "paragraph_text": record.paragraph_text,
    }


def remote_key(remote: RemoteFavorite) -> Optional[NaturalKey]:
    """Natural key of a remote favorite, or None if its chapter id is not numeric."""
    try:
        return (remote.book_slug, int(remote.chapter_id), remote.paragraph_index)
    except (TypeError, ValueError):
        return None


def _created_at_millis(created_at: Optional[str]) -> int:
    if not created_at:
        return now_millis()
    try:
        parsed = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except ValueError:
        return now_millis()
    # Naive server timestamps are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def from_remote(remote: RemoteFavorite, catalog: ScriptureCatalog) -> Optional[FavoriteRecord]:
    """Translate a remote favorite into a local record.

    The server does not store titles, kind or groups: titles come back
    empty and the kind is reclassified from the book id.

    Returns:
        The local record, or None if the remote chapter id is unusable.
    """
    key = remote_key(remote)
    if key is None:
        logger.warning(
            "Skipping remote favorite %s with non-numeric chapter id %r",
            remote.id, remote.chapter_id,
        )
        return None

    book_id, chapter_id, paragraph_number = key
    return FavoriteRecord(
        book_id=book_id,
        chapter_id=chapter_id,
        paragraph_number=paragraph_number,
        paragraph_text=remote.paragraph_text,
        timestamp=_created_at_millis(remote.created_at),
        kind=catalog.classify(book_id),
    )
