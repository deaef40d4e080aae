"""Favorite as returned by the remote favorites service."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RemoteFavorite:
    """A favorite keyed by its server-assigned id.

    The server has no notion of kind or groups, and stores the chapter id
    as a string.
    """

    id: int
    book_slug: str
    chapter_id: str
    paragraph_index: int
    paragraph_text: str = ""
    user_id: Optional[int] = None
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "RemoteFavorite":
        return cls(
            id=int(data["id"]),
            book_slug=data["book_slug"],
            chapter_id=str(data["chapter_id"]),
            paragraph_index=int(data["paragraph_index"]),
            paragraph_text=data.get("paragraph_text") or "",
            user_id=data.get("user_id"),
            created_at=data.get("created_at"),
        )
