"""Local favorite record: a bookmarked paragraph or verse."""

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

NaturalKey = tuple[str, int, int]


class FavoriteKind(str, Enum):
    """Content family a favorite belongs to."""

    SCRIPTURE = "scripture"
    BOOK = "book"


# Values written by the first release of the mobile app
_LEGACY_KINDS = {
    "biblia": FavoriteKind.SCRIPTURE,
    "livro": FavoriteKind.BOOK,
}


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def parse_kind(value: Any) -> Optional[FavoriteKind]:
    """Parse a stored kind value, accepting legacy spellings.

    Returns None for missing or unrecognized values so migration can
    reclassify the record.
    """
    if not value:
        return None
    if isinstance(value, FavoriteKind):
        return value
    text = str(value).lower()
    if text in _LEGACY_KINDS:
        return _LEGACY_KINDS[text]
    try:
        return FavoriteKind(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class FavoriteRecord:
    """A bookmarked paragraph.

    Display fields (titles, text) are captured when the favorite is created
    and never refreshed from source content. Identity is the natural key
    ``(book_id, chapter_id, paragraph_number)``.
    """

    book_id: str
    chapter_id: int
    paragraph_number: int
    book_title: str = ""
    chapter_name: str = ""
    paragraph_text: str = ""
    timestamp: int = 0
    kind: Optional[FavoriteKind] = None
    group_id: Optional[str] = None
    group_range: Optional[str] = None

    @property
    def key(self) -> NaturalKey:
        return (self.book_id, self.chapter_id, self.paragraph_number)

    def with_kind(self, kind: FavoriteKind) -> "FavoriteRecord":
        return replace(self, kind=kind)

    def with_group(self, group_id: Optional[str], group_range: Optional[str]) -> "FavoriteRecord":
        return replace(self, group_id=group_id, group_range=group_range)

    def to_dict(self) -> dict:
        """Serialize to the camelCase shape stored on the device."""
        data = {
            "bookId": self.book_id,
            "bookTitle": self.book_title,
            "chapterId": self.chapter_id,
            "chapterName": self.chapter_name,
            "paragraphNumber": self.paragraph_number,
            "paragraphText": self.paragraph_text,
            "timestamp": self.timestamp,
        }
        if self.kind is not None:
            data["kind"] = self.kind.value
        if self.group_id is not None:
            data["groupId"] = self.group_id
        if self.group_range is not None:
            data["groupRange"] = self.group_range
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FavoriteRecord":
        """Build a record from its stored shape.

        Accepts blobs from older app versions, which used ``bookSlug`` and
        ``type`` instead of ``bookId`` and ``kind``.

        Raises:
            KeyError, TypeError, ValueError: If the natural key is missing
                or not numeric.
        """
        book_id = data.get("bookId", data.get("bookSlug"))
        if book_id is None:
            raise KeyError("bookId")
        return cls(
            book_id=str(book_id),
            chapter_id=int(data["chapterId"]),
            paragraph_number=int(data["paragraphNumber"]),
            book_title=data.get("bookTitle") or "",
            chapter_name=data.get("chapterName") or "",
            paragraph_text=data.get("paragraphText") or "",
            timestamp=int(data.get("timestamp") or 0),
            kind=parse_kind(data.get("kind", data.get("type"))),
            group_id=data.get("groupId"),
            group_range=data.get("groupRange"),
        )
