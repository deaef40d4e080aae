"""Server-side favorite row owned by an authenticated user."""

from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from favsync.database import Base


class UserFavorite(Base):
    """A paragraph bookmarked by a user, as stored by the favorites service.

    Chapter ids are kept as strings on the server; the client converts them
    back to integers when merging into its local collection.
    """

    __tablename__ = "user_favorites"

    # One row per user and natural key
    __table_args__ = (
        UniqueConstraint(
            "user_id", "book_slug", "chapter_id", "paragraph_index",
            name="uq_user_favorite_paragraph",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    book_slug: Mapped[str] = mapped_column(String(100))
    chapter_id: Mapped[str] = mapped_column(String(50))
    paragraph_index: Mapped[int] = mapped_column(Integer)
    paragraph_text: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "book_slug": self.book_slug,
            "chapter_id": self.chapter_id,
            "paragraph_index": self.paragraph_index,
            "paragraph_text": self.paragraph_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
