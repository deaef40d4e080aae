"""Key-value row backing the on-device store."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from favsync.database import Base


class StorageItem(Base):
    """A single serialized value stored under a string key."""

    __tablename__ = "storage_items"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
