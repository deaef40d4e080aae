"""Async key-value persistence backed by the ``storage_items`` table."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from favsync.models.storage_item import StorageItem


class KeyValueStore:
    """String values stored under string keys.

    Each call opens its own session, so every write is committed on return.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_item(self, key: str) -> Optional[str]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(StorageItem.value).where(StorageItem.key == key)
            )
            return result.scalar_one_or_none()

    async def set_item(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            await session.merge(StorageItem(key=key, value=value))
            await session.commit()

    async def remove_item(self, key: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(StorageItem).where(StorageItem.key == key))
            await session.commit()
