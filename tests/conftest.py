"""Shared pytest fixtures."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("FAVSYNC_API_TOKEN", "")

from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from favsync.database import Base, init_db
from favsync.exceptions import RemoteGatewayError
from favsync.models import FavoriteKind, FavoriteRecord, RemoteFavorite
from favsync.services.favorites_store import LocalFavoritesStore
from favsync.services.key_value_store import KeyValueStore
from favsync.services.migration import ScriptureCatalog
from favsync.services.sync_engine import FavoritesSyncService
from favsync.services.sync_status import SyncStatusStore

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FAVORITES_KEY = "test_favorites"
STATUS_KEY = "test_sync_status"


def make_record(
    book_id: str = "caminho",
    chapter_id: int = 1,
    paragraph_number: int = 5,
    timestamp: int = 1_700_000_000_000,
    kind: Optional[FavoriteKind] = FavoriteKind.BOOK,
    **kwargs,
) -> FavoriteRecord:
    """Build a favorite with sensible defaults."""
    defaults = {
        "book_title": "Caminho",
        "chapter_name": "Caráter",
        "paragraph_text": f"Paragraph {paragraph_number}",
    }
    defaults.update(kwargs)
    return FavoriteRecord(
        book_id=book_id,
        chapter_id=chapter_id,
        paragraph_number=paragraph_number,
        timestamp=timestamp,
        kind=kind,
        **defaults,
    )


class FakeGateway:
    """In-memory remote favorites service.

    Set ``offline`` to make every call fail like a dropped connection, or
    list method names in ``failing`` to fail only those. ``error`` is the
    exception type raised.
    """

    def __init__(self):
        self.favorites: list[RemoteFavorite] = []
        self.offline = False
        self.failing: set[str] = set()
        self.calls: list[str] = []
        self.error: type[Exception] = RemoteGatewayError
        self._next_id = 1

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.offline or name in self.failing:
            raise self.error(f"{name} failed: connection refused")

    def seed(self, book_slug: str, chapter_id: str, paragraph_index: int,
             paragraph_text: str = "", created_at: Optional[str] = None) -> RemoteFavorite:
        remote = RemoteFavorite(
            id=self._next_id,
            user_id=1,
            book_slug=book_slug,
            chapter_id=chapter_id,
            paragraph_index=paragraph_index,
            paragraph_text=paragraph_text,
            created_at=created_at,
        )
        self._next_id += 1
        self.favorites.append(remote)
        return remote

    def keys(self) -> set[tuple[str, int, int]]:
        return {(f.book_slug, int(f.chapter_id), f.paragraph_index) for f in self.favorites}

    async def list(self) -> list[RemoteFavorite]:
        self._check("list")
        return list(self.favorites)

    async def create(self, payload: dict) -> None:
        self._check("create")
        key = (payload["book_slug"], int(payload["chapter_id"]), payload["paragraph_index"])
        if key not in self.keys():
            self.seed(
                payload["book_slug"], payload["chapter_id"],
                payload["paragraph_index"], payload["paragraph_text"],
            )

    async def delete_by_id(self, favorite_id: int) -> None:
        self._check("delete_by_id")
        self.favorites = [f for f in self.favorites if f.id != favorite_id]

    async def delete_all(self) -> None:
        self._check("delete_all")
        self.favorites = []


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    await init_db(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def kv_store(session_factory) -> KeyValueStore:
    return KeyValueStore(session_factory)


@pytest.fixture
def catalog() -> ScriptureCatalog:
    return ScriptureCatalog.from_file()


@pytest.fixture
def store(kv_store, catalog) -> LocalFavoritesStore:
    return LocalFavoritesStore(kv_store, FAVORITES_KEY, catalog)


@pytest.fixture
def status_store(kv_store) -> SyncStatusStore:
    return SyncStatusStore(kv_store, STATUS_KEY)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def sync_service(store, gateway, status_store) -> FavoritesSyncService:
    return FavoritesSyncService(store=store, gateway=gateway, status_store=status_store)
