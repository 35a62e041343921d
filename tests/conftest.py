"""Shared test fixtures for settings, async database, and sessions."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from spots_api.core.config import Settings
from spots_api.models.base import Base
from spots_api.models.user_list import ListType, UserList


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        google_places_api_key="test-key",
        storage_endpoint_url="https://storage.example.com",
        storage_access_key_id="test-access-key",
        storage_secret_access_key="test-secret-key",
        storage_bucket="spot-images",
        storage_public_url="https://cdn.example.com/spot-images",
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with foreign keys enforced.

    StaticPool keeps one connection so sessions opened by background work
    see the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_id() -> uuid.UUID:
    """A user id for list ownership."""
    return uuid.uuid4()


@pytest.fixture
async def default_lists(async_session: AsyncSession, user_id: uuid.UUID) -> dict[ListType, UserList]:
    """The starred, favorites, and bucket-list lists of ``user_id``."""
    lists = {
        list_type: UserList(id=uuid.uuid4(), user_id=user_id, list_type=list_type, name=None)
        for list_type in ListType
    }
    async_session.add_all(lists.values())
    await async_session.commit()
    return lists
