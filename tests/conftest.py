"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Tests use an in-memory SQLite database through aiosqlite. Each test
    gets a fresh engine with the full schema, so no test can see another
    test's rows.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from notekeeper.backend.core.database import create_session_factory, enable_foreign_keys
from notekeeper.backend.models import Base


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """
    Manually advanced clock for deterministic cache-expiry tests.

    Usage:
        clock = FakeClock()
        store = NoteStore(storage, clock=clock)
        clock.advance(minutes=5, seconds=1)
    """

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, 0)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed instant."""
    return FakeClock()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create an in-memory test database with all tables.

    StaticPool keeps the single in-memory connection alive for the
    lifetime of the engine.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture
async def db_session(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a database session for a single test.

    Usage:
        async def test_create_tag(db_session: AsyncSession):
            service = TagService(db_session)
            tag = await service.create_tag(TagCreate(name="work"))
            assert tag.id is not None
    """
    async with db_session_factory() as session:
        yield session
        await session.rollback()
