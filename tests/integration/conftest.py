"""
Integration Test Fixtures.

Fixtures for integration tests - real backing media under tmp_path or
in an in-memory SQLite database. These fixtures build on the root
conftest.py clock and database fixtures.
"""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.backend.core.concurrency import shutdown_pools
from notekeeper.backend.storage.base import NoteStorage
from notekeeper.backend.storage.file import FileNoteStorage
from notekeeper.backend.storage.sqlite import SqliteNoteStorage


@pytest.fixture(autouse=True)
async def _shutdown_io_pool() -> AsyncGenerator[None, None]:
    """Release the shared I/O pool so no worker threads outlive a test."""
    yield
    await shutdown_pools()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def notes_dir(tmp_path):
    """Directory for the file backend; created on first save."""
    return tmp_path / "notes"


@pytest.fixture
def file_storage(notes_dir, clock) -> FileNoteStorage:
    """File backing medium in a per-test directory."""
    return FileNoteStorage(notes_dir, clock=clock)


@pytest.fixture
def sqlite_storage(
    db_session_factory: async_sessionmaker[AsyncSession],
    clock,
) -> SqliteNoteStorage:
    """SQLite backing medium over the in-memory test database."""
    return SqliteNoteStorage(db_session_factory, clock=clock)


@pytest.fixture(params=["file", "sqlite"])
def any_storage(
    request,
    file_storage: FileNoteStorage,
    sqlite_storage: SqliteNoteStorage,
) -> NoteStorage:
    """
    Each backing medium in turn.

    Usage:
        async def test_round_trip(any_storage):
            ...  # runs once per backend
    """
    return file_storage if request.param == "file" else sqlite_storage
