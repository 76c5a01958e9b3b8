"""
Unit Test Fixtures.

Fixtures for unit tests - the backing medium is replaced by an in-memory
fake that counts calls and can be told to fail. Unit tests never touch
the filesystem or a database.
"""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from notekeeper.backend.core.exceptions import StorageUnavailableError
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.services.note_store import NoteStore
from notekeeper.backend.storage.base import NoteStorage


# =============================================================================
# Storage Fakes
# =============================================================================


class InMemoryNoteStorage(NoteStorage):
    """
    Backing medium held in a dict keyed by storage key.

    Stores and returns copies so tests can tell cache objects from
    storage objects. Set `fail` to make every call raise
    StorageUnavailableError; set `delay` to make every call sleep first,
    or `save_delay` to slow down writes only.
    """

    name = "memory"

    def __init__(self) -> None:
        self.notes: dict[str, Note] = {}
        self.load_calls = 0
        self.save_calls = 0
        self.delete_calls = 0
        self.fail = False
        self.delay: float = 0
        self.save_delay: float = 0
        self._counter = 0

    async def _enter(self, operation: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise StorageUnavailableError(f"{operation} failed", operation=operation)

    def put(self, note: Note) -> None:
        """Write directly, bypassing the store (an out-of-band change)."""
        self.notes[note.storage_key] = note.model_copy()

    async def load_all(self) -> list[Note]:
        self.load_calls += 1
        await self._enter("load_all")
        notes = [n.model_copy() for n in self.notes.values()]
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)

    async def load(self, storage_key: str) -> Note | None:
        await self._enter("load")
        note = self.notes.get(storage_key)
        return None if note is None else note.model_copy()

    async def save(self, note: Note) -> Note:
        self.save_calls += 1
        await self._enter("save")
        if self.save_delay:
            await asyncio.sleep(self.save_delay)
        self.notes[note.storage_key] = note.model_copy()
        return note.model_copy()

    async def delete(self, storage_key: str) -> bool:
        self.delete_calls += 1
        await self._enter("delete")
        return self.notes.pop(storage_key, None) is not None

    async def exists(self, storage_key: str) -> bool:
        await self._enter("exists")
        return storage_key in self.notes

    def generate_storage_key(self, hint: str | None = None) -> str:
        self._counter += 1
        return f"note-{self._counter}.notes.txt"


@pytest.fixture
def storage() -> InMemoryNoteStorage:
    """Provide an empty in-memory backing medium."""
    return InMemoryNoteStorage()


@pytest.fixture
def store(storage: InMemoryNoteStorage, clock) -> NoteStore:
    """
    NoteStore over the in-memory medium with a 5 minute timeout.

    Usage:
        async def test_list(store, storage, clock):
            await store.list_notes()
            clock.advance(minutes=6)
    """
    return NoteStore(storage, cache_timeout=timedelta(minutes=5), clock=clock)


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.get_logger", return_value=mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
