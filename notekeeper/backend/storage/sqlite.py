"""
SQLite Note Storage.

Relational backing medium. Each call runs in its own session and
transaction; SQLAlchemy errors are translated to application errors
at this boundary.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.backend.core.database import translate_db_errors
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import Clock, utc_now
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.storage.base import DEFAULT_SUFFIX, NoteStorage

logger = get_logger(__name__)

T = TypeVar("T")


class SqliteNoteStorage(NoteStorage):
    """Backing medium over the notes table."""

    name = "sqlite"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    async def _execute_db_operation(
        self,
        operation: str,
        target: str | None,
        work: Callable[[NoteRepository], Awaitable[T]],
    ) -> T:
        """Run work inside one committed transaction with error translation."""
        async with translate_db_errors(operation, target):
            async with self._session_factory() as session:
                async with session.begin():
                    return await work(NoteRepository(session))

    async def load_all(self) -> list[Note]:
        async def work(repo: NoteRepository) -> list[Note]:
            rows = await repo.get_all_newest_first()
            return [Note.model_validate(row) for row in rows]

        notes = await self._execute_db_operation("load_all", None, work)
        logger.debug("Loaded notes from database", extra={"count": len(notes)})
        return notes

    async def load(self, storage_key: str) -> Note | None:
        async def work(repo: NoteRepository) -> Note | None:
            row = await repo.get_by_storage_key(storage_key)
            return None if row is None else Note.model_validate(row)

        return await self._execute_db_operation("load", storage_key, work)

    async def save(self, note: Note) -> Note:
        fields = note.model_dump(exclude={"id"})
        if fields["updated_at"] is None:
            del fields["updated_at"]

        async def work(repo: NoteRepository) -> Note:
            row = await repo.upsert(note.id, **fields)
            return Note.model_validate(row)

        return await self._execute_db_operation("save", note.storage_key, work)

    async def delete(self, storage_key: str) -> bool:
        async def work(repo: NoteRepository) -> bool:
            return await repo.delete_by_storage_key(storage_key)

        deleted = await self._execute_db_operation("delete", storage_key, work)
        if deleted:
            logger.info("Note row deleted", extra={"storage_key": storage_key})
        return deleted

    async def exists(self, storage_key: str) -> bool:
        async def work(repo: NoteRepository) -> bool:
            return await repo.exists_by_storage_key(storage_key)

        return await self._execute_db_operation("exists", storage_key, work)

    def generate_storage_key(self, hint: str | None = None) -> str:
        """Timestamp plus a short uuid; the hint is not used for row keys."""
        return f"{self._clock():%Y%m%d-%H%M%S}-{uuid4().hex[:8]}{DEFAULT_SUFFIX}"
