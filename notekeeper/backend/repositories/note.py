"""
Note Repository.

Data access layer for notes. Handles all database operations
for the NoteRecord model.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.models.note import NoteRecord
from notekeeper.backend.models.tag import NoteTag
from notekeeper.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[NoteRecord]):
    """
    Repository for NoteRecord model.

    Inherits standard CRUD operations from BaseRepository
    and adds storage-key queries.
    """

    model = NoteRecord

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_all_newest_first(self) -> list[NoteRecord]:
        """Get every note ordered by updated_at descending."""
        result = await self.session.execute(
            select(NoteRecord).order_by(NoteRecord.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_storage_key(self, storage_key: str) -> NoteRecord | None:
        """Get a note by its storage key, or None."""
        result = await self.session.execute(
            select(NoteRecord).where(NoteRecord.storage_key == storage_key)
        )
        return result.scalar_one_or_none()

    async def exists_by_storage_key(self, storage_key: str) -> bool:
        """Check if a note with this storage key exists."""
        result = await self.session.execute(
            select(NoteRecord.id).where(NoteRecord.storage_key == storage_key)
        )
        return result.scalar_one_or_none() is not None

    async def upsert(self, id: str, **fields: Any) -> NoteRecord:
        """
        Insert the note, or overwrite every given field of an existing row.

        Args:
            id: Note ID (primary key)
            **fields: Column values to write

        Returns:
            The persisted row
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            return await self.create(id=id, **fields)
        return await self.update(id, **fields)

    async def delete_by_storage_key(self, storage_key: str) -> bool:
        """
        Delete a note and its tag links by storage key.

        Returns:
            True if a row was deleted, False if none matched
        """
        instance = await self.get_by_storage_key(storage_key)
        if instance is None:
            return False

        await self.session.execute(delete(NoteTag).where(NoteTag.note_id == instance.id))
        await self.session.delete(instance)
        await self.session.flush()
        return True
