"""
Tag Repository.

Data access layer for tags and their association with notes.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.models.note import NoteRecord
from notekeeper.backend.models.tag import NoteTag, Tag
from notekeeper.backend.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """
    Repository for Tag model.

    Inherits standard CRUD operations from BaseRepository
    and adds name lookup and note association queries.
    """

    model = Tag

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_all_by_name(self) -> list[Tag]:
        """Get all tags in name order."""
        result = await self.session.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Get a tag by name, ignoring case.

        Args:
            name: Tag name

        Returns:
            Matching tag or None
        """
        result = await self.session.execute(
            select(Tag).where(func.lower(Tag.name) == name.lower())
        )
        return result.scalar_one_or_none()

    async def get_link(self, note_id: str, tag_id: str) -> NoteTag | None:
        """Get the association row between a note and a tag, if any."""
        result = await self.session.execute(
            select(NoteTag)
            .where(NoteTag.note_id == note_id)
            .where(NoteTag.tag_id == tag_id)
        )
        return result.scalar_one_or_none()

    async def add_link(self, note_id: str, tag_id: str) -> NoteTag:
        """Create the association between a note and a tag."""
        link = NoteTag(note_id=note_id, tag_id=tag_id)
        self.session.add(link)
        await self.session.flush()
        return link

    async def remove_link(self, link: NoteTag) -> None:
        """Delete an association row."""
        await self.session.delete(link)
        await self.session.flush()

    async def get_tags_for_note(self, note_id: str) -> list[Tag]:
        """Get the tags attached to a note, in name order."""
        result = await self.session.execute(
            select(Tag)
            .join(NoteTag, NoteTag.tag_id == Tag.id)
            .where(NoteTag.note_id == note_id)
            .order_by(Tag.name)
        )
        return list(result.scalars().all())

    async def get_notes_for_tag(self, tag_id: str) -> list[NoteRecord]:
        """Get the notes carrying a tag, newest first."""
        result = await self.session.execute(
            select(NoteRecord)
            .join(NoteTag, NoteTag.note_id == NoteRecord.id)
            .where(NoteTag.tag_id == tag_id)
            .order_by(NoteRecord.updated_at.desc())
        )
        return list(result.scalars().all())
