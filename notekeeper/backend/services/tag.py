"""
Tag Service.

Business logic for tags on the relational backend: creation with
case-insensitive uniqueness, and attaching tags to notes.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import ConflictError
from notekeeper.backend.models.tag import Tag
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.repositories.tag import TagRepository
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.schemas.tag import TagCreate
from notekeeper.backend.services.base import BaseService


class TagService(BaseService):
    """
    Service for tag business logic.

    Operates inside the caller's session; the caller commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__()
        self.session = session
        self.repo = TagRepository(session)
        self.note_repo = NoteRepository(session)

    async def list_tags(self) -> list[Tag]:
        """Get all tags in name order."""
        return await self._execute_db_operation(
            "list_tags", self.repo.get_all_by_name()
        )

    async def note_exists(self, note_id: str) -> bool:
        """Check whether a note row with this ID exists."""
        note = await self._execute_db_operation(
            "get_note", self.note_repo.get_by_id_or_none(note_id), target=note_id
        )
        return note is not None

    async def get_tag_by_name(self, name: str) -> Tag | None:
        """Get a tag by name ignoring case, or None."""
        return await self._execute_db_operation(
            "get_tag_by_name", self.repo.get_by_name(name), target=name
        )

    async def create_tag(self, data: TagCreate) -> Tag:
        """
        Create a new tag.

        Args:
            data: Tag creation data

        Returns:
            Created tag

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a tag with the same name (ignoring case) exists
        """
        name = data.name.strip()
        self._validate_required({"name": name}, ["name"])

        if await self.get_tag_by_name(name) is not None:
            raise ConflictError(f"Tag {name!r} already exists")

        self._log_operation("Creating tag", name=name)
        tag = await self._execute_db_operation(
            "create_tag",
            self.repo.create(name=name, color=data.color),
            target=name,
        )
        self._log_debug("Tag created", tag_id=tag.id)
        return tag

    async def add_tag_to_note(self, note_id: str, tag_id: str) -> bool:
        """
        Attach a tag to a note.

        Returns:
            True if attached, False if the note or tag does not exist or
            the tag was already on the note
        """
        if not await self.note_exists(note_id):
            self._log_debug("Note not found for tagging", note_id=note_id)
            return False
        tag = await self._execute_db_operation(
            "get_tag", self.repo.get_by_id_or_none(tag_id), target=tag_id
        )
        if tag is None:
            self._log_debug("Tag not found for tagging", tag_id=tag_id)
            return False

        existing = await self._execute_db_operation(
            "get_note_tag", self.repo.get_link(note_id, tag_id), target=note_id
        )
        if existing is not None:
            self._log_debug(
                "Tag already attached to note", note_id=note_id, tag_id=tag_id
            )
            return False

        self._log_operation("Adding tag to note", note_id=note_id, tag_id=tag_id)
        await self._execute_db_operation(
            "add_tag_to_note", self.repo.add_link(note_id, tag_id), target=note_id
        )
        return True

    async def remove_tag_from_note(self, note_id: str, tag_id: str) -> bool:
        """
        Detach a tag from a note.

        Returns:
            True if detached, False if the tag was not on the note
        """
        link = await self._execute_db_operation(
            "get_note_tag", self.repo.get_link(note_id, tag_id), target=note_id
        )
        if link is None:
            self._log_debug(
                "Tag not attached to note", note_id=note_id, tag_id=tag_id
            )
            return False

        self._log_operation("Removing tag from note", note_id=note_id, tag_id=tag_id)
        await self._execute_db_operation(
            "remove_tag_from_note", self.repo.remove_link(link), target=note_id
        )
        return True

    async def tags_for_note(self, note_id: str) -> list[Tag]:
        """Get the tags attached to a note, in name order."""
        return await self._execute_db_operation(
            "tags_for_note", self.repo.get_tags_for_note(note_id), target=note_id
        )

    async def notes_for_tag(self, tag_id: str) -> list[Note]:
        """Get the notes carrying a tag, newest first."""
        rows = await self._execute_db_operation(
            "notes_for_tag", self.repo.get_notes_for_tag(tag_id), target=tag_id
        )
        return [Note.model_validate(row) for row in rows]
