"""
Integration Tests for TagService.

Runs against the in-memory SQLite database; notes are written through
SqliteNoteStorage so tags attach to real rows.
"""

from datetime import datetime

import pytest

from notekeeper.backend.core.exceptions import ConflictError, ValidationError
from notekeeper.backend.models.tag import DEFAULT_TAG_COLOR
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.schemas.tag import TagCreate, TagResponse
from notekeeper.backend.services.tag import TagService

pytestmark = pytest.mark.integration


@pytest.fixture
async def notes(sqlite_storage):
    """Two persisted notes, n2 newer than n1."""
    for day, note_id in ((1, "n1"), (2, "n2")):
        await sqlite_storage.save(
            Note(
                id=note_id,
                storage_key=f"{note_id}.notes.txt",
                text=note_id,
                updated_at=datetime(2026, 1, day),
            )
        )
    return ["n1", "n2"]


@pytest.fixture
def service(db_session) -> TagService:
    return TagService(db_session)


class TestCreateTag:
    """Tests for tag creation."""

    @pytest.mark.asyncio
    async def test_create_with_default_color(self, service):
        tag = await service.create_tag(TagCreate(name="work"))

        assert tag.id
        assert tag.name == "work"
        assert tag.color == DEFAULT_TAG_COLOR
        assert TagResponse.model_validate(tag).name == "work"

    @pytest.mark.asyncio
    async def test_name_is_trimmed(self, service):
        tag = await service.create_tag(TagCreate(name="  home  "))

        assert tag.name == "home"

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.create_tag(TagCreate(name="   "))

    @pytest.mark.asyncio
    async def test_duplicate_name_ignoring_case_conflicts(self, service):
        await service.create_tag(TagCreate(name="Work"))

        with pytest.raises(ConflictError):
            await service.create_tag(TagCreate(name="work"))

    @pytest.mark.asyncio
    async def test_list_and_lookup(self, service):
        await service.create_tag(TagCreate(name="zeta"))
        await service.create_tag(TagCreate(name="alpha", color="#D32F2F"))

        tags = await service.list_tags()
        found = await service.get_tag_by_name("ALPHA")

        assert [t.name for t in tags] == ["alpha", "zeta"]
        assert found.color == "#D32F2F"
        assert await service.get_tag_by_name("missing") is None


class TestNoteTags:
    """Tests for attaching tags to notes."""

    @pytest.mark.asyncio
    async def test_attach_and_list(self, service, notes):
        work = await service.create_tag(TagCreate(name="work"))
        home = await service.create_tag(TagCreate(name="home"))

        assert await service.add_tag_to_note("n1", work.id) is True
        assert await service.add_tag_to_note("n1", home.id) is True
        assert await service.add_tag_to_note("n2", work.id) is True

        assert [t.name for t in await service.tags_for_note("n1")] == ["home", "work"]
        tagged = await service.notes_for_tag(work.id)
        assert [n.id for n in tagged] == ["n2", "n1"]
        assert all(isinstance(n, Note) for n in tagged)

    @pytest.mark.asyncio
    async def test_attach_twice_is_noop(self, service, notes):
        work = await service.create_tag(TagCreate(name="work"))
        await service.add_tag_to_note("n1", work.id)

        assert await service.add_tag_to_note("n1", work.id) is False
        assert len(await service.tags_for_note("n1")) == 1

    @pytest.mark.asyncio
    async def test_detach(self, service, notes):
        work = await service.create_tag(TagCreate(name="work"))
        await service.add_tag_to_note("n1", work.id)

        assert await service.remove_tag_from_note("n1", work.id) is True
        assert await service.remove_tag_from_note("n1", work.id) is False
        assert await service.tags_for_note("n1") == []

    @pytest.mark.asyncio
    async def test_untagged_note_has_no_tags(self, service, notes):
        assert await service.tags_for_note("n2") == []

    @pytest.mark.asyncio
    async def test_attach_to_missing_note_returns_false(self, service, notes):
        work = await service.create_tag(TagCreate(name="work"))

        assert await service.note_exists("ghost") is False
        assert await service.add_tag_to_note("ghost", work.id) is False
        assert await service.notes_for_tag(work.id) == []

    @pytest.mark.asyncio
    async def test_attach_missing_tag_returns_false(self, service, notes):
        assert await service.note_exists("n1") is True
        assert await service.add_tag_to_note("n1", "no-such-tag") is False
        assert await service.tags_for_note("n1") == []
