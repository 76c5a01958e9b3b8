"""
Tag Models.

Tags and the note/tag association table.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_TAG_COLOR = "#007ACC"


class Tag(UUIDMixin, TimestampMixin, Base):
    """A named, colored label that can be attached to many notes."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )
    color: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=DEFAULT_TAG_COLOR,
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"


class NoteTag(UUIDMixin, TimestampMixin, Base):
    """Association between one note and one tag."""

    __tablename__ = "note_tags"
    __table_args__ = (
        UniqueConstraint("note_id", "tag_id", name="uq_note_tags_note_tag"),
    )

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
