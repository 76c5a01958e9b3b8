"""
Note Model.

Database row for a note in the relational backend.
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.backend.models.base import Base, TimestampMixin, UUIDMixin


class NoteRecord(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    Keyed by note id, with a unique index on the storage key and a
    non-unique index on updated_at for newest-first retrieval.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_storage_key", "storage_key", unique=True),
        Index("ix_notes_updated_at", "updated_at"),
    )

    storage_key: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    title: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    is_pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    background_color: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, storage_key={self.storage_key!r})>"
