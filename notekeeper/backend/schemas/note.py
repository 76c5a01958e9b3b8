"""
Note Schemas.

Pydantic models for the note entity held by the store and for its
on-disk JSON document in the file backend.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notekeeper.backend.core.utils import to_naive_utc


class Note(BaseModel):
    """
    A note as seen by callers of the store.

    id and storage_key may be left empty on a note handed to the store's
    add operation; the store fills them in. title, is_pinned and
    background_color are presentation payload and pass through untouched.
    """

    id: str = Field(default="", description="Opaque unique identifier")
    storage_key: str = Field(
        default="",
        description="Filename or row key addressing the persisted copy",
    )
    text: str = Field(default="", description="Note content")
    updated_at: datetime | None = Field(
        default=None,
        description="Last modification time, naive UTC",
    )
    title: str | None = Field(default=None, description="Optional display title")
    is_pinned: bool = Field(default=False, description="Pinned in the list")
    background_color: str | None = Field(
        default=None,
        description="Display color such as #FFF8DC",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("updated_at")
    @classmethod
    def updated_at_to_naive_utc(cls, value: datetime | None) -> datetime | None:
        return None if value is None else to_naive_utc(value)


class NoteDocument(BaseModel):
    """
    JSON body of a note file.

    The storage key is the file name itself, so it is not repeated inside
    the document. updated_at is optional; the file mtime is used when absent.
    """

    id: str = Field(min_length=1)
    text: str = ""
    updated_at: datetime | None = None
    title: str | None = None
    is_pinned: bool = False
    background_color: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("updated_at")
    @classmethod
    def updated_at_to_naive_utc(cls, value: datetime | None) -> datetime | None:
        """Documents written elsewhere may carry an offset such as "Z"."""
        return None if value is None else to_naive_utc(value)

    @classmethod
    def from_note(cls, note: Note) -> "NoteDocument":
        return cls.model_validate(note.model_dump(exclude={"storage_key"}))

    def to_note(self, storage_key: str, fallback_updated_at: datetime) -> Note:
        return Note(
            storage_key=storage_key,
            updated_at=self.updated_at or fallback_updated_at,
            **self.model_dump(exclude={"updated_at"}),
        )
