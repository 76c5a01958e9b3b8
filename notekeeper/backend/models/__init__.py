# SQLAlchemy models package; importing it registers every table on Base.metadata
from notekeeper.backend.models.base import Base
from notekeeper.backend.models.note import NoteRecord
from notekeeper.backend.models.tag import NoteTag, Tag

__all__ = [
    "Base",
    "NoteRecord",
    "NoteTag",
    "Tag",
]
