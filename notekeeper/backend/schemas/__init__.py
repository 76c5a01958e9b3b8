# Pydantic schemas package
from notekeeper.backend.schemas.note import Note, NoteDocument
from notekeeper.backend.schemas.tag import TagCreate, TagResponse

__all__ = [
    "Note",
    "NoteDocument",
    "TagCreate",
    "TagResponse",
]
