# SQLAlchemy repositories package
from notekeeper.backend.repositories.base import BaseRepository
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.repositories.tag import TagRepository

__all__ = [
    "BaseRepository",
    "NoteRepository",
    "TagRepository",
]
