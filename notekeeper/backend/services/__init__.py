# Business logic services
from notekeeper.backend.services.note_store import (
    DEFAULT_CACHE_TIMEOUT,
    CacheState,
    DeleteOutcome,
    NoteStore,
)
from notekeeper.backend.services.tag import TagService

__all__ = [
    "DEFAULT_CACHE_TIMEOUT",
    "CacheState",
    "DeleteOutcome",
    "NoteStore",
    "TagService",
]
