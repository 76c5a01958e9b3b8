# Backing media for the note store
from notekeeper.backend.storage.base import DEFAULT_SUFFIX, NoteStorage
from notekeeper.backend.storage.file import FileNoteStorage
from notekeeper.backend.storage.sqlite import SqliteNoteStorage

__all__ = [
    "DEFAULT_SUFFIX",
    "FileNoteStorage",
    "NoteStorage",
    "SqliteNoteStorage",
]
