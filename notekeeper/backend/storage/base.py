"""
Note Storage Interface.

The backing medium behind NoteStore. Implementations persist whole notes
addressed by storage key and know nothing about caching.

Implementations:
    FileNoteStorage    - one file per note in a directory
    SqliteNoteStorage  - a relational table through SQLAlchemy
"""

from abc import ABC, abstractmethod

from notekeeper.backend.schemas.note import Note

DEFAULT_SUFFIX = ".notes.txt"


class NoteStorage(ABC):
    """
    Abstract persistence capability for notes.

    Failures to reach the medium are raised as StorageUnavailableError;
    uniqueness violations as ConflictError.
    """

    name: str = "storage"

    @abstractmethod
    async def load_all(self) -> list[Note]:
        """Load every readable note, newest updated_at first."""

    @abstractmethod
    async def load(self, storage_key: str) -> Note | None:
        """Load the note stored under the key, or None if there is none."""

    @abstractmethod
    async def save(self, note: Note) -> Note:
        """Create or overwrite the note under note.storage_key."""

    @abstractmethod
    async def delete(self, storage_key: str) -> bool:
        """
        Delete the persisted note.

        Returns False if nothing was stored there, including for a key
        this medium could never have produced.
        """

    @abstractmethod
    async def exists(self, storage_key: str) -> bool:
        """Check whether anything is stored under the key; False for invalid keys."""

    @abstractmethod
    def generate_storage_key(self, hint: str | None = None) -> str:
        """Return a fresh, unused storage key, optionally derived from a title."""
