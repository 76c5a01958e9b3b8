"""
Store Wiring.

Builds the configured backing medium and note store for entry points.
The store itself takes everything it needs as constructor arguments;
this module is the one place that reads configuration to supply them.
"""

from notekeeper.backend.core.config import (
    get_app_config,
    get_cache_timeout,
    get_notes_directory,
)
from notekeeper.backend.core.database import get_session_factory, init_database
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.services.note_store import NoteStore
from notekeeper.backend.storage.base import NoteStorage
from notekeeper.backend.storage.file import FileNoteStorage
from notekeeper.backend.storage.sqlite import SqliteNoteStorage

logger = get_logger(__name__)


async def build_note_storage(backend: str | None = None) -> NoteStorage:
    """
    Create the backing medium named in storage.yaml (or by backend).

    The SQLite schema is created on first use.
    """
    storage_config = get_app_config().storage
    backend = backend or storage_config.backend

    if backend == "file":
        storage: NoteStorage = FileNoteStorage(
            get_notes_directory(),
            suffix=storage_config.file.suffix,
        )
    elif backend == "sqlite":
        await init_database()
        storage = SqliteNoteStorage(get_session_factory())
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    logger.debug("Note storage created", extra={"backend": backend})
    return storage


async def build_note_store(backend: str | None = None) -> NoteStore:
    """Create a NoteStore over the configured backing medium."""
    storage = await build_note_storage(backend)
    return NoteStore(
        storage,
        cache_timeout=get_cache_timeout(),
        storage_timeout=get_app_config().storage.timeout_seconds,
    )
