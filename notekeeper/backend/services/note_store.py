"""
Note Store.

Read/write view over notes with a time-boxed in-memory cache in front of
a NoteStorage backing medium.

Cache policy:
    - Reads (list, get, exists) reload the snapshot when it has never been
      loaded or is older than the cache timeout.
    - Writes (add, update, delete) go to storage first, then patch the
      snapshot in the same call, so a read right after a write sees it
      regardless of the timeout.
    - A failed reload keeps serving the previous snapshot when there is one.

One asyncio.Lock covers every public operation, so a reload never
interleaves with a write and concurrent readers of a stale cache share
a single reload.
"""

import asyncio
from collections.abc import Awaitable
from datetime import datetime, timedelta
from enum import Enum
from typing import TypeVar
from uuid import uuid4

from notekeeper.backend.core.exceptions import ConflictError, StorageUnavailableError
from notekeeper.backend.core.utils import Clock, utc_now
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.services.base import BaseService
from notekeeper.backend.storage.base import NoteStorage

T = TypeVar("T")

DEFAULT_CACHE_TIMEOUT = timedelta(minutes=5)

_PASSTHROUGH_FIELDS = ("text", "title", "is_pinned", "background_color")


class CacheState(str, Enum):
    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"


def _sort_key(note: Note) -> datetime:
    return note.updated_at or datetime.min


class NoteStore(BaseService):
    """
    Cached note store.

    Args:
        storage: Backing medium
        cache_timeout: Age after which the snapshot is reloaded on read
        clock: Source of the current naive-UTC time
        storage_timeout: Optional deadline in seconds for each storage read
    """

    def __init__(
        self,
        storage: NoteStorage,
        cache_timeout: timedelta = DEFAULT_CACHE_TIMEOUT,
        clock: Clock = utc_now,
        storage_timeout: float | None = None,
    ) -> None:
        super().__init__()
        self.storage = storage
        self.cache_timeout = cache_timeout
        self._clock = clock
        self._storage_timeout = storage_timeout
        self._notes: list[Note] = []
        self._loaded_at: datetime | None = None
        self._lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Cache state
    # -------------------------------------------------------------------------

    @property
    def cache_loaded_at(self) -> datetime | None:
        return self._loaded_at

    @property
    def cache_state(self) -> CacheState:
        if self._loaded_at is None:
            return CacheState.EMPTY
        if self._is_stale():
            return CacheState.STALE
        return CacheState.FRESH

    def _is_stale(self) -> bool:
        return (
            self._loaded_at is None
            or self._clock() - self._loaded_at > self.cache_timeout
        )

    def _find(self, note_id: str) -> Note | None:
        return next((n for n in self._notes if n.id == note_id), None)

    def _mark_loaded(self) -> None:
        self._notes.sort(key=_sort_key, reverse=True)
        self._loaded_at = self._clock()

    def _next_timestamp(self, floor: datetime | None = None) -> datetime:
        """Current time, moved 1 µs past floor and every cached note if needed."""
        now = self._clock()
        candidates = [n.updated_at for n in self._notes if n.updated_at is not None]
        if floor is not None:
            candidates.append(floor)
        latest = max(candidates, default=None)
        if latest is not None and now <= latest:
            now = latest + timedelta(microseconds=1)
        return now

    # -------------------------------------------------------------------------
    # Storage access
    # -------------------------------------------------------------------------

    async def _storage_call(
        self,
        operation: str,
        target: str | None,
        coro: Awaitable[T],
        bounded: bool = True,
    ) -> T:
        """
        Await a storage call, enforcing the configured deadline.

        Writes pass bounded=False: a cancelled write can still land on the
        medium from its worker thread, so it is always awaited to completion.
        """
        if self._storage_timeout is None or not bounded:
            return await coro
        try:
            return await asyncio.wait_for(coro, timeout=self._storage_timeout)
        except asyncio.TimeoutError as e:
            self._logger.error(
                "Storage call timed out",
                extra={
                    "operation": operation,
                    "target": target,
                    "timeout_seconds": self._storage_timeout,
                },
            )
            raise StorageUnavailableError(
                f"{operation} timed out after {self._storage_timeout}s",
                operation=operation,
                target=target,
            ) from e

    async def _reload(self) -> None:
        notes = await self._storage_call("load_all", None, self.storage.load_all())
        self._notes = list(notes)
        self._mark_loaded()
        self._log_debug(
            "Notes cache refreshed",
            count=len(self._notes),
            storage=self.storage.name,
        )

    async def _ensure_fresh(self, operation: str) -> None:
        """Reload a stale snapshot, falling back to the old one if storage fails."""
        if not self._is_stale():
            return
        try:
            await self._reload()
        except StorageUnavailableError as e:
            if self._loaded_at is None:
                raise
            self._logger.warning(
                "Serving stale notes cache after failed reload",
                extra={
                    "operation": operation,
                    "error": e.message,
                    "cached_count": len(self._notes),
                },
            )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        """
        Get all notes, newest first.

        Raises:
            StorageUnavailableError: If storage fails and nothing was ever cached
        """
        async with self._lock:
            await self._ensure_fresh("list_notes")
            return list(self._notes)

    async def force_refresh(self) -> list[Note]:
        """
        Reload from storage regardless of cache age.

        Raises:
            StorageUnavailableError: If storage fails; the old snapshot is kept
        """
        async with self._lock:
            self._log_operation("Force refreshing notes", storage=self.storage.name)
            await self._reload()
            return list(self._notes)

    async def get_by_id(self, note_id: str) -> Note | None:
        """Get a note by ID, or None if it does not exist."""
        async with self._lock:
            await self._ensure_fresh("get_by_id")
            return self._find(note_id)

    async def exists(self, note_id: str) -> bool:
        """Check whether a note with this ID exists."""
        async with self._lock:
            await self._ensure_fresh("exists")
            return self._find(note_id) is not None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def add(self, note: Note) -> Note:
        """
        Persist a new note and insert it into the cache.

        Missing id and storage key are generated; updated_at is set to now.

        Returns:
            The persisted note, as held in the cache

        Raises:
            ConflictError: If the id is already cached or the storage key is taken
            StorageUnavailableError: If the note could not be written
        """
        async with self._lock:
            new = note.model_copy()
            if not new.id:
                new.id = str(uuid4())
            if not new.storage_key:
                new.storage_key = self.storage.generate_storage_key(new.title)

            if self._find(new.id) is not None:
                raise ConflictError(f"Note {new.id} already exists")
            if await self._storage_call(
                "exists", new.storage_key, self.storage.exists(new.storage_key)
            ):
                raise ConflictError(f"Storage key {new.storage_key} already in use")

            new.updated_at = self._next_timestamp()
            self._log_operation(
                "Adding note", note_id=new.id, storage_key=new.storage_key
            )
            saved = await self._storage_call(
                "save", new.storage_key, self.storage.save(new), bounded=False
            )

            self._notes.append(saved)
            self._mark_loaded()
            return saved

    async def update(self, note: Note) -> Note | None:
        """
        Replace a note's content and bump its updated_at.

        The note keeps its existing storage key. A note missing from the
        cache but present in storage under note.storage_key is written and
        inserted into the cache.

        Returns:
            The updated note, or None if it exists neither in cache nor storage

        Raises:
            ValidationError: If note.id is empty
            ConflictError: If the storage key holds a different note
            StorageUnavailableError: If the note could not be written
        """
        self._validate_required({"id": note.id}, ["id"])

        async with self._lock:
            await self._ensure_fresh("update")
            cached = self._find(note.id)

            if cached is not None:
                storage_key = cached.storage_key
                previous = cached.updated_at
            else:
                storage_key = note.storage_key
                persisted = await self._load_owned(note.id, storage_key)
                if persisted is None:
                    self._log_debug("Note not found for update", note_id=note.id)
                    return None
                previous = persisted.updated_at

            updated = note.model_copy(
                update={
                    "storage_key": storage_key,
                    "updated_at": self._next_timestamp(previous),
                }
            )
            self._log_operation(
                "Updating note", note_id=note.id, storage_key=storage_key
            )
            saved = await self._storage_call(
                "save", storage_key, self.storage.save(updated), bounded=False
            )

            if cached is not None:
                for field in _PASSTHROUGH_FIELDS:
                    setattr(cached, field, getattr(saved, field))
                cached.updated_at = saved.updated_at
                saved = cached
            else:
                self._notes.append(saved)

            self._mark_loaded()
            return saved

    async def _load_owned(self, note_id: str, storage_key: str) -> Note | None:
        """
        Load the persisted note under storage_key for an uncached note_id.

        Raises:
            ConflictError: If the key belongs to a note with another id
        """
        if not storage_key:
            return None

        owner = next((n for n in self._notes if n.storage_key == storage_key), None)
        if owner is None:
            owner = await self._storage_call(
                "load", storage_key, self.storage.load(storage_key)
            )
            if owner is None:
                return None

        if owner.id != note_id:
            self._logger.warning(
                "Refusing update over another note's storage key",
                extra={
                    "note_id": note_id,
                    "storage_key": storage_key,
                    "owner_id": owner.id,
                },
            )
            raise ConflictError(
                f"Storage key {storage_key} belongs to note {owner.id}"
            )
        return owner

    async def delete(self, note_id: str) -> DeleteOutcome:
        """
        Delete a note by ID from storage and cache.

        Raises:
            StorageUnavailableError: If the persisted copy could not be removed
        """
        async with self._lock:
            await self._ensure_fresh("delete")
            note = self._find(note_id)
            if note is None:
                self._log_debug("Note not found for deletion", note_id=note_id)
                return DeleteOutcome.NOT_FOUND

            self._log_operation(
                "Deleting note", note_id=note_id, storage_key=note.storage_key
            )
            await self._storage_call(
                "delete",
                note.storage_key,
                self.storage.delete(note.storage_key),
                bounded=False,
            )
            self._notes = [n for n in self._notes if n.id != note_id]
            self._mark_loaded()
            return DeleteOutcome.DELETED

    async def delete_by_storage_key(self, storage_key: str) -> DeleteOutcome:
        """
        Delete a note by storage key from storage and cache.

        Raises:
            StorageUnavailableError: If the persisted copy could not be removed
        """
        async with self._lock:
            await self._ensure_fresh("delete_by_storage_key")
            cached = next(
                (n for n in self._notes if n.storage_key == storage_key), None
            )

            self._log_operation("Deleting note", storage_key=storage_key)
            removed = await self._storage_call(
                "delete", storage_key, self.storage.delete(storage_key), bounded=False
            )

            if cached is not None:
                self._notes = [n for n in self._notes if n.id != cached.id]
                self._mark_loaded()
            elif not removed:
                self._log_debug("Note not found for deletion", storage_key=storage_key)
                return DeleteOutcome.NOT_FOUND
            return DeleteOutcome.DELETED
