"""
File Note Storage.

One file per note in a single directory, named <token><suffix>
(default suffix ".notes.txt"). A file holds either a JSON NoteDocument
or plain text; plain text notes take their id from the file name and
their timestamp from the file modification time.

All filesystem calls run in the shared I/O thread pool.
"""

import json
import os
import re
import secrets
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from notekeeper.backend.core.concurrency import run_blocking
from notekeeper.backend.core.exceptions import StorageUnavailableError, ValidationError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import Clock, from_timestamp, utc_now
from notekeeper.backend.schemas.note import Note, NoteDocument
from notekeeper.backend.storage.base import DEFAULT_SUFFIX, NoteStorage

logger = get_logger(__name__)

_UNSAFE_TITLE_CHARS = re.compile(r"[^\w\- ]+")
_MAX_TITLE_LENGTH = 50


def safe_filename(title: str | None) -> str:
    """
    Reduce a title to something usable as a file name stem.

    Characters other than letters, digits, underscore, hyphen and space are
    dropped and the result is cut to 50 characters. Empty input, or input
    with nothing usable left, yields "untitled".
    """
    if not title or not title.strip():
        return "untitled"
    safe = _UNSAFE_TITLE_CHARS.sub("", title).strip()
    if not safe:
        return "untitled"
    return safe[:_MAX_TITLE_LENGTH].strip()


class FileNoteStorage(NoteStorage):
    """Flat-file backing medium."""

    name = "file"

    def __init__(
        self,
        directory: str | Path,
        suffix: str = DEFAULT_SUFFIX,
        clock: Clock = utc_now,
    ) -> None:
        self.directory = Path(directory)
        self.suffix = suffix
        self._clock = clock

    def _is_valid_key(self, storage_key: str) -> bool:
        return (
            bool(storage_key)
            and Path(storage_key).name == storage_key
            and not storage_key.startswith(".")
            and storage_key.endswith(self.suffix)
        )

    def _path_for(self, storage_key: str) -> Path:
        """Map a storage key to its file, refusing anything outside the directory."""
        if not self._is_valid_key(storage_key):
            raise ValidationError(
                "Invalid storage key",
                details={"storage_key": storage_key, "suffix": self.suffix},
            )
        return self.directory / storage_key

    def _raw_id(self, storage_key: str) -> str:
        return storage_key[: -len(self.suffix)]

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def _parse(self, storage_key: str, content: str, mtime: float) -> Note:
        """Build a note from file content; raises on a malformed JSON document."""
        modified = from_timestamp(mtime)
        try:
            payload = json.loads(content)
        except json.JSONDecodeError:
            payload = None

        if isinstance(payload, dict):
            document = NoteDocument.model_validate(payload)
            return document.to_note(storage_key, fallback_updated_at=modified)

        return Note(
            id=self._raw_id(storage_key),
            storage_key=storage_key,
            text=content,
            updated_at=modified,
        )

    def _read_sync(self, path: Path) -> Note | None:
        """Read one note file; a damaged file is logged and yields None."""
        try:
            content = path.read_text(encoding="utf-8")
            return self._parse(path.name, content, path.stat().st_mtime)
        except (UnicodeDecodeError, PydanticValidationError) as e:
            logger.warning(
                "Skipping unreadable note file",
                extra={"file": str(path), "error": str(e)},
            )
            return None

    def _load_all_sync(self) -> list[Note]:
        if not self.directory.exists():
            return []

        notes: list[Note] = []
        seen_ids: set[str] = set()
        for path in sorted(self.directory.glob(f"*{self.suffix}")):
            if path.name.startswith(".") or not path.is_file():
                continue
            try:
                note = self._read_sync(path)
            except OSError as e:
                logger.warning(
                    "Skipping unreadable note file",
                    extra={"file": str(path), "error": str(e)},
                )
                continue
            if note is None:
                continue

            if note.id in seen_ids:
                logger.warning(
                    "Skipping note file with duplicate id",
                    extra={"file": str(path), "note_id": note.id},
                )
                continue
            seen_ids.add(note.id)
            notes.append(note)

        notes.sort(key=lambda n: n.updated_at, reverse=True)
        return notes

    async def load_all(self) -> list[Note]:
        try:
            notes = await run_blocking(self._load_all_sync)
        except OSError as e:
            logger.error(
                "Error loading notes from files",
                extra={"directory": str(self.directory), "error": str(e)},
            )
            raise StorageUnavailableError(
                f"Cannot read notes directory {self.directory}",
                operation="load_all",
                target=str(self.directory),
            ) from e

        logger.debug("Loaded notes from files", extra={"count": len(notes)})
        return notes

    async def load(self, storage_key: str) -> Note | None:
        if not self._is_valid_key(storage_key):
            return None
        path = self.directory / storage_key
        try:
            return await run_blocking(self._read_sync, path)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(
                "Error loading note file",
                extra={"file": str(path), "error": str(e)},
            )
            raise StorageUnavailableError(
                f"Cannot read note file {storage_key}",
                operation="load",
                target=storage_key,
            ) from e

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def _write_sync(self, path: Path, body: str) -> None:
        """Write through a temp file so readers never see a partial note."""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_text(body, encoding="utf-8")
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    async def save(self, note: Note) -> Note:
        path = self._path_for(note.storage_key)
        body = NoteDocument.from_note(note).model_dump_json(indent=2)
        try:
            await run_blocking(self._write_sync, path, body)
        except OSError as e:
            logger.error(
                "Error saving note to file",
                extra={"file": str(path), "error": str(e)},
            )
            raise StorageUnavailableError(
                f"Cannot write note file {note.storage_key}",
                operation="save",
                target=note.storage_key,
            ) from e
        return note

    async def delete(self, storage_key: str) -> bool:
        if not self._is_valid_key(storage_key):
            return False
        path = self.directory / storage_key
        try:
            await run_blocking(path.unlink)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(
                "Error deleting note file",
                extra={"file": str(path), "error": str(e)},
            )
            raise StorageUnavailableError(
                f"Cannot delete note file {storage_key}",
                operation="delete",
                target=storage_key,
            ) from e

        logger.info("Note file deleted", extra={"file": str(path)})
        return True

    async def exists(self, storage_key: str) -> bool:
        if not self._is_valid_key(storage_key):
            return False
        return await run_blocking((self.directory / storage_key).is_file)

    # -------------------------------------------------------------------------
    # Keys
    # -------------------------------------------------------------------------

    def generate_storage_key(self, hint: str | None = None) -> str:
        """
        Random key by default, or <safe title>.<yyyyMMddHHmmss><suffix> with a hint.

        A random token is appended to a title-derived key that is already taken.
        """
        if hint is None:
            return f"{secrets.token_hex(6)}{self.suffix}"

        stem = f"{safe_filename(hint)}.{self._clock():%Y%m%d%H%M%S}"
        key = f"{stem}{self.suffix}"
        while (self.directory / key).exists():
            key = f"{stem}-{secrets.token_hex(3)}{self.suffix}"
        return key
