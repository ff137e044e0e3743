"""Abstract base class for note store backends.

This module defines the interface for saved-note storage.
The abstraction hides:
- Persistence mechanism (file, database, in-memory)
- Connection management

Every backend is a key-value store holding the notes as one JSON array
under a fixed key, newest first. Serialization, id assignment and
recovery from corrupt state live here, shared by all backends.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod

from ..config import NOTES_STORAGE_KEY
from ..errors import PersistenceParseError
from .models import Note, decode_notes, encode_notes

logger = logging.getLogger(__name__)


class NoteStore(ABC):
    """Abstract note store backend."""

    def __init__(self, key: str = NOTES_STORAGE_KEY):
        self._key = key
        self._lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the storage backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the storage backend gracefully."""

    @abstractmethod
    async def _read_raw(self) -> str | None:
        """Return the stored record for the key, or None if absent.

        Raises:
            PersistenceParseError: If the underlying container is unreadable
        """

    @abstractmethod
    async def _write_raw(self, raw: str) -> None:
        """Replace the stored record for the key."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def load(self) -> list[Note]:
        """Load all notes, newest first.

        Corrupt persisted state is logged and treated as no prior state.
        """
        try:
            notes = decode_notes(await self._read_raw())
        except PersistenceParseError as e:
            logger.warning("Ignoring unreadable notes under %r: %s", self._key, e)
            return []
        return sorted(notes, key=lambda note: note.id, reverse=True)

    async def save_all(self, notes: list[Note]) -> None:
        """Persist a full set of notes, newest first."""
        async with self._lock:
            await self._write_raw(encode_notes(sorted(notes, key=lambda n: n.id, reverse=True)))

    async def save(self, question: str, answer: str) -> Note:
        """Save a new note at the front of the list.

        The question is truncated to the preview length; the answer is kept whole.
        """
        async with self._lock:
            notes = await self.load()
            note_id = int(time.time() * 1000)
            if notes:
                note_id = max(note_id, notes[0].id + 1)

            note = Note.create(note_id, question, answer)
            await self._write_raw(encode_notes([note, *notes]))

        logger.debug("Saved note %d", note.id)
        return note

    async def get(self, note_id: int) -> Note | None:
        for note in await self.load():
            if note.id == note_id:
                return note
        return None

    async def delete(self, note_id: int) -> bool:
        """Delete a note by id. Returns False (and writes nothing) if absent."""
        async with self._lock:
            notes = await self.load()
            remaining = [note for note in notes if note.id != note_id]
            if len(remaining) == len(notes):
                return False
            await self._write_raw(encode_notes(remaining))
        return True

    async def __aenter__(self) -> "NoteStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
