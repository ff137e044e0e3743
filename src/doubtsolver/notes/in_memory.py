"""In-memory note store backend.

Simple dict-based storage for session-only notes.
Data is lost when the application exits.
"""

from ..config import NOTES_STORAGE_KEY
from .base import NoteStore


class InMemoryNoteStore(NoteStore):
    """In-memory note store (session-only).

    Keeps the serialized record exactly as a durable backend would, so
    corrupt-state handling can be exercised without a file.
    """

    def __init__(self, key: str = NOTES_STORAGE_KEY, initial: dict[str, str] | None = None):
        super().__init__(key)
        self._records: dict[str, str] = dict(initial or {})

    async def connect(self) -> None:
        """Initialize memory (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close memory (no-op for in-memory)."""
        pass

    async def _read_raw(self) -> str | None:
        return self._records.get(self._key)

    async def _write_raw(self, raw: str) -> None:
        self._records[self._key] = raw

    @property
    def backend_type(self) -> str:
        return "memory"
