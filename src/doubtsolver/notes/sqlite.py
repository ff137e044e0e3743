"""SQLite note store backend.

Provides persistent note storage in a key-value table.
Uses aiosqlite for async access.
"""

from pathlib import Path

import aiosqlite

from ..config import NOTES_STORAGE_KEY
from .base import NoteStore


class SQLiteNoteStore(NoteStore):
    """SQLite-backed note store.

    Stores the notes record in a `kv` table keyed by the storage key.
    """

    def __init__(
        self,
        path: str | Path = "./doubtsolver.db",
        key: str = NOTES_STORAGE_KEY
    ):
        super().__init__(key)
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _read_raw(self) -> str | None:
        if self._connection is None:
            raise RuntimeError("Not connected to database")

        async with self._connection.execute(
            "SELECT value FROM kv WHERE key = ?",
            (self._key,)
        ) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else None

    async def _write_raw(self, raw: str) -> None:
        if self._connection is None:
            raise RuntimeError("Not connected to database")

        await self._connection.execute("""
            INSERT INTO kv (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
        """, (self._key, raw))
        await self._connection.commit()

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
