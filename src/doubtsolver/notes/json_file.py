"""JSON file note store backend.

Stores records in a single JSON object on disk, mapping each key to its
serialized value, the way browser local storage keeps string values.
"""

import asyncio
import json
import logging
import os
from pathlib import Path

from ..config import NOTES_STORAGE_KEY
from ..errors import PersistenceParseError
from .base import NoteStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path.home() / ".doubtsolver" / "storage.json"


class JsonFileNoteStore(NoteStore):
    """File-backed note store."""

    def __init__(
        self,
        path: str | Path = DEFAULT_STORAGE_PATH,
        key: str = NOTES_STORAGE_KEY
    ):
        super().__init__(key)
        self._path = Path(path).expanduser()

    async def connect(self) -> None:
        """Ensure the storage directory exists."""
        await asyncio.to_thread(self._path.parent.mkdir, parents=True, exist_ok=True)

    async def disconnect(self) -> None:
        """Nothing is held open between operations."""
        pass

    def _read_records(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            records = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PersistenceParseError(f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(records, dict):
            raise PersistenceParseError(f"{self._path} does not hold a JSON object")
        return records

    def _write_records(self, records: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    async def _read_raw(self) -> str | None:
        records = await asyncio.to_thread(self._read_records)
        value = records.get(self._key)
        if value is not None and not isinstance(value, str):
            raise PersistenceParseError(f"Record {self._key!r} is not a string")
        return value

    async def _write_raw(self, raw: str) -> None:
        def _update() -> None:
            try:
                records = self._read_records()
            except PersistenceParseError as e:
                logger.warning("Overwriting unreadable storage file: %s", e)
                records = {}
            records[self._key] = raw
            self._write_records(records)

        await asyncio.to_thread(_update)

    @property
    def backend_type(self) -> str:
        return "json"

    @property
    def path(self) -> Path:
        return self._path
