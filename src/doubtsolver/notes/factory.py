"""Factory for creating note store backends."""

from typing import Any

from .base import NoteStore


def create_note_store(
    backend: str = "json",
    **kwargs: Any
) -> NoteStore:
    """Create a note store backend.

    Args:
        backend: Backend type ("json", "sqlite" or "memory")
        **kwargs: Backend-specific configuration (path, key)

    Returns:
        NoteStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryNoteStore
        return InMemoryNoteStore(**kwargs)

    elif backend == "json":
        from .json_file import JsonFileNoteStore
        return JsonFileNoteStore(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteNoteStore
        return SQLiteNoteStore(**kwargs)

    raise ValueError(
        f"Unsupported notes backend: {backend}. "
        f"Supported backends: json, sqlite, memory"
    )
