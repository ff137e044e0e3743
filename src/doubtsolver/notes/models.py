"""Data models for saved notes.

These models define the structure of a note and its persisted form,
independent of the storage backend used.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..config import NOTE_QUESTION_PREVIEW
from ..errors import PersistenceParseError


class Note(BaseModel):
    """A saved question/answer pair.

    `id` is the creation time in milliseconds, kept strictly increasing
    within a store so that it doubles as the sort key.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Unique id, monotonic by creation time")
    question: str = Field(description="Question preview, at most NOTE_QUESTION_PREVIEW characters")
    answer: str = Field(description="Full answer text")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, note_id: int, question: str, answer: str) -> "Note":
        """Build a note, truncating the question to the preview length."""
        return cls(id=note_id, question=question[:NOTE_QUESTION_PREVIEW], answer=answer)


_NOTES_ADAPTER = TypeAdapter(list[Note])


def encode_notes(notes: list[Note]) -> str:
    """Serialize notes to the persisted JSON array."""
    return _NOTES_ADAPTER.dump_json(notes).decode("utf-8")


def decode_notes(raw: str | None) -> list[Note]:
    """Parse the persisted JSON array. An absent record is an empty list.

    Raises:
        PersistenceParseError: If the record is not a valid notes array
    """
    if raw is None or not raw.strip():
        return []
    try:
        return _NOTES_ADAPTER.validate_json(raw)
    except PydanticValidationError as e:
        raise PersistenceParseError(f"Stored notes are corrupt: {e.error_count()} error(s)") from e
