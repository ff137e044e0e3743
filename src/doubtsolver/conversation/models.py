"""Data models for the conversation transcript."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """A single transcript entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Who produced the message")
    content: str = Field(description="Message text (Markdown for assistant messages)")
    image: str | None = Field(default=None, description="Attached image as a data URL")
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def user(cls, content: str, image: str | None = None) -> "Message":
        return cls(role="user", content=content, image=image)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)
