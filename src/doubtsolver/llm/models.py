from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..capture.models import EncodedImage
from ..config import FAILURE_DETAIL_MAX_LENGTH


class ChatMessage(BaseModel):
    """Represents a chat message sent to a provider."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")
    image: EncodedImage | None = Field(
        default=None,
        description="Optional image sent alongside the text (user messages only)"
    )


class FailureKind(str, Enum):
    """Closed set of provider failure classes."""

    MISSING_CREDENTIAL = "missing_credential"
    AUTH = "auth"
    PROVIDER = "provider"
    TRANSPORT = "transport"


class Success(BaseModel):
    """A resolved answer."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Markdown answer text")
    model: str | None = Field(default=None, description="Model that generated the answer")
    usage: dict[str, int] | None = Field(default=None, description="Token usage information")

    @property
    def ok(self) -> bool:
        return True


class Failure(BaseModel):
    """A classified provider failure.

    `detail` is a bounded debug string; it never carries credentials.
    """

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    detail: str = Field(default="", description="Bounded debug detail")
    credential_name: str | None = Field(
        default=None,
        description="Name of the setting that holds the credential, for actionable messages"
    )

    @field_validator("detail", mode="before")
    @classmethod
    def _bound_detail(cls, value: Any) -> str:
        text = "" if value is None else str(value)
        if len(text) > FAILURE_DETAIL_MAX_LENGTH:
            return text[:FAILURE_DETAIL_MAX_LENGTH - 3] + "..."
        return text

    @property
    def ok(self) -> bool:
        return False


AnswerResult = Success | Failure
