"""Data models for captured input.

A PendingRequest is the normalized form of whatever the student typed, said
or attached. It exists only between submission and resolution.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..config import LanguageMode


class EncodedImage(BaseModel):
    """An image attachment in transport-safe form."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(description="MIME type of the image, e.g. 'image/png'")
    data: str = Field(description="Base64-encoded image bytes")
    size_bytes: int = Field(ge=0, description="Size of the raw image in bytes")

    @property
    def data_url(self) -> str:
        """Image as a data URL, the form OpenAI and browsers accept."""
        return f"data:{self.mime_type};base64,{self.data}"


class PendingRequest(BaseModel):
    """A single outgoing doubt, ready for an AnswerProvider."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Question text, possibly empty")
    image: EncodedImage | None = Field(default=None, description="Attached image, if any")
    language: LanguageMode = Field(default=LanguageMode.ENGLISH)
    context: str = Field(default="", description="Extra context supplied with the question")

    @property
    def has_image(self) -> bool:
        return self.image is not None
