"""Request and response bodies of the backend proxy API."""

from pydantic import BaseModel, Field

from ..config import LanguageMode


class SolveRequest(BaseModel):
    """Body of POST /api/solve. `question` is checked by the handler for a 400."""

    question: str | None = Field(default=None, description="The student's doubt")
    context: str | None = Field(default=None, description="Optional extra context")
    language: LanguageMode | None = Field(default=None, description="Answer language, English when omitted")
    image: str | None = Field(default=None, description="Optional image as a base64 data URL")


class SolveResponse(BaseModel):
    answer: str


class PdfRequest(BaseModel):
    """Body of POST /api/generate-pdf."""

    title: str | None = Field(default=None, description="Document title and file name")
    content: str | None = Field(default=None, description="Markdown content to render")


class ErrorResponse(BaseModel):
    error: str
