"""Configuration constants.

Centralizes limits and defaults shared by the session, the stores and the server.
"""

from enum import Enum


class LanguageMode(str, Enum):
    """Register of the generated explanation."""

    ENGLISH = "English"
    HINGLISH = "Hinglish"

    @property
    def description(self) -> str:
        return _LANGUAGE_DESCRIPTIONS[self]

    @property
    def speech_locale(self) -> str:
        """Locale handed to the speech recognizer for this mode."""
        return "hi-IN" if self is LanguageMode.HINGLISH else "en-US"

    @classmethod
    def parse(cls, value: str) -> "LanguageMode":
        """Case-insensitive lookup. Raises ValueError if unknown."""
        for mode in cls:
            if mode.value.lower() == value.strip().lower():
                return mode
        raise ValueError(
            f"Unknown language mode: {value}. "
            f"Supported modes: {', '.join(m.value for m in cls)}"
        )


_LANGUAGE_DESCRIPTIONS = {
    LanguageMode.ENGLISH: "Standard technical explanations",
    LanguageMode.HINGLISH: "Hindi + English mix for easy understanding",
}


# Input limits
MAX_IMAGE_BYTES = 5 * 1024 * 1024  # Attachments above this are rejected locally
IMAGE_ONLY_PROMPT = "Explain this image related to engineering."

# Notes
NOTES_STORAGE_KEY = "doubtSolverNotes"  # Fixed key of the persisted notes record
NOTE_QUESTION_PREVIEW = 100  # Characters kept from the question when saving
IMAGE_QUESTION_PLACEHOLDER = "Image Question"

# Provider defaults
OPENAI_DEFAULT_MODEL = "gpt-4o"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_TOKENS = 1000
FAILURE_DETAIL_MAX_LENGTH = 300  # Characters of provider detail shown to the user

# Backend proxy
DEFAULT_PORT = 5000
DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_PDF_TITLE = "Doubt Solution"
DEFAULT_PDF_FILENAME = "solution"
