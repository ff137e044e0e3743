"""
Doubt Solver: an AI tutor for engineering students' doubts.

A question typed, spoken or photographed is normalized into one request,
answered by a pluggable generative AI backend and appended to a
conversation transcript. Answers can be saved as notes or exported to PDF.
"""

__version__ = "0.1.0"

from .capture import InputCapture, PendingRequest
from .config import LanguageMode
from .conversation import Message, Transcript
from .llm import AnswerProvider, Failure, FailureKind, Success, create_answer_provider
from .notes import Note, NoteStore, create_note_store
from .session import DoubtSession, Exchange, SessionState

__all__ = [
    "AnswerProvider",
    "DoubtSession",
    "Exchange",
    "Failure",
    "FailureKind",
    "InputCapture",
    "LanguageMode",
    "Message",
    "Note",
    "NoteStore",
    "PendingRequest",
    "SessionState",
    "Success",
    "Transcript",
    "create_answer_provider",
    "create_note_store",
]
