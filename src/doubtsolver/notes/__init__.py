"""Saved notes module.

Provides persistent storage of question/answer pairs chosen by the student.
"""

from .base import NoteStore
from .factory import create_note_store
from .models import Note, decode_notes, encode_notes

__all__ = [
    "Note",
    "NoteStore",
    "create_note_store",
    "decode_notes",
    "encode_notes",
]
