"""Conversation module: the chronological transcript of an exchange session."""

from .models import Message
from .transcript import Transcript

__all__ = ["Message", "Transcript"]
