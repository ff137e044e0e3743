"""Doubt session module: the orchestrator of one student's conversation."""

from .messages import failure_message
from .models import Exchange, SessionState
from .session import DoubtSession

__all__ = ["DoubtSession", "Exchange", "SessionState", "failure_message"]
