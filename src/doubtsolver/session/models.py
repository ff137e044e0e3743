"""Session state and exchange records."""

from dataclasses import dataclass
from enum import Enum

from ..capture.models import PendingRequest
from ..conversation.models import Message
from ..llm.models import AnswerResult


class SessionState(str, Enum):
    """Busy/idle state of a DoubtSession.

    There is no error state: a failed exchange returns to IDLE with an
    explanatory assistant message in the transcript.
    """

    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class Exchange:
    """One completed submit/resolve cycle."""

    request: PendingRequest
    result: AnswerResult
    user_message: Message
    assistant_message: Message

    @property
    def ok(self) -> bool:
        return self.result.ok
