"""Ordered conversation transcript.

Hidden design decisions:
- Storage of messages (a plain list, appended to in place)
- How the question behind an answer is located
"""

from collections.abc import Iterator, Sequence

from ..config import IMAGE_QUESTION_PLACEHOLDER
from ..errors import ValidationError
from .models import Message


class Transcript:
    """Append-only sequence of messages, seeded with a greeting.

    Messages are never reordered or removed, so an index handed to a
    presentation layer stays valid for the life of the transcript.
    """

    def __init__(self, greeting: str):
        self._messages: list[Message] = [Message.assistant(greeting)]

    def append(self, message: Message) -> int:
        """Append a message and return its index."""
        self._messages.append(message)
        return len(self._messages) - 1

    @property
    def messages(self) -> Sequence[Message]:
        """Read-only view of the messages in chronological order."""
        return tuple(self._messages)

    @property
    def last(self) -> Message:
        return self._messages[-1]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def last_answer_index(self) -> int | None:
        """Index of the most recent assistant answer, excluding the greeting."""
        for index in range(len(self._messages) - 1, 0, -1):
            if self._messages[index].role == "assistant":
                return index
        return None

    def question_for(self, index: int) -> str:
        """Return the question that an assistant message answers.

        Raises:
            ValidationError: If index is the greeting or not an assistant message
        """
        if index <= 0 or index >= len(self._messages):
            raise ValidationError(f"No answer at position {index}")
        if self._messages[index].role != "assistant":
            raise ValidationError(f"Message {index} is not an answer")

        previous = self._messages[index - 1]
        return previous.content or IMAGE_QUESTION_PLACEHOLDER
