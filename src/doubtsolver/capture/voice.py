"""Speech-to-text capability interface.

Hidden design decisions:
- Which speech engine produces transcripts (browser, cloud, local model)
- How the engine is started and stopped

A recognizer is modelled as an async stream of transcripts. Each item is the
full transcript so far, not a delta, so consumers simply overwrite.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable


class SpeechRecognizer(ABC):
    """Abstract continuous speech recognizer."""

    @property
    def is_available(self) -> bool:
        """Whether this recognizer can be used in the current environment."""
        return True

    @abstractmethod
    def listen(self, locale: str) -> AsyncIterator[str]:
        """Start continuous recognition.

        Args:
            locale: BCP-47 locale, e.g. 'en-US' or 'hi-IN'

        Returns:
            Async iterator yielding the growing transcript. Closing the
            iterator stops recognition.
        """


class ScriptedRecognizer(SpeechRecognizer):
    """Recognizer that replays a fixed list of transcripts.

    Useful for demos and tests where no microphone is available.
    """

    def __init__(self, transcripts: Iterable[str], interval: float = 0.0):
        self._transcripts = list(transcripts)
        self._interval = interval
        self.locales: list[str] = []

    def listen(self, locale: str) -> AsyncIterator[str]:
        self.locales.append(locale)
        return self._replay()

    async def _replay(self) -> AsyncIterator[str]:
        for transcript in self._transcripts:
            await asyncio.sleep(self._interval)
            yield transcript
