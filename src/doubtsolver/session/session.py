"""Doubt session orchestrator.

Hidden design decisions:
- The busy/idle state machine and its single-flight guard
- The order in which transcript entries are appended
- How failures of any kind become transcript messages
- How presentation layers are notified
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from ..capture import InputCapture, SpeechRecognizer
from ..config import LanguageMode
from ..conversation import Message, Transcript
from ..errors import ExportError, SessionBusyError, ValidationError
from ..llm.base import AnswerProvider
from ..llm.models import AnswerResult, Failure, FailureKind, Success
from ..notes import Note, NoteStore
from ..pdf import PdfRenderer
from ..prompts import get_greeting
from .messages import failure_message
from .models import Exchange, SessionState

logger = logging.getLogger(__name__)

MessageCallback = Callable[[Message], None]
Notifier = Callable[[str, str], None]  # (level, text)


def _log_notifier(level: str, text: str) -> None:
    logger.log(logging.getLevelName(level.upper()), text)


class DoubtSession:
    """Coordinates input capture, the answer provider and the transcript.

    One session is constructed at startup and shared with every
    presentation collaborator; it owns the language mode and the busy state.

    Example:
        session = DoubtSession(provider, notes=store)
        session.capture.set_text("What is a transistor?")
        exchange = await session.submit()
        print(session.transcript.last.content)
    """

    def __init__(
        self,
        provider: AnswerProvider,
        notes: NoteStore | None = None,
        capture: InputCapture | None = None,
        language: LanguageMode = LanguageMode.ENGLISH,
        notifier: Notifier | None = None,
        pdf_renderer: PdfRenderer | None = None,
    ):
        self._provider = provider
        self._notes = notes
        self._capture = capture or InputCapture()
        self._language = language
        self._notify = notifier or _log_notifier
        self._pdf_renderer = pdf_renderer
        self._state = SessionState.IDLE
        self._subscribers: list[MessageCallback] = []
        self._transcript = Transcript(get_greeting(language))

    @property
    def provider(self) -> AnswerProvider:
        return self._provider

    @property
    def capture(self) -> InputCapture:
        return self._capture

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def notes(self) -> NoteStore | None:
        return self._notes

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is SessionState.SUBMITTING

    @property
    def language(self) -> LanguageMode:
        return self._language

    @language.setter
    def language(self, value: LanguageMode) -> None:
        self._language = value

    def subscribe(self, callback: MessageCallback) -> Callable[[], None]:
        """Register a callback for every appended message.

        Returns:
            A function that removes the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def listen(self, recognizer: SpeechRecognizer) -> asyncio.Task:
        """Start voice input in the current language's locale."""
        return self._capture.listen(recognizer, self._language)

    async def submit(self, context: str = "") -> Exchange | None:
        """Submit the captured input as one exchange.

        Returns:
            The completed Exchange, or None when there was nothing to send

        Raises:
            SessionBusyError: If another exchange is in flight
            ValidationError: If the attached image cannot be read
        """
        if self._state is SessionState.SUBMITTING:
            raise SessionBusyError("Please wait for the current answer before asking again")

        self._state = SessionState.SUBMITTING
        try:
            request = await self._capture.take(self._language, context)
            if request is None:
                return None

            user_message = Message.user(
                request.text,
                image=request.image.data_url if request.image else None
            )
            self._append(user_message)

            result = await self._resolve(request)

            if isinstance(result, Success):
                assistant_message = Message.assistant(result.text)
            else:
                assistant_message = Message.assistant(failure_message(result))
            self._append(assistant_message)

            return Exchange(
                request=request,
                result=result,
                user_message=user_message,
                assistant_message=assistant_message,
            )
        finally:
            self._state = SessionState.IDLE

    async def ask(
        self,
        text: str,
        image_path: str | Path | None = None,
        context: str = ""
    ) -> Exchange | None:
        """Fill the input from arguments and submit."""
        if self.busy:
            raise SessionBusyError("Please wait for the current answer before asking again")
        if image_path is not None:
            self._capture.attach_image_file(image_path)
        self._capture.set_text(text)
        return await self.submit(context)

    async def _resolve(self, request) -> AnswerResult:
        try:
            return await self._provider.resolve(request, self._language)
        except Exception as e:
            logger.exception("Answer provider raised instead of returning a result")
            return Failure(kind=FailureKind.PROVIDER, detail=f"{type(e).__name__}: {e}")

    def _append(self, message: Message) -> None:
        self._transcript.append(message)
        for callback in list(self._subscribers):
            try:
                callback(message)
            except Exception:
                logger.exception("Message subscriber failed")

    async def save_note(self, index: int | None = None) -> Note:
        """Save an answer and the question before it as a Note.

        Args:
            index: Transcript index of the answer (defaults to the latest one)

        Raises:
            ValidationError: If there is no answer to save or no note store
        """
        if self._notes is None:
            raise ValidationError("Saving notes is not configured")
        if index is None:
            index = self._transcript.last_answer_index()
            if index is None:
                raise ValidationError("There is no answer to save yet")

        question = self._transcript.question_for(index)
        note = await self._notes.save(question, self._transcript[index].content)
        self._notify("info", "Saved to notes")
        return note

    async def export_pdf(self, content: str, title: str | None = None) -> bytes | None:
        """Render content as PDF.

        Failures are reported through the notifier, never the transcript.

        Returns:
            PDF bytes, or None if rendering failed
        """
        renderer = self._pdf_renderer or PdfRenderer()
        try:
            return await asyncio.to_thread(renderer.render, content, title)
        except ExportError as e:
            self._notify("error", f"Failed to generate PDF. Please try again. ({e})")
            return None

    async def export_pdf_to(
        self,
        path: str | Path,
        content: str,
        title: str | None = None
    ) -> Path | None:
        """Render content as PDF and write it to a file."""
        data = await self.export_pdf(content, title)
        if data is None:
            return None

        path = Path(path)
        try:
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as e:
            self._notify("error", f"Failed to write {path}: {e}")
            return None
        return path
