"""Input capture: typed text, voice transcripts and one image attachment.

Hidden design decisions:
- How the text buffer is shared between typing and voice updates
- When and where image bytes are base64-encoded
- Validation limits for attachments
"""

import asyncio
import base64
import logging
import mimetypes
from collections.abc import AsyncIterator
from pathlib import Path

from ..config import MAX_IMAGE_BYTES, LanguageMode
from ..errors import ValidationError
from .models import EncodedImage, PendingRequest
from .voice import SpeechRecognizer

logger = logging.getLogger(__name__)


class InputCapture:
    """Merges the input modalities into a single PendingRequest.

    The text buffer has one owner at a time by arrival order: typed edits
    and voice updates both overwrite it, and the latest one wins.

    Example:
        capture = InputCapture()
        capture.set_text("What is a transistor?")
        request = await capture.take(LanguageMode.ENGLISH)
    """

    def __init__(self, max_image_bytes: int = MAX_IMAGE_BYTES):
        self._max_image_bytes = max_image_bytes
        self._text = ""
        self._image_source: bytes | Path | None = None
        self._image_mime: str | None = None
        self._image_size = 0
        self._voice_task: asyncio.Task | None = None

    # -- text -----------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        """Overwrite the text buffer (typed input)."""
        self._text = text

    # -- image ----------------------------------------------------------

    @property
    def image_attached(self) -> bool:
        return self._image_source is not None

    @property
    def image_mime_type(self) -> str | None:
        return self._image_mime

    def attach_image(self, data: bytes, mime_type: str) -> None:
        """Attach raw image bytes, replacing any previous attachment.

        Raises:
            ValidationError: If the image is too large or not an image type
        """
        self._validate_image(len(data), mime_type)
        self._image_source = bytes(data)
        self._image_mime = mime_type
        self._image_size = len(data)

    def attach_image_file(self, path: str | Path) -> None:
        """Attach an image file by path. Bytes are read at submission.

        Raises:
            ValidationError: If the file is missing, too large or not an image
        """
        path = Path(path)
        if not path.is_file():
            raise ValidationError(f"Image file not found: {path}")

        mime_type, _ = mimetypes.guess_type(path.name)
        size = path.stat().st_size
        self._validate_image(size, mime_type)
        self._image_source = path
        self._image_mime = mime_type
        self._image_size = size

    def clear_image(self) -> None:
        self._image_source = None
        self._image_mime = None
        self._image_size = 0

    def _validate_image(self, size: int, mime_type: str | None) -> None:
        if not mime_type or not mime_type.startswith("image/"):
            raise ValidationError(f"Unsupported attachment type: {mime_type or 'unknown'}")
        if size > self._max_image_bytes:
            limit_mb = self._max_image_bytes / (1024 * 1024)
            raise ValidationError(f"Image size should be less than {limit_mb:g}MB")

    # -- voice ----------------------------------------------------------

    @property
    def listening(self) -> bool:
        return self._voice_task is not None and not self._voice_task.done()

    def start_voice(self, transcripts: AsyncIterator[str]) -> asyncio.Task:
        """Consume a transcript stream in the background.

        Each transcript overwrites the text buffer. A previous voice session,
        if any, is cancelled first.
        """
        self.stop_voice()
        self._voice_task = asyncio.create_task(self._consume_voice(transcripts))
        return self._voice_task

    def listen(self, recognizer: SpeechRecognizer, language: LanguageMode) -> asyncio.Task:
        """Start a voice session from a recognizer in the language's locale.

        Raises:
            ValidationError: If the recognizer is unavailable
        """
        if not recognizer.is_available:
            raise ValidationError("Speech recognition is not supported here")
        return self.start_voice(recognizer.listen(language.speech_locale))

    def stop_voice(self) -> None:
        """Cancel the active voice session. No further updates are applied."""
        if self._voice_task is not None and not self._voice_task.done():
            self._voice_task.cancel()
        self._voice_task = None

    async def _consume_voice(self, transcripts: AsyncIterator[str]) -> None:
        try:
            async for transcript in transcripts:
                if transcript:
                    self._text = transcript
        finally:
            aclose = getattr(transcripts, "aclose", None)
            if aclose is not None:
                await aclose()

    # -- submission -----------------------------------------------------

    def has_input(self) -> bool:
        return bool(self._text.strip()) or self.image_attached

    async def take(self, language: LanguageMode, context: str = "") -> PendingRequest | None:
        """Turn the current input into a PendingRequest and reset the inputs.

        Returns None without touching any state when there is nothing to send.
        Otherwise stops voice capture, encodes the image and clears the text
        buffer and attachment.

        Raises:
            ValidationError: If the attached image can no longer be read
        """
        if not self.has_input():
            return None

        self.stop_voice()

        image = None
        if self._image_source is not None:
            image = await self._encode_image()

        request = PendingRequest(
            text=self._text.strip(),
            image=image,
            language=language,
            context=context,
        )
        self._text = ""
        self.clear_image()
        return request

    async def _encode_image(self) -> EncodedImage:
        source = self._image_source
        mime_type = self._image_mime

        def _read_and_encode() -> tuple[str, int]:
            data = source if isinstance(source, bytes) else source.read_bytes()
            return base64.b64encode(data).decode("ascii"), len(data)

        try:
            encoded, size = await asyncio.to_thread(_read_and_encode)
        except OSError as e:
            logger.warning("Failed to read attached image %s: %s", source, e)
            raise ValidationError(f"Could not read attached image: {e}") from e

        # Files can grow between attach and submit
        self._validate_image(size, mime_type)
        return EncodedImage(mime_type=mime_type, data=encoded, size_bytes=size)
