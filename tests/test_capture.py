"""Unit tests for the input capture module."""
import asyncio
import base64

import pytest
from hypothesis import given
from hypothesis import strategies as st

from doubtsolver.capture import InputCapture, ScriptedRecognizer
from doubtsolver.config import MAX_IMAGE_BYTES, LanguageMode
from doubtsolver.errors import ValidationError


class TestTextInput:
    """Tests for the text buffer."""

    @pytest.mark.asyncio
    async def test_take_returns_request_and_clears_buffer(self):
        capture = InputCapture()
        capture.set_text("  What is a transistor?  ")

        request = await capture.take(LanguageMode.ENGLISH)

        assert request is not None
        assert request.text == "What is a transistor?"
        assert request.image is None
        assert request.language == LanguageMode.ENGLISH
        assert capture.text == ""

    @pytest.mark.asyncio
    async def test_empty_input_is_a_noop(self):
        capture = InputCapture()
        capture.set_text("   ")

        assert await capture.take(LanguageMode.ENGLISH) is None
        assert capture.text == "   "

    @given(st.text(alphabet=" \t\n\r"))
    def test_whitespace_only_is_not_input(self, text: str):
        """Property test: whitespace alone never counts as a submission."""
        capture = InputCapture()
        capture.set_text(text)
        assert not capture.has_input()


class TestImageInput:
    """Tests for image attachments."""

    def test_oversized_image_rejected(self):
        capture = InputCapture()

        with pytest.raises(ValidationError, match="less than 5MB"):
            capture.attach_image(b"\0" * (MAX_IMAGE_BYTES + 1), "image/png")

        assert not capture.image_attached

    def test_oversized_file_rejected(self, large_image_file):
        capture = InputCapture()

        with pytest.raises(ValidationError):
            capture.attach_image_file(large_image_file)

        assert not capture.image_attached

    def test_image_at_limit_accepted(self):
        capture = InputCapture()
        capture.attach_image(b"\0" * MAX_IMAGE_BYTES, "image/jpeg")
        assert capture.image_attached

    def test_non_image_rejected(self, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("not an image")
        capture = InputCapture()

        with pytest.raises(ValidationError, match="Unsupported attachment"):
            capture.attach_image_file(notes)

    def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(ValidationError, match="not found"):
            InputCapture().attach_image_file(tmp_path / "nope.png")

    def test_rejected_image_keeps_previous_attachment(self, png_bytes):
        capture = InputCapture()
        capture.attach_image(png_bytes, "image/png")

        with pytest.raises(ValidationError):
            capture.attach_image(b"\0" * (MAX_IMAGE_BYTES + 1), "image/png")

        assert capture.image_attached
        assert capture.image_mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_image_only_request_is_encoded(self, png_file, png_bytes):
        capture = InputCapture()
        capture.attach_image_file(png_file)

        request = await capture.take(LanguageMode.HINGLISH)

        assert request.text == ""
        assert request.image.mime_type == "image/png"
        assert base64.b64decode(request.image.data) == png_bytes
        assert request.image.size_bytes == len(png_bytes)
        assert request.image.data_url.startswith("data:image/png;base64,")
        assert not capture.image_attached

    @pytest.mark.asyncio
    async def test_file_removed_before_submit(self, png_file):
        capture = InputCapture()
        capture.attach_image_file(png_file)
        png_file.unlink()

        with pytest.raises(ValidationError, match="Could not read"):
            await capture.take(LanguageMode.ENGLISH)


class TestVoiceInput:
    """Tests for voice transcript streams."""

    @pytest.mark.asyncio
    async def test_transcripts_overwrite_buffer(self):
        capture = InputCapture()
        capture.set_text("typed text")
        recognizer = ScriptedRecognizer(["What", "What is", "What is Ohm's law"])

        task = capture.listen(recognizer, LanguageMode.HINGLISH)
        await task

        assert capture.text == "What is Ohm's law"
        assert recognizer.locales == ["hi-IN"]
        assert not capture.listening

    @pytest.mark.asyncio
    async def test_typed_edit_after_voice_update_wins(self):
        capture = InputCapture()
        updates: asyncio.Queue[str | None] = asyncio.Queue()

        async def stream():
            while (item := await updates.get()) is not None:
                yield item

        capture.start_voice(stream())
        await updates.put("voice words")
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert capture.text == "voice words"

        capture.set_text("typed correction")
        assert capture.text == "typed correction"

        await updates.put("later voice words")
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert capture.text == "later voice words"

        capture.stop_voice()

    @pytest.mark.asyncio
    async def test_new_voice_session_cancels_previous(self):
        capture = InputCapture()
        first = capture.start_voice(ScriptedRecognizer(["old"], interval=10).listen("en-US"))
        second = capture.start_voice(ScriptedRecognizer(["new"]).listen("en-US"))

        await second
        with pytest.raises(asyncio.CancelledError):
            await first
        assert capture.text == "new"

    @pytest.mark.asyncio
    async def test_submit_stops_voice(self):
        capture = InputCapture()
        recognizer = ScriptedRecognizer(["Explain", "Explain diodes"], interval=0.05)
        capture.listen(recognizer, LanguageMode.ENGLISH)
        capture.set_text("Explain")

        request = await capture.take(LanguageMode.ENGLISH)
        await asyncio.sleep(0.15)

        assert request.text == "Explain"
        assert not capture.listening
        assert capture.text == ""

    def test_unavailable_recognizer_rejected(self):
        class NoMicrophone(ScriptedRecognizer):
            @property
            def is_available(self) -> bool:
                return False

        with pytest.raises(ValidationError, match="not supported"):
            InputCapture().listen(NoMicrophone([]), LanguageMode.ENGLISH)
