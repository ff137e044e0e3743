"""Pytest configuration and shared fixtures."""
import asyncio
import os
from pathlib import Path

import pytest

from doubtsolver.capture.models import PendingRequest
from doubtsolver.config import LanguageMode
from doubtsolver.llm import AnswerProvider, Failure, FailureKind, Success
from doubtsolver.notes import create_note_store

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


class FakeProvider(AnswerProvider):
    """Answer provider that returns scripted results and records requests.

    If `gate` is set, each call waits for it, so tests can observe the
    session while an exchange is in flight.
    """

    def __init__(self, results=None, credential_name=None, api_key=None):
        super().__init__(api_key)
        self.credential_name = credential_name
        self._results = list(results or [Success(text="A transistor is...")])
        self.requests: list[PendingRequest] = []
        self.languages: list[LanguageMode] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    async def _generate(self, request, language):
        self.requests.append(request)
        self.languages.append(language)
        if self.gate is not None:
            await self.gate.wait()
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        if isinstance(result, Failure):
            raise _ScriptedFailure(result)
        return result

    def classify_error(self, error):
        if isinstance(error, _ScriptedFailure):
            return error.failure
        return super().classify_error(error)

    async def close(self) -> None:
        self.closed = True


class _ScriptedFailure(Exception):
    def __init__(self, failure: Failure):
        super().__init__(failure.detail)
        self.failure = failure


@pytest.fixture
def fake_provider():
    """Provider that answers every doubt with 'A transistor is...'."""
    return FakeProvider()


@pytest.fixture
def failing_provider():
    """Provider that fails with a transport error."""
    return FakeProvider([Failure(kind=FailureKind.TRANSPORT, detail="Connection refused")])


@pytest.fixture
def memory_store():
    """Return an in-memory note store."""
    return create_note_store("memory")


@pytest.fixture
def png_bytes() -> bytes:
    """Return the bytes of a 1x1 PNG."""
    return PNG_BYTES


@pytest.fixture
def png_file(tmp_path) -> Path:
    """Create a small PNG image file."""
    path = tmp_path / "circuit.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def large_image_file(tmp_path) -> Path:
    """Create a 6MB file with a .png name."""
    path = tmp_path / "huge.png"
    path.write_bytes(PNG_BYTES + b"\0" * (6 * 1024 * 1024))
    return path


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "gemini": os.getenv("GEMINI_API_KEY"),
    }


@pytest.fixture
def make_provider():
    """Return a factory for scripted providers."""
    return FakeProvider
