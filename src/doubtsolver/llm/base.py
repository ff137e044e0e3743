import logging
from abc import ABC, abstractmethod
from typing import Any

from ..capture.models import PendingRequest
from ..config import IMAGE_ONLY_PROMPT, LanguageMode
from ..prompts import build_question_prompt, get_tutor_prompt
from .models import AnswerResult, ChatMessage, Failure, FailureKind, Success

logger = logging.getLogger(__name__)


def classify_status(status_code: int | None, detail: str) -> Failure:
    """Map an HTTP status from a provider onto a failure kind."""
    if status_code in (401, 403):
        return Failure(kind=FailureKind.AUTH, detail=detail)
    return Failure(kind=FailureKind.PROVIDER, detail=detail)


class AnswerProvider(ABC):
    """Abstract base class for answer providers.

    This module hides the design decision of which generative AI backend
    answers a doubt. Implementations handle provider-specific details like:
    - API client setup and authentication
    - Request format conversion (text-only vs. text + image)
    - Mapping provider errors onto FailureKind

    `resolve` never raises for provider problems: every outcome is returned
    as a Success or a Failure. A single attempt is made per call.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            result = await provider.resolve(request)
    """

    #: Name of the setting holding the credential, None if none is needed
    credential_name: str | None = None

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider identifier ('openai', 'gemini', 'proxy')."""

    @property
    def has_credential(self) -> bool:
        return self.credential_name is None or bool(self._api_key)

    async def resolve(
        self,
        request: PendingRequest,
        language: LanguageMode | None = None
    ) -> AnswerResult:
        """Resolve a pending request into an answer or a classified failure.

        Args:
            request: The normalized doubt
            language: Language mode override (defaults to the request's)

        Returns:
            Success with the Markdown answer, or Failure
        """
        language = language or request.language

        if not self.has_credential:
            logger.warning("%s provider has no credential configured", self.name)
            return Failure(
                kind=FailureKind.MISSING_CREDENTIAL,
                detail="Missing API Key",
                credential_name=self.credential_name,
            )

        try:
            success = await self._generate(request, language)
        except Exception as e:
            failure = self.classify_error(e)
            logger.warning(
                "%s provider failed (%s): %s",
                self.name, failure.kind.value, self._redact(str(e))
            )
            return failure.model_copy(update={"detail": self._redact(failure.detail)})

        if not success.text.strip():
            return Failure(kind=FailureKind.PROVIDER, detail="Empty response from provider")
        return success

    def build_messages(self, request: PendingRequest, language: LanguageMode) -> list[ChatMessage]:
        """Build the tutor instruction payload for a request."""
        question = request.text.strip() or IMAGE_ONLY_PROMPT
        return [
            ChatMessage(role="system", content=get_tutor_prompt(language)),
            ChatMessage(
                role="user",
                content=build_question_prompt(question, request.context),
                image=request.image,
            ),
        ]

    def classify_error(self, error: Exception) -> Failure:
        """Map a provider exception onto a Failure.

        Adapters override this for SDK-specific exceptions and fall back here.
        """
        return Failure(
            kind=FailureKind.PROVIDER,
            detail=f"{type(error).__name__}: {error}"
        )

    def _redact(self, text: str) -> str:
        if self._api_key and self._api_key in text:
            return text.replace(self._api_key, "***")
        return text

    @abstractmethod
    async def _generate(self, request: PendingRequest, language: LanguageMode) -> Success:
        """Issue the backend call.

        Raises:
            Exception: Provider-specific errors, classified by classify_error
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "AnswerProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
