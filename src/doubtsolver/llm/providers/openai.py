from typing import Any

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    PermissionDeniedError,
)

from ...capture.models import PendingRequest
from ...config import DEFAULT_MAX_TOKENS, OPENAI_DEFAULT_MODEL, LanguageMode
from ..base import AnswerProvider, classify_status
from ..models import ChatMessage, Failure, FailureKind, Success


def _to_openai_message(msg: ChatMessage) -> dict[str, Any]:
    """Convert a chat message to Chat Completions format.

    Messages carrying an image become a list of content parts so that
    vision-capable models receive both the text and the image.
    """
    if msg.image is None:
        return {"role": msg.role, "content": msg.content}

    return {
        "role": msg.role,
        "content": [
            {"type": "text", "text": msg.content},
            {"type": "image_url", "image_url": {"url": msg.image.data_url}},
        ],
    }


class OpenAIProvider(AnswerProvider):
    """OpenAI answer provider implementation.

    Hidden design decisions:
    - OpenAI API client initialization
    - Message format conversion (text parts and image_url parts)
    - Authentication mechanism
    - Error classification for openai SDK exceptions
    """

    credential_name = "OPENAI_API_KEY"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = OPENAI_DEFAULT_MODEL,
        base_url: str | None = None,
        organization: str | None = None,
        max_tokens: int | None = DEFAULT_MAX_TOKENS,
        temperature: float = 0.7,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (None resolves to a missing-credential failure)
            model: Default model to use; must be vision-capable for image doubts
            base_url: Optional custom API base URL
            organization: Optional organization ID
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        super().__init__(api_key)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client: AsyncOpenAI | None = None
        # One attempt per submission; the student resubmits manually
        client_kwargs.setdefault("max_retries", 0)
        # AsyncOpenAI refuses to start without a key
        if api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                organization=organization,
                **client_kwargs
            )

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def _generate(self, request: PendingRequest, language: LanguageMode) -> Success:
        messages = [_to_openai_message(m) for m in self.build_messages(request, language)]

        request_params: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
        }
        if self._max_tokens is not None:
            request_params["max_tokens"] = self._max_tokens

        completion = await self._client.chat.completions.create(**request_params)

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return Success(
            text=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage
        )

    def classify_error(self, error: Exception) -> Failure:
        if isinstance(error, (AuthenticationError, PermissionDeniedError)):
            return Failure(
                kind=FailureKind.AUTH,
                detail=error.message,
                credential_name=self.credential_name,
            )
        # APITimeoutError is a subclass of APIConnectionError
        if isinstance(error, APIConnectionError):
            return Failure(kind=FailureKind.TRANSPORT, detail=error.message)
        if isinstance(error, APIStatusError):
            failure = classify_status(error.status_code, error.message)
            return failure.model_copy(update={"credential_name": self.credential_name})
        return super().classify_error(error)

    async def close(self) -> None:
        """Close the OpenAI client."""
        if self._client is not None:
            await self._client.close()
