"""Google Gemini answer provider implementation.

Uses the official Google GenAI SDK for async content generation.
Reference: https://github.com/googleapis/python-genai
"""

import base64
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from ...capture.models import PendingRequest
from ...config import DEFAULT_MAX_TOKENS, GEMINI_DEFAULT_MODEL, LanguageMode
from ..base import AnswerProvider, classify_status
from ..models import ChatMessage, Failure, FailureKind, Success

# Relaxed so that circuit, chemistry and safety-engineering questions are not blocked
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]

# Gemini answers a bad key with 400 INVALID_ARGUMENT rather than 401
_INVALID_KEY_MARKER = "API key not valid"


class GeminiProvider(AnswerProvider):
    """Google Gemini answer provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - Message format conversion (text parts and inline image bytes)
    - Relaxed safety settings
    - Error classification for google-genai API errors
    """

    credential_name = "GEMINI_API_KEY"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = GEMINI_DEFAULT_MODEL,
        max_tokens: int | None = DEFAULT_MAX_TOKENS,
        temperature: float = 0.7,
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key (None resolves to a missing-credential failure)
            model: Default model (gemini-2.5-flash, gemini-2.5-pro)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **client_kwargs: Additional kwargs for Client
        """
        super().__init__(api_key)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client: genai.Client | None = None
        if api_key:
            self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def _convert_messages(self, messages: list[ChatMessage]) -> tuple[str | None, list[types.Content]]:
        """Convert ChatMessage list to Gemini format.

        Returns:
            Tuple of (system_instruction, contents)
        """
        system_instruction = None
        contents = []

        for msg in messages:
            if msg.role == "system":
                system_instruction = msg.content
                continue

            parts = [types.Part(text=msg.content)]
            if msg.image is not None:
                parts.append(types.Part.from_bytes(
                    data=base64.b64decode(msg.image.data),
                    mime_type=msg.image.mime_type
                ))
            contents.append(types.Content(
                role="model" if msg.role == "assistant" else "user",
                parts=parts
            ))

        return system_instruction, contents

    def _extract_content(self, response) -> str:
        """Extract text content from Gemini response, handling empty responses."""
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                if texts:
                    return "".join(texts)

        # Fallback to response.text (may raise or return None)
        try:
            return response.text or ""
        except (ValueError, AttributeError):
            return ""

    async def _generate(self, request: PendingRequest, language: LanguageMode) -> Success:
        system_instruction, contents = self._convert_messages(
            self.build_messages(request, language)
        )

        config = types.GenerateContentConfig(
            temperature=self._temperature,
            system_instruction=system_instruction,
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        if self._max_tokens is not None:
            config.max_output_tokens = self._max_tokens

        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=contents,
            config=config
        )

        usage = None
        if response.usage_metadata:
            usage = {
                "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
                "completion_tokens": response.usage_metadata.candidates_token_count or 0,
                "total_tokens": response.usage_metadata.total_token_count or 0
            }

        return Success(
            text=self._extract_content(response),
            model=self._model,
            usage=usage
        )

    def classify_error(self, error: Exception) -> Failure:
        if isinstance(error, errors.APIError):
            message = error.message or str(error)
            if _INVALID_KEY_MARKER in message:
                return Failure(
                    kind=FailureKind.AUTH,
                    detail=message,
                    credential_name=self.credential_name,
                )
            failure = classify_status(error.code, message)
            return failure.model_copy(update={"credential_name": self.credential_name})
        if isinstance(error, httpx.TransportError):
            return Failure(kind=FailureKind.TRANSPORT, detail=str(error) or type(error).__name__)
        return super().classify_error(error)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
