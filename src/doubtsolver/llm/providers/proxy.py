"""Answer provider backed by the doubtsolver HTTP proxy.

The proxy holds the provider credential server-side, so clients in this
mode need no API key of their own.
"""

from typing import Any

import httpx

from ...capture.models import PendingRequest
from ...config import DEFAULT_API_URL, IMAGE_ONLY_PROMPT, LanguageMode
from ..base import AnswerProvider, classify_status
from ..models import Failure, FailureKind, Success


class ProxyResponseError(Exception):
    """The proxy answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ProxyProvider(AnswerProvider):
    """Calls `POST /api/solve` on a doubtsolver server.

    Hidden design decisions:
    - HTTP client lifecycle (httpx.AsyncClient)
    - Wire format of the solve endpoint
    - Mapping HTTP status codes onto FailureKind
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
        **client_kwargs: Any
    ):
        """Initialize proxy provider.

        Args:
            api_url: Base URL of the doubtsolver server
            timeout: Request timeout in seconds
            client: Preconfigured client (tests pass one with a mock transport)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        super().__init__()
        self._api_url = api_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._api_url,
            timeout=timeout,
            **client_kwargs
        )

    @property
    def name(self) -> str:
        return "proxy"

    @property
    def api_url(self) -> str:
        return self._api_url

    async def _generate(self, request: PendingRequest, language: LanguageMode) -> Success:
        payload: dict[str, Any] = {
            "question": request.text.strip() or IMAGE_ONLY_PROMPT,
            "language": language.value,
        }
        if request.context:
            payload["context"] = request.context
        if request.image is not None:
            payload["image"] = request.image.data_url

        response = await self._client.post("/api/solve", json=payload)

        if response.status_code != 200:
            raise ProxyResponseError(response.status_code, _error_message(response))

        return Success(text=response.json().get("answer") or "", model="proxy")

    def classify_error(self, error: Exception) -> Failure:
        if isinstance(error, ProxyResponseError):
            return classify_status(error.status_code, str(error))
        if isinstance(error, httpx.TransportError):
            return Failure(
                kind=FailureKind.TRANSPORT,
                detail=f"Could not reach {self._api_url}: {type(error).__name__}"
            )
        return super().classify_error(error)

    async def close(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase
