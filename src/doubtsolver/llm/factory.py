from typing import Any

from .base import AnswerProvider
from .providers import GeminiProvider, OpenAIProvider, ProxyProvider


def create_answer_provider(provider: str, **config: Any) -> AnswerProvider:
    """Create an answer provider instance.

    This factory function hides the instantiation logic for different backends.

    Args:
        provider: Provider type ('openai', 'gemini', 'proxy')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str | None (None yields a missing-credential failure on resolve)
                - model: str (default: 'gpt-4o')
                - base_url: str | None
                - organization: str | None
            For Gemini:
                - api_key: str | None
                - model: str (default: 'gemini-2.5-flash')
            For Proxy:
                - api_url: str (default: 'http://localhost:5000')
                - timeout: float (default: 120.0)

    Returns:
        Initialized answer provider instance

    Raises:
        ValueError: If provider type is not supported

    Examples:
        >>> provider = create_answer_provider(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-2.5-flash"
        ... )

        >>> provider = create_answer_provider(
        ...     "proxy",
        ...     api_url="http://localhost:5000"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "openai":
        return OpenAIProvider(**config)

    if provider_lower == "gemini":
        return GeminiProvider(**config)

    if provider_lower == "proxy":
        if "api_key" in config:
            raise TypeError("Proxy provider does not take an 'api_key'; the server holds it")
        return ProxyProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openai', 'gemini', 'proxy'"
    )
