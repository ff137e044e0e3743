from .base import AnswerProvider, classify_status
from .factory import create_answer_provider
from .models import AnswerResult, ChatMessage, Failure, FailureKind, Success
from .providers import GeminiProvider, OpenAIProvider, ProxyProvider

__all__ = [
    "AnswerProvider",
    "classify_status",
    "create_answer_provider",
    "AnswerResult",
    "ChatMessage",
    "Failure",
    "FailureKind",
    "Success",
    "GeminiProvider",
    "OpenAIProvider",
    "ProxyProvider",
]
