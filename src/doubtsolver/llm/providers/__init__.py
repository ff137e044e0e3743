from .gemini import GeminiProvider
from .openai import OpenAIProvider
from .proxy import ProxyProvider

__all__ = ["GeminiProvider", "OpenAIProvider", "ProxyProvider"]
