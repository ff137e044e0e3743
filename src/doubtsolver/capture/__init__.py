"""Input capture module: text, voice and image input normalization."""

from .input_capture import InputCapture
from .models import EncodedImage, PendingRequest
from .voice import ScriptedRecognizer, SpeechRecognizer

__all__ = [
    "EncodedImage",
    "InputCapture",
    "PendingRequest",
    "ScriptedRecognizer",
    "SpeechRecognizer",
]
