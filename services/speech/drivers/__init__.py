"""Speech synthesis driver implementations"""

from .base import SpeechEngine
from .http_tts import HTTPSpeechEngine
from .openai_tts import OpenAISpeechEngine

__all__ = ["HTTPSpeechEngine", "OpenAISpeechEngine", "SpeechEngine"]
