from abc import ABC, abstractmethod
from typing import Any

from shared.enums import VoiceId


class SpeechEngine(ABC):
    """Abstract base class for speech synthesis engines."""

    @abstractmethod
    async def synthesize(
        self,
        text: str,
        voice: VoiceId = VoiceId.NEUTRAL,
        output_format: str = "mp3",
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Synthesize speech from text. Returns a dict with audio_url and optionally file_path."""
        pass
