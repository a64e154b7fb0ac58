import os
import uuid
from typing import Any, ClassVar

from openai import AsyncOpenAI

from shared.enums import VoiceId

from .base import SpeechEngine


class OpenAISpeechEngine(SpeechEngine):
    """OpenAI TTS implementation using their text-to-speech API."""

    SUPPORTED_MODELS: ClassVar[list[str]] = ["tts-1", "tts-1-hd"]
    SUPPORTED_FORMATS: ClassVar[list[str]] = ["mp3", "opus", "aac", "flac", "wav"]
    VOICE_MAP: ClassVar[dict[VoiceId, str]] = {
        VoiceId.NEUTRAL: "alloy",
        VoiceId.MALE_STANDARD: "echo",
        VoiceId.MALE_ACCENTED: "fable",
        VoiceId.MALE_DEEP: "onyx",
        VoiceId.FEMALE_STANDARD: "nova",
        VoiceId.FEMALE_ALT: "shimmer",
    }

    def __init__(self, api_key: str, media_root: str | None = None, media_base_url: str = "/media"):
        """
        Initialize OpenAI TTS engine.

        Args:
            api_key: OpenAI API key
            media_root: Directory generated audio is written to
            media_base_url: Public URL prefix for files in media_root
        """
        self.api_key = api_key
        self.client = AsyncOpenAI(api_key=api_key)
        self.media_root = media_root
        self.media_base_url = media_base_url.rstrip("/")

    async def synthesize(
        self,
        text: str,
        voice: VoiceId = VoiceId.NEUTRAL,
        output_format: str = "mp3",
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Synthesize speech from text using OpenAI TTS.

        Args:
            text: Text to convert to speech
            voice: Editor voice identifier, mapped onto an OpenAI voice
            output_format: Audio format (mp3, opus, aac, flac, wav)
            **kwargs: Additional options
                - model: TTS model to use ("tts-1" or "tts-1-hd")

        Returns:
            Dictionary with audio file information
        """
        openai_voice = self.VOICE_MAP.get(VoiceId(voice), "alloy")

        if output_format not in self.SUPPORTED_FORMATS:
            output_format = "mp3"

        model = kwargs.get("model", "tts-1")
        if model not in self.SUPPORTED_MODELS:
            model = "tts-1"

        try:
            response = await self.client.audio.speech.create(
                model=model,
                voice=openai_voice,
                input=text,
                response_format=output_format,
            )

            output_dir = self.media_root or os.environ.get("MEDIA_ROOT", "./media")
            os.makedirs(output_dir, exist_ok=True)

            filename = f"tts_{uuid.uuid4().hex}.{output_format}"
            file_path = os.path.join(output_dir, filename)

            with open(file_path, "wb") as f:
                f.write(response.content)

            return {
                "audio_url": f"{self.media_base_url}/{filename}",
                "file_path": file_path,
                "voice_used": openai_voice,
                "output_format": output_format,
                "model": model,
            }

        except Exception as e:
            raise RuntimeError(f"OpenAI TTS synthesis failed: {e!s}") from e
