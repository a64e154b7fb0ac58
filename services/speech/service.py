"""Application-level speech synthesis wrapper."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlparse
from uuid import uuid4

from services.speech.drivers import HTTPSpeechEngine, OpenAISpeechEngine, SpeechEngine
from shared.config import config
from shared.enums import VoiceId
from shared.media_utils import download_media, measure_media_duration, remove_media_file
from shared.models import NarrationAudio
from shared.utils import ensure_directory, is_positive_duration, setup_logging

logger = setup_logging("speech-service")


class SpeechSynthesisError(Exception):
    """Raised when narration audio cannot be produced or measured."""


def build_default_drivers() -> dict[str, SpeechEngine]:
    """Instantiate the drivers enabled by configuration."""
    drivers: dict[str, SpeechEngine] = {
        "http": HTTPSpeechEngine(
            config.get("speech_api_base", "http://localhost:8005"),
            timeout=config.get("speech_timeout", 60),
        ),
    }
    api_key = config.get("openai_api_key")
    if api_key:
        drivers["openai"] = OpenAISpeechEngine(
            api_key,
            media_root=config.get("media_root"),
            media_base_url=config.get("media_base_url", "/media"),
        )
    return drivers


class SpeechService:
    """Synthesize narration and measure the playable duration of the result.

    Duration hints returned by drivers are never trusted; the audio resource
    is probed once it is available locally.
    """

    def __init__(
        self,
        drivers: dict[str, SpeechEngine] | None = None,
        default_driver: str | None = None,
        media_root: str | Path | None = None,
    ) -> None:
        self.drivers = drivers if drivers is not None else build_default_drivers()
        self.default_driver = default_driver or config.get("speech_driver", "http")
        self.media_root = Path(media_root or config.get("media_root", "./media"))
        self.media_base_url = config.get("media_base_url", "/media").rstrip("/")
        self.timeout = config.get("speech_timeout", 60)

    async def synthesize(
        self, text: str, voice: VoiceId = VoiceId.NEUTRAL, driver_name: str | None = None
    ) -> NarrationAudio:
        driver_id = driver_name or self.default_driver
        driver = self.drivers.get(driver_id)
        if not driver:
            raise SpeechSynthesisError(f"Speech driver '{driver_id}' is not configured")

        logger.info(f"Synthesizing {len(text)} characters with driver {driver_id} (voice={VoiceId(voice).value})")

        try:
            result = await driver.synthesize(text=text, voice=voice)
        except Exception as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise SpeechSynthesisError(f"Speech synthesis failed: {e!s}") from e

        audio_url = result.get("audio_url")
        if not audio_url:
            raise SpeechSynthesisError("Speech driver returned no audio")

        file_path, owned = await self._localize(result)
        duration = await measure_media_duration(str(file_path))
        if not is_positive_duration(duration):
            if owned:
                remove_media_file(file_path)
            raise SpeechSynthesisError(f"Narration audio has no usable duration ({duration!r})")

        logger.info(f"Narration ready at {audio_url} ({duration:.3f}s)")
        return NarrationAudio(
            audio_url=audio_url,
            duration=duration,
            voice=voice,
            file_path=str(file_path) if owned else None,
        )

    async def _localize(self, result: dict[str, Any]) -> tuple[Path, bool]:
        """Return a local path for the synthesized audio, downloading it if needed.

        The flag tells whether the file was written for this request (by the
        driver or by the download) and may be removed on failure.
        """
        if result.get("file_path"):
            return Path(result["file_path"]), True

        audio_url: str = result["audio_url"]
        parsed = urlparse(audio_url)
        if not parsed.scheme:
            if audio_url.startswith(f"{self.media_base_url}/"):
                return self.media_root / audio_url[len(self.media_base_url) + 1:], False
            raise SpeechSynthesisError(f"Cannot resolve narration audio location {audio_url!r}")

        suffix = Path(parsed.path).suffix or f".{result.get('output_format', 'mp3')}"
        narration_dir = self.media_root / "narration"
        ensure_directory(str(narration_dir))
        destination = narration_dir / f"narration_{uuid4().hex}{suffix}"
        try:
            return await download_media(audio_url, destination, timeout=self.timeout), True
        except Exception as e:
            remove_media_file(destination)
            raise SpeechSynthesisError(f"Failed to fetch narration audio: {e!s}") from e
