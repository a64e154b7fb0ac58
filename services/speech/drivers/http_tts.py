from typing import Any

import aiohttp

from shared.enums import VoiceId
from shared.utils import setup_logging

from .base import SpeechEngine

logger = setup_logging("speech-http-driver")


class HTTPSpeechEngine(SpeechEngine):
    """Speech engine backed by a remote synthesis endpoint.

    The endpoint receives ``{"text", "voice", "output_format"}`` and answers
    with JSON containing at least ``audio_url``.
    """

    def __init__(self, api_base: str, timeout: int = 60):
        self.api_base = api_base
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def synthesize(
        self,
        text: str,
        voice: VoiceId = VoiceId.NEUTRAL,
        output_format: str = "mp3",
        **kwargs: Any,
    ) -> dict[str, Any]:
        url = f"{self.api_base.rstrip('/')}/synthesize"
        payload = {"text": text, "voice": VoiceId(voice).value, "output_format": output_format}

        logger.info(f"Calling speech endpoint {url} (voice={payload['voice']}, chars={len(text)})")
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(url, json=payload) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.error(f"Speech API error {response.status}: {body[:300]}")
                    raise RuntimeError(f"Speech API returned status {response.status}")
                result = await response.json()

        audio_url = result.get("audio_url") or result.get("url")
        if not audio_url:
            raise RuntimeError("Speech API response did not include an audio URL")

        return {
            "audio_url": audio_url,
            "voice_used": payload["voice"],
            "output_format": output_format,
            # Duration hints are reported for diagnostics only.
            "duration": result.get("duration"),
        }
