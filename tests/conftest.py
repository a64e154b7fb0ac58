import asyncio
import sys
from pathlib import Path
from typing import Callable, Generator

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from services.captions.generator import CaptionGenerator
from services.editor.notifier import EditorNotifier
from services.editor.session import EditorSession
from services.playback.clock import PlaybackClock
from services.playback.media_sync import MediaElement, MediaSyncCoordinator
from services.speech.service import SpeechSynthesisError
from services.storage.service import MediaUploadError
from shared.enums import MediaReadyState, VoiceId
from shared.models import NarrationAudio, UploadedVideo
from shared.utils import config as service_config, ensure_directory


class FakeMediaElement(MediaElement):
    """In-memory stand-in for an audio or video player."""

    def __init__(self, ready_state: MediaReadyState = MediaReadyState.HAVE_ENOUGH_DATA, fail: bool = False):
        self._ready_state = ready_state
        self._current_time = 0.0
        self._paused = True
        self.fail = fail
        self.sources: list[str] = []
        self.seeks: list[float] = []

    @property
    def ready_state(self) -> MediaReadyState:
        return self._ready_state

    @ready_state.setter
    def ready_state(self, value: MediaReadyState) -> None:
        self._ready_state = value

    @property
    def current_time(self) -> float:
        return self._current_time

    @current_time.setter
    def current_time(self, value: float) -> None:
        if self.fail:
            raise RuntimeError("media element not attached")
        self._current_time = value
        self.seeks.append(value)

    @property
    def paused(self) -> bool:
        return self._paused

    def play(self) -> None:
        self._paused = False

    def pause(self) -> None:
        self._paused = True

    def load(self, source: str) -> None:
        self.sources.append(source)


class StubSpeechService:
    """Speech service returning a fixed measured duration."""

    def __init__(self, duration: float = 3.0, media_root: Path | None = None) -> None:
        self.duration = duration
        self.media_root = media_root
        self.fail = False
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, VoiceId]] = []

    async def synthesize(self, text: str, voice: VoiceId = VoiceId.NEUTRAL) -> NarrationAudio:
        self.calls.append((text, voice))
        filename = f"narration_{len(self.calls)}.mp3"
        gate = self.gates.get(text)
        if gate is not None:
            await gate.wait()
        if self.fail:
            raise SpeechSynthesisError("speech backend unavailable")
        file_path = None
        if self.media_root is not None:
            file_path = self.media_root / filename
            file_path.write_bytes(b"audio")
        return NarrationAudio(
            audio_url=f"/media/{filename}",
            duration=self.duration,
            voice=voice,
            file_path=str(file_path) if file_path else None,
        )


class StubStorageService:
    def __init__(self, duration: float | None = 30.0) -> None:
        self.duration = duration
        self.fail = False

    async def store_video(self, data: bytes, filename: str, content_type: str | None) -> UploadedVideo:
        if self.fail or not data:
            raise MediaUploadError("storage unavailable")
        return UploadedVideo(url=f"/media/uploads/{filename}", filename=filename, duration=self.duration)


@pytest.fixture(autouse=True)
def test_environment(tmp_path: Path) -> Generator:
    """Isolate the media root per test."""
    media_root = tmp_path / "media"
    ensure_directory(str(media_root))

    original_media_root = service_config.get("media_root")
    service_config.set("media_root", str(media_root))
    try:
        yield media_root
    finally:
        service_config.set("media_root", original_media_root)


@pytest.fixture
def media_element() -> Callable[..., FakeMediaElement]:
    """Factory for fake media elements."""
    return FakeMediaElement


@pytest.fixture
def speech_service(test_environment: Path) -> StubSpeechService:
    return StubSpeechService(media_root=test_environment)


@pytest.fixture
def storage_service() -> StubStorageService:
    return StubStorageService()


@pytest.fixture
def editor_session(speech_service: StubSpeechService, storage_service: StubStorageService) -> EditorSession:
    """Session wired to stub collaborators with the default timeline settings."""
    return EditorSession(
        clock=PlaybackClock(duration=15.0, tick_step=0.1, tick_interval=0.01),
        media_sync=MediaSyncCoordinator(max_audio_offset=2.0),
        caption_generator=CaptionGenerator(speech_service=speech_service),
        storage_service=storage_service,
        notifier=EditorNotifier(),
        audio_buffer=1.0,
    )
