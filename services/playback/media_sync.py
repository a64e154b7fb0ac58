"""Reconciliation of external audio/video elements with the playback clock."""

from abc import ABC, abstractmethod

from shared.config import config
from shared.enums import MediaReadyState
from shared.models import MediaSyncTarget
from shared.utils import clamp, setup_logging

logger = setup_logging("media-sync")


class MediaElement(ABC):
    """A media player owned outside the editor (audio or video)."""

    @property
    @abstractmethod
    def ready_state(self) -> MediaReadyState:
        """How much media data is available."""

    @property
    @abstractmethod
    def current_time(self) -> float:
        pass

    @current_time.setter
    @abstractmethod
    def current_time(self, value: float) -> None:
        pass

    @property
    @abstractmethod
    def paused(self) -> bool:
        pass

    @abstractmethod
    def play(self) -> None:
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def load(self, source: str) -> None:
        """Replace the element's media source."""


def clamp_offset(offset: float, bound: float | None = None) -> float:
    """Limit an audio offset to [-bound, bound]."""
    limit = float(bound if bound is not None else config.get_editor_value("sync.max_audio_offset", 2.0))
    return clamp(float(offset), -limit, limit)


class MediaSyncCoordinator:
    """Level-triggered reconciler slaving media elements to the clock.

    ``reconcile`` is re-applied after every relevant state change. Audio and
    video are handled independently; a failure on one is logged and retried
    on the next change without affecting the other.
    """

    def __init__(self, max_audio_offset: float | None = None) -> None:
        self.max_audio_offset = float(
            max_audio_offset if max_audio_offset is not None
            else config.get_editor_value("sync.max_audio_offset", 2.0)
        )
        self.audio: MediaElement | None = None
        self.video: MediaElement | None = None
        self.last_target = MediaSyncTarget()

    def attach_audio(self, element: MediaElement | None) -> None:
        self.audio = element

    def attach_video(self, element: MediaElement | None) -> None:
        self.video = element

    def reconcile(
        self,
        current_time: float,
        is_playing: bool,
        audio_offset: float = 0.0,
        sync_video: bool = True,
    ) -> MediaSyncTarget:
        """Compute the media targets and push them into attached elements.

        With ``sync_video`` off the video element is left untouched (there is
        no video source to follow).
        """
        offset = clamp_offset(audio_offset, self.max_audio_offset)
        audio_time = max(0.0, current_time + offset)

        video_applied = self._reconcile_video(current_time, is_playing) if sync_video else False
        audio_applied = self._reconcile_audio(audio_time, is_playing)

        self.last_target = MediaSyncTarget(
            video_time=current_time,
            audio_time=audio_time,
            is_playing=is_playing,
            audio_offset=offset,
            video_applied=video_applied,
            audio_applied=audio_applied,
        )
        return self.last_target

    def _reconcile_video(self, current_time: float, is_playing: bool) -> bool:
        video = self.video
        if video is None:
            return False
        try:
            video.current_time = current_time
            self._mirror_play_state(video, is_playing)
            return True
        except Exception as e:
            logger.warning(f"Video reconciliation failed, retrying on next change: {e}")
            return False

    def _reconcile_audio(self, audio_time: float, is_playing: bool) -> bool:
        audio = self.audio
        if audio is None:
            return False
        try:
            if audio.ready_state < MediaReadyState.HAVE_CURRENT_DATA:
                logger.debug("Audio not ready to seek yet")
                return False
            audio.current_time = audio_time
            self._mirror_play_state(audio, is_playing)
            return True
        except Exception as e:
            logger.warning(f"Audio reconciliation failed, retrying on next change: {e}")
            return False

    @staticmethod
    def _mirror_play_state(element: MediaElement, is_playing: bool) -> None:
        if is_playing and element.paused:
            element.play()
        elif not is_playing and not element.paused:
            element.pause()
