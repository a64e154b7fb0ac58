"""Editor session: timeline state, mutators and media reconciliation."""

import asyncio
import math
from typing import Any

from services.captions.generator import CaptionGeneration, CaptionGenerator
from services.editor.notifier import EditorNotifier
from services.playback.clock import PlaybackClock
from services.playback.media_sync import MediaElement, MediaSyncCoordinator, clamp_offset
from services.playback.visibility import resolve_overlays
from services.storage.service import MediaStorageService
from shared.config import config
from shared.enums import BackgroundKind, ElementOrigin, VoiceId
from shared.models import (
    BACKGROUND_OPTIONS,
    BackgroundOption,
    CaptionSegment,
    ManualTextElement,
    MediaSyncTarget,
    NarrationAudio,
    TextElementUpdate,
    TimelineSnapshot,
    UploadedVideo,
    VisibleOverlays,
    WordElement,
)
from shared.media_utils import remove_media_file
from shared.utils import setup_logging

logger = setup_logging("editor-session")

CUSTOM_VIDEO_BACKGROUND = "custom-video"


class EditorSession:
    """Single-user editing session driven by one playback clock.

    Every mutator that touches the current time, the play state or the audio
    offset re-runs media reconciliation. Collections are replaced wholesale
    rather than mutated, so readers always see a complete collection.
    """

    def __init__(
        self,
        clock: PlaybackClock | None = None,
        media_sync: MediaSyncCoordinator | None = None,
        caption_generator: CaptionGenerator | None = None,
        storage_service: MediaStorageService | None = None,
        notifier: EditorNotifier | None = None,
        audio_buffer: float | None = None,
    ) -> None:
        self.clock = clock or PlaybackClock()
        self.media_sync = media_sync or MediaSyncCoordinator()
        self.notifier = notifier or EditorNotifier()
        self._caption_generator = caption_generator
        self._storage_service = storage_service
        self.audio_buffer = float(
            audio_buffer if audio_buffer is not None
            else config.get_editor_value("timeline.audio_buffer", 1.0)
        )

        self.audio_offset = 0.0
        self.text_elements: list[ManualTextElement] = []
        self.word_elements: list[WordElement] = []
        self.segments: list[CaptionSegment] = []
        self.selected_element_id: str | None = None
        self.background: BackgroundOption = BACKGROUND_OPTIONS[0]
        self.custom_video: UploadedVideo | None = None
        self.narration: NarrationAudio | None = None

        self.is_generating = False
        self.is_uploading = False
        # Latest generation token issued; results carrying an older token are dropped.
        self.generation = 0
        self.published_generation = 0

        self._clock_task: asyncio.Task | None = None
        self._push_tasks: set[asyncio.Task] = set()

    @property
    def caption_generator(self) -> CaptionGenerator:
        """Lazy load caption generator."""
        if self._caption_generator is None:
            self._caption_generator = CaptionGenerator()
        return self._caption_generator

    @caption_generator.setter
    def caption_generator(self, generator: CaptionGenerator) -> None:
        self._caption_generator = generator

    @property
    def storage_service(self) -> MediaStorageService:
        """Lazy load media storage service."""
        if self._storage_service is None:
            self._storage_service = MediaStorageService()
        return self._storage_service

    @storage_service.setter
    def storage_service(self, service: MediaStorageService) -> None:
        self._storage_service = service

    # Text elements

    def get_text_element(self, element_id: str) -> ManualTextElement | None:
        return next((element for element in self.text_elements if element.id == element_id), None)

    def add_text_element(self, text: str) -> ManualTextElement | None:
        """Place a new text element at the current time; blank text is ignored."""
        if not text or not text.strip():
            return None

        element = ManualTextElement(text=text, start_time=self.clock.current_time)
        self.text_elements = [*self.text_elements, element]
        self.selected_element_id = element.id
        logger.debug(f"Added text element {element.id} at {element.start_time:.2f}s")
        return element

    def update_text_element(
        self, element_id: str, updates: TextElementUpdate | dict[str, Any]
    ) -> ManualTextElement | None:
        element = self.get_text_element(element_id)
        if element is None:
            return None

        if isinstance(updates, TextElementUpdate):
            changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        else:
            changes = TextElementUpdate(**updates).model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return element

        updated = ManualTextElement.model_validate({**element.model_dump(), **changes})
        self.text_elements = [updated if item.id == element_id else item for item in self.text_elements]
        return updated

    def toggle_text_visibility(self, element_id: str) -> ManualTextElement | None:
        element = self.get_text_element(element_id)
        if element is None:
            return None
        return self.update_text_element(element_id, {"visible": not element.visible})

    def delete_text_element(self, element_id: str) -> bool:
        if self.get_text_element(element_id) is None:
            return False
        self.text_elements = [item for item in self.text_elements if item.id != element_id]
        if self.selected_element_id == element_id:
            self.selected_element_id = None
        return True

    def select_element(self, element_id: str | None) -> bool:
        if element_id is not None and self.get_text_element(element_id) is None:
            return False
        self.selected_element_id = element_id
        return True

    # Playback

    def play(self) -> MediaSyncTarget:
        self.clock.play()
        return self.reconcile()

    def pause(self) -> MediaSyncTarget:
        self.clock.pause()
        return self.reconcile()

    def toggle_playback(self) -> MediaSyncTarget:
        self.clock.toggle()
        return self.reconcile()

    def reset(self) -> MediaSyncTarget:
        self.clock.reset()
        return self.reconcile()

    def seek(self, time: float) -> MediaSyncTarget:
        self.clock.seek(time)
        return self.reconcile()

    def tick(self) -> MediaSyncTarget:
        self.clock.tick()
        return self.reconcile()

    def set_audio_offset(self, offset: float) -> float:
        if not math.isfinite(offset):
            logger.warning(f"Ignoring non-finite audio offset {offset!r}")
            return self.audio_offset
        self.audio_offset = clamp_offset(offset, self.media_sync.max_audio_offset)
        self.reconcile()
        return self.audio_offset

    def reconcile(self) -> MediaSyncTarget:
        """Push one snapshot of the clock into the attached media elements."""
        current_time = self.clock.current_time
        is_playing = self.clock.is_playing
        return self.media_sync.reconcile(
            current_time,
            is_playing,
            self.audio_offset,
            sync_video=self.custom_video is not None,
        )

    def overlays(self) -> VisibleOverlays:
        """Overlays visible at one snapshot of the current time."""
        current_time = self.clock.current_time
        return resolve_overlays(current_time, self.text_elements, self.word_elements)

    # Media elements

    def attach_audio_element(self, element: MediaElement | None) -> None:
        self.media_sync.attach_audio(element)
        if element is not None and self.narration is not None:
            self._load_source(element, self.narration.audio_url)
        self.reconcile()

    def attach_video_element(self, element: MediaElement | None) -> None:
        self.media_sync.attach_video(element)
        if element is not None and self.custom_video is not None:
            self._load_source(element, self.custom_video.url)
        self.reconcile()

    @staticmethod
    def _load_source(element: MediaElement, source: str) -> None:
        try:
            element.pause()
            element.load(source)
        except Exception as e:
            logger.warning(f"Failed to load {source} into media element: {e}")

    @staticmethod
    def _pause_element(element: MediaElement | None) -> None:
        if element is None:
            return
        try:
            element.pause()
        except Exception as e:
            logger.warning(f"Failed to pause media element: {e}")

    # Background

    def set_background(self, value: str) -> BackgroundOption | None:
        """Select a palette background; this replaces any custom video.

        The video element stays attached, paused, so a later upload can load
        into it again.
        """
        option = next((option for option in BACKGROUND_OPTIONS if option.value == value), None)
        if option is None:
            return None
        self.background = option
        if self.custom_video is not None:
            self.custom_video = None
            self._pause_element(self.media_sync.video)
            self.reconcile()
        return option

    async def upload_video(self, data: bytes, filename: str, content_type: str | None) -> UploadedVideo | None:
        """Store a background video and switch the background to it."""
        self.is_uploading = True
        try:
            video = await self.storage_service.store_video(data, filename, content_type)
        except Exception as e:
            logger.error(f"Failed to upload video: {e}")
            await self.notifier.notify("Failed to upload video. Please try again.", error=str(e))
            return None
        finally:
            self.is_uploading = False

        self.custom_video = video
        self.background = BackgroundOption(
            value=CUSTOM_VIDEO_BACKGROUND,
            label=video.filename,
            kind=BackgroundKind.VIDEO,
            style=video.url,
        )
        self.clock.extend_duration(video.duration)
        if self.media_sync.video is not None:
            self._load_source(self.media_sync.video, video.url)
        self.reconcile()
        return video

    # Captions

    async def generate_captions(self, text: str, voice: VoiceId = VoiceId.NEUTRAL) -> bool:
        """Narrate text and replace the word timeline with its timings.

        Returns True when the result was published. Blank text is ignored,
        failures produce one notification and leave the prior state intact,
        and results of superseded requests are discarded.
        """
        if not text or not text.strip():
            return False

        self.generation += 1
        token = self.generation
        self.is_generating = True

        try:
            result = await self.caption_generator.generate(text, voice)
            if token != self.generation:
                logger.info(f"Discarding superseded caption generation {token} (latest is {self.generation})")
                self._discard_narration(result.narration)
                return False
            self._publish_generation(token, result)
            return True
        except Exception as e:
            logger.error(f"Caption generation {token} failed: {e}")
            if token == self.generation:
                await self.notifier.notify("Failed to generate captions. Please try again.", error=str(e))
            return False
        finally:
            if token == self.generation:
                self.is_generating = False

    def _publish_generation(self, token: int, result: CaptionGeneration) -> None:
        previous = self.narration
        # No await between these assignments: readers see the old or the new generation.
        self.text_elements = [item for item in self.text_elements if item.origin == ElementOrigin.MANUAL]
        self.word_elements = list(result.word_elements)
        self.segments = list(result.segments)
        self.narration = result.narration
        self.published_generation = token

        self.clock.extend_duration(result.narration.duration + self.audio_buffer)
        if self.media_sync.audio is not None:
            self._load_source(self.media_sync.audio, result.narration.audio_url)
        self.reconcile()
        self._discard_narration(previous)

        logger.info(
            f"Published generation {token}: {len(self.word_elements)} words, "
            f"{len(self.segments)} segments, timeline {self.clock.duration:.2f}s"
        )

    def clear_generated(self) -> None:
        """Drop every generated element together with the narration."""
        previous = self.narration
        self.generation += 1
        self.is_generating = False
        self.text_elements = [item for item in self.text_elements if item.origin == ElementOrigin.MANUAL]
        self.word_elements = []
        self.segments = []
        self.narration = None
        self._pause_element(self.media_sync.audio)
        self.reconcile()
        self._discard_narration(previous)

    @staticmethod
    def _discard_narration(narration: NarrationAudio | None) -> None:
        if narration is not None and narration.file_path:
            remove_media_file(narration.file_path)

    # State surface

    def snapshot(self) -> TimelineSnapshot:
        return TimelineSnapshot(
            current_time=self.clock.current_time,
            video_duration=self.clock.duration,
            is_playing=self.clock.is_playing,
            audio_offset=self.audio_offset,
            text_elements=self.text_elements,
            word_elements=self.word_elements,
            segments=self.segments,
            selected_element_id=self.selected_element_id,
            background=self.background,
            custom_video=self.custom_video,
            narration=self.narration,
            is_generating=self.is_generating,
            is_uploading=self.is_uploading,
            generation=self.published_generation,
            media_target=self.media_sync.last_target,
        )

    async def _on_tick(self, current_time: float) -> None:
        self.reconcile()
        if self.notifier.connection_count:
            self._schedule_state_push()

    def _schedule_state_push(self) -> None:
        """Broadcast the current snapshot without holding up the clock loop."""
        snapshot = self.snapshot().model_dump(mode="json")
        task = asyncio.create_task(self.notifier.publish_state(snapshot))
        self._push_tasks.add(task)
        task.add_done_callback(self._on_push_done)

    def _on_push_done(self, task: asyncio.Task) -> None:
        self._push_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"State push failed: {error}")

    def start_clock(self) -> asyncio.Task:
        """Start the fixed-rate clock loop on the running event loop."""
        if self._clock_task is None or self._clock_task.done():
            self._clock_task = asyncio.create_task(self.clock.run(self._on_tick))
        return self._clock_task

    async def stop_clock(self) -> None:
        task = self._clock_task
        self._clock_task = None
        pending = [task] if task is not None else []
        pending.extend(self._push_tasks)
        for item in pending:
            item.cancel()
        for item in pending:
            try:
                await item
            except asyncio.CancelledError:
                pass
