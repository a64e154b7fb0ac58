"""Caption generator: narration synthesis followed by word timing and grouping."""

from pydantic import BaseModel, Field

from services.captions.allocator import CaptionTimingError, WordTimingAllocator
from services.captions.grouper import SegmentGrouper
from services.captions.validator import WordTimelineValidationError, WordTimelineValidator
from services.speech.service import SpeechService, SpeechSynthesisError
from shared.enums import VoiceId
from shared.media_utils import remove_media_file
from shared.models import CaptionSegment, NarrationAudio, WordElement, WordTiming
from shared.utils import setup_logging

logger = setup_logging("caption-generator")


class CaptionGenerationError(Exception):
    """Raised when a caption generation run cannot produce a usable timeline."""


class CaptionTimeline(BaseModel):
    """Word timeline and segments computed for one measured duration."""

    measured_duration: float
    timings: list[WordTiming] = Field(default_factory=list)
    word_elements: list[WordElement] = Field(default_factory=list)
    segments: list[CaptionSegment] = Field(default_factory=list)


class CaptionGeneration(CaptionTimeline):
    """Complete result of one generation run, published as a unit."""

    narration: NarrationAudio


class CaptionGenerator:
    """Generate narrated captions with timing derived from the real audio length."""

    def __init__(
        self,
        speech_service: SpeechService | None = None,
        allocator: WordTimingAllocator | None = None,
        grouper: SegmentGrouper | None = None,
        validator: WordTimelineValidator | None = None,
    ):
        self._speech_service = speech_service
        self.allocator = allocator or WordTimingAllocator()
        self.grouper = grouper or SegmentGrouper()
        self.validator = validator or WordTimelineValidator(
            max_segment_duration=self.grouper.max_segment_duration
        )

    @property
    def speech_service(self) -> SpeechService:
        """Lazy load the speech service."""
        if self._speech_service is None:
            self._speech_service = SpeechService()
        return self._speech_service

    @speech_service.setter
    def speech_service(self, service: SpeechService) -> None:
        self._speech_service = service

    def build(self, text: str, measured_duration: float) -> CaptionTimeline:
        """Allocate, group and validate captions for a known duration."""
        try:
            timings = self.allocator.allocate(text, measured_duration)
            segments = self.grouper.group(timings)
            report = self.validator.validate(timings, segments, measured_duration, strict=True)
        except CaptionTimingError as e:
            raise CaptionGenerationError(f"Caption timing failed: {e!s}") from e
        except WordTimelineValidationError as e:
            logger.error(f"Generated word timeline is invalid: {e.violations}")
            raise CaptionGenerationError(str(e)) from e

        for warning in report["warnings"]:
            logger.warning(warning["message"])

        return CaptionTimeline(
            measured_duration=measured_duration,
            timings=timings,
            word_elements=self.allocator.to_word_elements(timings),
            segments=segments,
        )

    async def generate(self, text: str, voice: VoiceId = VoiceId.NEUTRAL) -> CaptionGeneration:
        """Synthesize narration for text and time its words against the audio."""
        logger.info(f"Generating captions for {len(text)} characters of text")

        try:
            narration = await self.speech_service.synthesize(text, voice)
        except SpeechSynthesisError as e:
            raise CaptionGenerationError(str(e)) from e

        try:
            timeline = self.build(text, narration.duration)
        except CaptionGenerationError:
            if narration.file_path:
                remove_media_file(narration.file_path)
            raise

        logger.info(
            f"Generated {len(timeline.word_elements)} words in {len(timeline.segments)} segments "
            f"over {narration.duration:.2f}s"
        )
        return CaptionGeneration(narration=narration, **dict(timeline))
