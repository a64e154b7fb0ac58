from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from shared.enums import AnimationKind, BackgroundKind, ElementOrigin, VoiceId
from shared.utils import generate_element_id


class Position(BaseModel):
    """Element anchor in percent-of-canvas coordinates."""

    x: float = Field(default=50.0, ge=0.0, le=100.0)
    y: float = Field(default=50.0, ge=0.0, le=100.0)


# Timed overlay elements
class TimedElement(BaseModel):
    """Base shape shared by every overlay element on the timeline."""

    id: str = Field(default_factory=generate_element_id)
    start_time: float = Field(..., ge=0.0, description="Start time in seconds")
    duration: float = Field(..., ge=0.0, description="Display duration in seconds")
    font_size: int = Field(default=32, ge=1)
    color: str = Field(default="#FFFFFF")
    font_weight: str = Field(default="600")
    animation: AnimationKind = Field(default=AnimationKind.FADE)
    position: Position = Field(default_factory=Position)
    origin: ElementOrigin = Field(default=ElementOrigin.MANUAL)

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class ManualTextElement(TimedElement):
    """Free-form text placed on the timeline by the user."""

    text: str
    duration: float = Field(default=3.0, ge=0.0)
    visible: bool = True


class WordElement(TimedElement):
    """A single narrated word rendered at the bottom of the canvas."""

    word: str
    font_weight: str = Field(default="700")
    animation: AnimationKind = Field(default=AnimationKind.WORD_POP)
    position: Position = Field(default_factory=lambda: Position(x=50.0, y=85.0))
    origin: ElementOrigin = Field(default=ElementOrigin.GENERATED)


class TextElementUpdate(BaseModel):
    """Partial update for a manual text element; unset fields stay untouched."""

    text: str | None = None
    start_time: float | None = Field(None, ge=0.0)
    duration: float | None = Field(None, ge=0.0)
    font_size: int | None = Field(None, ge=1)
    color: str | None = None
    font_weight: str | None = None
    animation: AnimationKind | None = None
    position: Position | None = None
    visible: bool | None = None


# Caption timing
class WordTiming(BaseModel):
    """Scaled timing for one narration token."""

    word: str = Field(..., description="Raw token, punctuation included")
    display_word: str = Field(..., description="Token with one trailing punctuation mark removed")
    start_time: float
    duration: float
    has_punctuation: bool = False

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class SegmentWord(BaseModel):
    word: str
    start_time: float
    duration: float


class CaptionSegment(BaseModel):
    """Readable grouping of consecutive words."""

    text: str
    start_time: float
    duration: float
    words: list[SegmentWord] = Field(default_factory=list)

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


# Media
class NarrationAudio(BaseModel):
    """Synthesized narration with its measured duration."""

    audio_url: str
    duration: float = Field(..., gt=0.0)
    voice: VoiceId = VoiceId.NEUTRAL
    file_path: str | None = None


class UploadedVideo(BaseModel):
    """Background video stored by the media storage collaborator."""

    url: str
    filename: str
    duration: float | None = None
    file_path: str | None = None


class BackgroundOption(BaseModel):
    value: str
    label: str
    kind: BackgroundKind
    style: str


class MediaSyncTarget(BaseModel):
    """Positions the media players should be at for the current clock state.

    The target is always computed; the ``*_applied`` flags record whether it
    was pushed into an in-process media element.
    """

    video_time: float = 0.0
    audio_time: float = 0.0
    is_playing: bool = False
    audio_offset: float = 0.0
    video_applied: bool = False
    audio_applied: bool = False


class VisibleOverlays(BaseModel):
    current_time: float
    text_elements: list[ManualTextElement] = Field(default_factory=list)
    active_word: WordElement | None = None


class TimelineSnapshot(BaseModel):
    """Read-only view of the editor state."""

    current_time: float
    video_duration: float
    is_playing: bool
    audio_offset: float
    text_elements: list[ManualTextElement] = Field(default_factory=list)
    word_elements: list[WordElement] = Field(default_factory=list)
    segments: list[CaptionSegment] = Field(default_factory=list)
    selected_element_id: str | None = None
    background: BackgroundOption
    custom_video: UploadedVideo | None = None
    narration: NarrationAudio | None = None
    is_generating: bool = False
    is_uploading: bool = False
    generation: int = 0
    media_target: MediaSyncTarget = Field(default_factory=MediaSyncTarget)


# Request models
class TextElementCreateRequest(BaseModel):
    text: str = Field(..., max_length=500, description="Text to place at the current time")


class SeekRequest(BaseModel):
    time: float = Field(..., description="Target time in seconds")


class AudioOffsetRequest(BaseModel):
    offset: float = Field(..., description="Audio offset in seconds, clamped to the allowed range")


class BackgroundRequest(BaseModel):
    value: str = Field(..., description="Palette entry identifier")


class SelectionRequest(BaseModel):
    element_id: str | None = None


class CaptionGenerationRequest(BaseModel):
    text: str = Field(..., max_length=10000, description="Narration text")
    voice: VoiceId = Field(default=VoiceId.NEUTRAL, description="Narration voice")


class APIResponse(BaseModel):
    """Generic API response wrapper"""

    success: bool = True
    message: str = "Success"
    data: Any | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)


BACKGROUND_OPTIONS = [
    BackgroundOption(value="gradient-1", label="Pink Gradient", kind=BackgroundKind.GRADIENT,
                     style="linear-gradient(135deg, #FF0050, #FF4081)"),
    BackgroundOption(value="gradient-2", label="Cyan Gradient", kind=BackgroundKind.GRADIENT,
                     style="linear-gradient(135deg, #00F2EA, #4FC3F7)"),
    BackgroundOption(value="gradient-3", label="Purple Gradient", kind=BackgroundKind.GRADIENT,
                     style="linear-gradient(135deg, #9C27B0, #E91E63)"),
    BackgroundOption(value="gradient-4", label="Blue Gradient", kind=BackgroundKind.GRADIENT,
                     style="linear-gradient(135deg, #2196F3, #00BCD4)"),
    BackgroundOption(value="solid-black", label="Black", kind=BackgroundKind.SOLID, style="#000000"),
    BackgroundOption(value="solid-white", label="White", kind=BackgroundKind.SOLID, style="#FFFFFF"),
    BackgroundOption(value="solid-red", label="Red", kind=BackgroundKind.SOLID, style="#FF0050"),
    BackgroundOption(value="solid-cyan", label="Cyan", kind=BackgroundKind.SOLID, style="#00F2EA"),
]
