"""
Enums and constants used across the editor.
"""

from enum import Enum, IntEnum


class AnimationKind(str, Enum):
    """Entrance animations available for overlay elements."""

    FADE = "fade"
    SLIDE_UP = "slide-up"
    SLIDE_DOWN = "slide-down"
    SLIDE_LEFT = "slide-left"
    SLIDE_RIGHT = "slide-right"
    TYPEWRITER = "typewriter"
    BOUNCE = "bounce"
    ZOOM = "zoom"
    WORD_POP = "word-pop"


class ElementOrigin(str, Enum):
    """Who created a timed element."""

    MANUAL = "manual"
    GENERATED = "generated"


class VoiceId(str, Enum):
    """Narration voices offered by the speech collaborator."""

    NEUTRAL = "neutral"
    MALE_STANDARD = "male-standard"
    MALE_ACCENTED = "male-accented"
    MALE_DEEP = "male-deep"
    FEMALE_STANDARD = "female-standard"
    FEMALE_ALT = "female-alt"


class PlaybackState(str, Enum):
    """States of the playback clock."""

    STOPPED = "stopped"
    PLAYING = "playing"


class BackgroundKind(str, Enum):
    """Kinds of video background."""

    GRADIENT = "gradient"
    SOLID = "solid"
    VIDEO = "video"


class MediaReadyState(IntEnum):
    """Readiness levels reported by a media element (HTML media semantics)."""

    HAVE_NOTHING = 0
    HAVE_METADATA = 1
    HAVE_CURRENT_DATA = 2
    HAVE_FUTURE_DATA = 3
    HAVE_ENOUGH_DATA = 4


ANIMATION_LABELS = {
    AnimationKind.FADE: "Fade In",
    AnimationKind.SLIDE_UP: "Slide Up",
    AnimationKind.SLIDE_DOWN: "Slide Down",
    AnimationKind.SLIDE_LEFT: "Slide Left",
    AnimationKind.SLIDE_RIGHT: "Slide Right",
    AnimationKind.TYPEWRITER: "Typewriter",
    AnimationKind.BOUNCE: "Bounce",
    AnimationKind.ZOOM: "Zoom In",
    AnimationKind.WORD_POP: "Word Pop",
}

VOICE_LABELS = {
    VoiceId.NEUTRAL: "Neutral",
    VoiceId.MALE_STANDARD: "Male (Standard)",
    VoiceId.MALE_ACCENTED: "Male (Accented)",
    VoiceId.MALE_DEEP: "Male (Deep)",
    VoiceId.FEMALE_STANDARD: "Female (Standard)",
    VoiceId.FEMALE_ALT: "Female (Alternative)",
}
