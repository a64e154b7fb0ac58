"""Word timing allocation for narration captions."""

import math

from shared.config import config
from shared.models import WordElement, WordTiming
from shared.utils import setup_logging

logger = setup_logging("caption-allocator")

PUNCTUATION_MARKS = ".,!?;:"


class CaptionTimingError(Exception):
    """Raised when word timings cannot be derived from the input."""


def has_trailing_punctuation(token: str) -> bool:
    return bool(token) and token[-1] in PUNCTUATION_MARKS


def clean_display_word(token: str) -> str:
    """Strip a single trailing punctuation mark for display."""
    if has_trailing_punctuation(token):
        return token[:-1]
    return token


def split_words(text: str) -> list[str]:
    return text.split()


class WordTimingAllocator:
    """Spread a measured narration duration across the words of its text.

    Every word starts from an equal share of the duration. Long words and
    words followed by punctuation get a larger weight, then all weights are
    rescaled so that the timeline ends exactly where the audio ends.
    """

    def __init__(
        self,
        long_word_length: int | None = None,
        long_word_factor: float | None = None,
        pause_factor: float | None = None,
    ):
        self.long_word_length = int(
            long_word_length if long_word_length is not None
            else config.get_editor_value("captions.long_word_length", 6)
        )
        self.long_word_factor = float(
            long_word_factor if long_word_factor is not None
            else config.get_editor_value("captions.long_word_factor", 1.1)
        )
        self.pause_factor = float(
            pause_factor if pause_factor is not None
            else config.get_editor_value("captions.pause_factor", 1.2)
        )

    def weigh(self, text: str, measured_duration: float) -> list[tuple[str, float, bool]]:
        """Return unscaled (token, weighted_duration, has_punctuation) triples."""
        self._check_duration(measured_duration)

        tokens = split_words(text)
        if not tokens:
            raise CaptionTimingError("Cannot allocate timings for text without words")

        base_duration = measured_duration / len(tokens)
        weighted: list[tuple[str, float, bool]] = []

        for token in tokens:
            duration = base_duration
            if len(token) > self.long_word_length:
                duration *= self.long_word_factor
            punctuated = has_trailing_punctuation(token)
            if punctuated:
                duration *= self.pause_factor
            weighted.append((token, duration, punctuated))

        return weighted

    def allocate(self, text: str, measured_duration: float) -> list[WordTiming]:
        """Compute contiguous word timings spanning exactly measured_duration."""
        weighted = self.weigh(text, measured_duration)

        total_weighted_duration = sum(duration for _, duration, _ in weighted)
        if not math.isfinite(total_weighted_duration) or total_weighted_duration <= 0:
            raise CaptionTimingError(f"Invalid weighted duration {total_weighted_duration!r}")
        scale = measured_duration / total_weighted_duration

        timings: list[WordTiming] = []
        current_time = 0.0
        for token, duration, punctuated in weighted:
            scaled_duration = duration * scale
            timings.append(WordTiming(
                word=token,
                display_word=clean_display_word(token),
                start_time=current_time,
                duration=scaled_duration,
                has_punctuation=punctuated,
            ))
            current_time += scaled_duration

        logger.info(
            f"Allocated {len(timings)} word timings over {measured_duration:.3f}s (scale {scale:.4f})"
        )
        return timings

    @staticmethod
    def to_word_elements(timings: list[WordTiming]) -> list[WordElement]:
        """Build the renderable WordTimeline from allocator output."""
        return [
            WordElement(
                word=timing.display_word,
                start_time=timing.start_time,
                duration=timing.duration,
            )
            for timing in timings
        ]

    @staticmethod
    def _check_duration(measured_duration: float) -> None:
        try:
            value = float(measured_duration)
        except (TypeError, ValueError) as e:
            raise CaptionTimingError(f"Audio duration is not a number: {measured_duration!r}") from e
        if not math.isfinite(value) or value <= 0:
            raise CaptionTimingError(f"Audio duration must be positive and finite, got {value!r}")
