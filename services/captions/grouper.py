"""Grouping of word timings into readable caption segments."""

from shared.config import config
from shared.models import CaptionSegment, SegmentWord, WordTiming
from shared.utils import setup_logging

logger = setup_logging("caption-grouper")


class SegmentGrouper:
    """Fold a word timeline into caption segments.

    A segment is closed before a word when adding it would exceed the
    duration ceiling, or when the word carries punctuation and the segment
    already holds at least one word.
    """

    def __init__(self, max_segment_duration: float | None = None):
        self.max_segment_duration = float(
            max_segment_duration if max_segment_duration is not None
            else config.get_editor_value("captions.max_segment_duration", 3.0)
        )

    def group(self, timings: list[WordTiming]) -> list[CaptionSegment]:
        segments: list[CaptionSegment] = []
        current_words: list[WordTiming] = []
        current_duration = 0.0

        for timing in timings:
            breaks_on_pause = timing.has_punctuation and bool(current_words)
            exceeds_ceiling = current_duration + timing.duration > self.max_segment_duration

            if current_words and (breaks_on_pause or exceeds_ceiling):
                segments.append(self._close_segment(current_words, current_duration))
                current_words = []
                current_duration = 0.0

            current_words.append(timing)
            current_duration += timing.duration

        if current_words:
            segments.append(self._close_segment(current_words, current_duration))

        logger.debug(f"Grouped {len(timings)} words into {len(segments)} segments")
        return segments

    @staticmethod
    def _close_segment(words: list[WordTiming], duration: float) -> CaptionSegment:
        return CaptionSegment(
            text=" ".join(word.display_word for word in words),
            start_time=words[0].start_time,
            duration=duration,
            words=[
                SegmentWord(word=word.display_word, start_time=word.start_time, duration=word.duration)
                for word in words
            ],
        )
