"""Word timeline validation: ordering, contiguity, span and segment coverage checks."""

from __future__ import annotations

import math
from typing import Any

from shared.models import CaptionSegment, WordTiming
from shared.utils import setup_logging

logger = setup_logging("caption-validator")

TIME_TOLERANCE = 1e-6


class WordTimelineValidationError(Exception):
    """Raised when a word timeline fails validation."""

    def __init__(self, message: str, violations: list[dict[str, Any]]):
        super().__init__(message)
        self.violations = violations


class WordTimelineValidator:
    """Validate a generated word timeline and its segments."""

    def __init__(self, max_segment_duration: float = 3.0, tolerance: float = TIME_TOLERANCE):
        """
        Initialize validator with configurable thresholds.

        Args:
            max_segment_duration: Ceiling for multi-word segments in seconds
            tolerance: Allowed floating-point drift when comparing times
        """
        self.max_segment_duration = max_segment_duration
        self.tolerance = tolerance

    def validate(
        self,
        timings: list[WordTiming],
        segments: list[CaptionSegment],
        measured_duration: float,
        strict: bool = True,
    ) -> dict[str, Any]:
        """
        Validate word timings and segments against the measured audio duration.

        Returns:
            Dict with keys: valid, violations, warnings, total_words, total_duration

        Raises:
            WordTimelineValidationError: If strict=True and violations found
        """
        if not timings:
            return {"valid": True, "violations": [], "warnings": [], "total_words": 0, "total_duration": 0.0}

        violations: list[dict[str, Any]] = []
        warnings: list[dict[str, Any]] = []

        violations.extend(self._check_durations(timings))
        violations.extend(self._check_ordering(timings))
        violations.extend(self._check_contiguity(timings))
        violations.extend(self._check_span(timings, measured_duration))
        violations.extend(self._check_coverage(timings, segments))
        warnings.extend(self._check_segment_ceiling(segments))

        is_valid = len(violations) == 0
        result = {
            "valid": is_valid,
            "violations": violations,
            "warnings": warnings,
            "total_words": len(timings),
            "total_duration": timings[-1].end_time,
        }

        if strict and not is_valid:
            raise WordTimelineValidationError(
                f"Word timeline validation failed with {len(violations)} violation(s)",
                violations,
            )

        return result

    def _check_durations(self, timings: list[WordTiming]) -> list[dict[str, Any]]:
        """Check for non-finite, negative or zero word durations."""
        violations = []

        for index, timing in enumerate(timings):
            if not (math.isfinite(timing.start_time) and math.isfinite(timing.duration)) or timing.duration <= 0:
                violations.append(
                    {
                        "type": "invalid_duration",
                        "severity": "error",
                        "message": f"Word {index} ({timing.word!r}) has invalid timing",
                        "word_index": index,
                        "details": {"start_time": timing.start_time, "duration": timing.duration},
                    }
                )

        return violations

    def _check_ordering(self, timings: list[WordTiming]) -> list[dict[str, Any]]:
        violations = []

        for index in range(len(timings) - 1):
            current = timings[index]
            next_word = timings[index + 1]
            if current.start_time > next_word.start_time:
                violations.append(
                    {
                        "type": "ordering",
                        "severity": "error",
                        "message": f"Word {index} starts after word {index + 1}",
                        "word_index": index,
                        "details": {
                            "current_start": current.start_time,
                            "next_start": next_word.start_time,
                        },
                    }
                )

        return violations

    def _check_contiguity(self, timings: list[WordTiming]) -> list[dict[str, Any]]:
        """Adjacent words must neither overlap nor leave a gap."""
        violations = []

        for index in range(len(timings) - 1):
            current = timings[index]
            next_word = timings[index + 1]
            drift = next_word.start_time - current.end_time
            if abs(drift) > self.tolerance:
                violations.append(
                    {
                        "type": "overlap" if drift < 0 else "gap",
                        "severity": "error",
                        "message": f"Words {index} and {index + 1} are {abs(drift):.6f}s apart",
                        "word_index": index,
                        "details": {
                            "current_end": current.end_time,
                            "next_start": next_word.start_time,
                        },
                    }
                )

        return violations

    def _check_span(self, timings: list[WordTiming], measured_duration: float) -> list[dict[str, Any]]:
        violations = []
        span = timings[-1].end_time

        if timings[0].start_time < -self.tolerance or span > measured_duration + self.tolerance:
            violations.append(
                {
                    "type": "span",
                    "severity": "error",
                    "message": f"Word timeline spans {span:.6f}s but audio lasts {measured_duration:.6f}s",
                    "word_index": len(timings) - 1,
                    "details": {"span": span, "measured_duration": measured_duration},
                }
            )

        return violations

    def _check_coverage(
        self, timings: list[WordTiming], segments: list[CaptionSegment]
    ) -> list[dict[str, Any]]:
        """Segment words, concatenated, must reproduce the timeline."""
        echoed = [word for segment in segments for word in segment.words]

        if len(echoed) != len(timings):
            return [
                {
                    "type": "coverage",
                    "severity": "error",
                    "message": f"Segments hold {len(echoed)} words, timeline has {len(timings)}",
                    "word_index": None,
                    "details": {"segment_words": len(echoed), "timeline_words": len(timings)},
                }
            ]

        violations = []
        for index, (timing, word) in enumerate(zip(timings, echoed)):
            if (
                word.word != timing.display_word
                or abs(word.start_time - timing.start_time) > self.tolerance
                or abs(word.duration - timing.duration) > self.tolerance
            ):
                violations.append(
                    {
                        "type": "coverage",
                        "severity": "error",
                        "message": f"Segment word {index} ({word.word!r}) does not match the timeline",
                        "word_index": index,
                        "details": {"expected": timing.display_word, "found": word.word},
                    }
                )

        return violations

    def _check_segment_ceiling(self, segments: list[CaptionSegment]) -> list[dict[str, Any]]:
        warnings = []

        for index, segment in enumerate(segments):
            if len(segment.words) > 1 and segment.duration > self.max_segment_duration + self.tolerance:
                warnings.append(
                    {
                        "type": "segment_too_long",
                        "severity": "warning",
                        "message": f"Segment {index} lasts {segment.duration:.2f}s (max {self.max_segment_duration}s)",
                        "segment_index": index,
                        "details": {"duration": round(segment.duration, 3), "text": segment.text},
                    }
                )

        return warnings
