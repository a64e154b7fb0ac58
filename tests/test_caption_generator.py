"""Tests for the caption generation pipeline."""

import math
from unittest.mock import patch

import pytest

from services.captions.allocator import CaptionTimingError
from services.captions.generator import CaptionGenerationError, CaptionGenerator
from shared.enums import VoiceId


@pytest.fixture
def generator(speech_service):
    return CaptionGenerator(speech_service=speech_service)


class TestCaptionGenerator:
    @pytest.mark.asyncio
    async def test_generate_hello_world(self, generator, speech_service):
        result = await generator.generate("Hello world. This is a test", VoiceId.FEMALE_ALT)

        assert speech_service.calls == [("Hello world. This is a test", VoiceId.FEMALE_ALT)]
        assert [w.word for w in result.word_elements] == ["Hello", "world", "This", "is", "a", "test"]
        assert [t.word for t in result.timings][1] == "world."
        assert len(result.segments) == 2
        assert result.narration.duration == 3.0
        last = result.word_elements[-1]
        assert last.start_time + last.duration == pytest.approx(3.0, abs=1e-6)

    @pytest.mark.asyncio
    async def test_speech_failure_becomes_generation_error(self, generator, speech_service):
        speech_service.fail = True

        with pytest.raises(CaptionGenerationError, match="speech backend unavailable"):
            await generator.generate("Anything at all")

    @pytest.mark.parametrize("duration", [0.0, -3.0, math.nan, math.inf])
    def test_build_rejects_unusable_duration(self, generator, duration):
        with pytest.raises(CaptionGenerationError):
            generator.build("Some words here", duration)

    def test_build_is_repeatable(self, generator):
        first = generator.build("Regenerate me. Twice, if you like.", 4.4)
        second = generator.build("Regenerate me. Twice, if you like.", 4.4)

        assert [t.model_dump() for t in first.timings] == [t.model_dump() for t in second.timings]
        assert [s.model_dump() for s in first.segments] == [s.model_dump() for s in second.segments]
        assert [(w.word, w.start_time, w.duration) for w in first.word_elements] == [
            (w.word, w.start_time, w.duration) for w in second.word_elements
        ]

    @pytest.mark.asyncio
    async def test_narration_removed_when_timing_fails(self, generator, speech_service, test_environment):
        with patch.object(generator.allocator, "allocate", side_effect=CaptionTimingError("no words")):
            with pytest.raises(CaptionGenerationError):
                await generator.generate("Some words")

        assert list(test_environment.glob("narration_*.mp3")) == []
