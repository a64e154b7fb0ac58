"""Tests for word timing allocation."""

import math

import pytest

from services.captions.allocator import (
    CaptionTimingError,
    WordTimingAllocator,
    clean_display_word,
    has_trailing_punctuation,
)
from shared.enums import AnimationKind, ElementOrigin


@pytest.fixture
def allocator():
    return WordTimingAllocator(long_word_length=6, long_word_factor=1.1, pause_factor=1.2)


class TestWordTimingAllocator:
    """Test cases for the WordTimingAllocator class."""

    @pytest.mark.parametrize(
        "text,duration",
        [
            ("Hello world. This is a test", 3.0),
            ("one", 0.7),
            ("Extraordinary narration, with punctuation; everywhere!", 12.345),
            ("a " * 300, 91.0),
        ],
    )
    def test_last_word_ends_at_measured_duration(self, allocator, text, duration):
        timings = allocator.allocate(text, duration)

        assert timings[-1].start_time + timings[-1].duration == pytest.approx(duration, abs=1e-6)

    def test_words_are_contiguous(self, allocator):
        timings = allocator.allocate("The quick brown fox, jumped over everything lazy.", 7.5)

        assert timings[0].start_time == 0.0
        for current, following in zip(timings, timings[1:]):
            assert following.start_time >= current.start_time
            assert current.start_time + current.duration == pytest.approx(following.start_time, abs=1e-9)

    def test_punctuation_gets_longer_duration(self, allocator):
        timings = allocator.allocate("cat cat.", 2.0)

        assert timings[1].duration > timings[0].duration
        assert timings[1].duration / timings[0].duration == pytest.approx(1.2)

    def test_long_word_gets_longer_duration(self, allocator):
        timings = allocator.allocate("elephant cat", 2.0)

        assert timings[0].duration / timings[1].duration == pytest.approx(1.1)

    def test_long_word_with_punctuation_compounds(self, allocator):
        timings = allocator.allocate("elephants, cat", 2.0)

        assert timings[0].duration / timings[1].duration == pytest.approx(1.32)

    def test_hello_world_scenario(self, allocator):
        timings = allocator.allocate("Hello world. This is a test", 3.0)

        assert [t.word for t in timings] == ["Hello", "world.", "This", "is", "a", "test"]
        hello, world, this = timings[0], timings[1], timings[2]
        assert world.duration / hello.duration == pytest.approx(1.2)
        assert this.start_time == pytest.approx(world.start_time + world.duration)
        assert hello.duration == pytest.approx(0.5 * 3.0 / 3.1)
        assert sum(t.duration for t in timings) == pytest.approx(3.0)

    def test_single_word_spans_full_duration(self, allocator):
        timings = allocator.allocate("Wonderful!", 4.2)

        assert len(timings) == 1
        assert timings[0].start_time == 0.0
        assert timings[0].duration == pytest.approx(4.2)

    def test_whitespace_runs_are_collapsed(self, allocator):
        timings = allocator.allocate("  spaced \n\t out   words  ", 3.0)

        assert [t.word for t in timings] == ["spaced", "out", "words"]

    def test_regeneration_is_idempotent(self, allocator):
        first = allocator.allocate("Same text, same timings every time.", 5.5)
        second = allocator.allocate("Same text, same timings every time.", 5.5)

        assert [t.model_dump() for t in first] == [t.model_dump() for t in second]

    @pytest.mark.parametrize("duration", [0.0, -1.0, math.nan, math.inf])
    def test_rejects_unusable_duration(self, allocator, duration):
        with pytest.raises(CaptionTimingError):
            allocator.allocate("Hello world", duration)

    def test_rejects_text_without_words(self, allocator):
        with pytest.raises(CaptionTimingError):
            allocator.allocate("   ", 3.0)

    def test_word_elements_use_display_words(self, allocator):
        timings = allocator.allocate("Wait... what?! Really", 3.0)
        words = allocator.to_word_elements(timings)

        assert [w.word for w in words] == ["Wait..", "what?", "Really"]
        assert timings[0].has_punctuation is True
        for word, timing in zip(words, timings):
            assert word.start_time == timing.start_time
            assert word.duration == timing.duration
            assert word.font_size == 32
            assert word.color == "#FFFFFF"
            assert word.font_weight == "700"
            assert word.animation == AnimationKind.WORD_POP
            assert (word.position.x, word.position.y) == (50.0, 85.0)
            assert word.origin == ElementOrigin.GENERATED

    def test_word_elements_have_unique_ids(self, allocator):
        words = allocator.to_word_elements(allocator.allocate("a b c d", 2.0))

        assert len({w.id for w in words}) == 4


def test_clean_display_word_strips_one_mark():
    assert clean_display_word("world.") == "world"
    assert clean_display_word("really?!") == "really?"
    assert clean_display_word("plain") == "plain"
    assert clean_display_word("") == ""


def test_has_trailing_punctuation():
    for mark in ".,!?;:":
        assert has_trailing_punctuation(f"word{mark}")
    assert not has_trailing_punctuation("word")
    assert not has_trailing_punctuation("'quoted'")
