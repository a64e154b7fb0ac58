from services.playback.visibility import active_word, resolve_overlays, visible_text_elements
from shared.models import ManualTextElement, WordElement


def _word(word: str, start: float, duration: float) -> WordElement:
    return WordElement(word=word, start_time=start, duration=duration)


def test_adjacent_words_switch_at_shared_boundary() -> None:
    first, second = _word("A", 0.0, 1.0), _word("B", 1.0, 1.0)

    assert active_word(1.0, [first, second]) is second
    assert active_word(0.999, [first, second]) is first


def test_no_word_outside_timeline() -> None:
    words = [_word("A", 0.5, 1.0)]

    assert active_word(0.2, words) is None
    assert active_word(1.5, words) is None
    assert active_word(0.5, words) is words[0]


def test_first_matching_word_wins() -> None:
    words = [_word("A", 0.0, 2.0), _word("B", 1.0, 2.0)]

    assert active_word(1.5, words) is words[0]


def test_text_elements_visible_on_closed_interval() -> None:
    element = ManualTextElement(text="Hi", start_time=2.0, duration=3.0)

    assert visible_text_elements(2.0, [element]) == [element]
    assert visible_text_elements(5.0, [element]) == [element]
    assert visible_text_elements(1.99, [element]) == []
    assert visible_text_elements(5.01, [element]) == []


def test_hidden_elements_never_render() -> None:
    element = ManualTextElement(text="Hidden", start_time=0.0, duration=10.0, visible=False)

    assert visible_text_elements(1.0, [element]) == []


def test_overlapping_text_elements_are_layered_in_order() -> None:
    bottom = ManualTextElement(text="bottom", start_time=0.0, duration=5.0)
    top = ManualTextElement(text="top", start_time=1.0, duration=5.0)

    overlays = resolve_overlays(2.0, [bottom, top], [_word("narrated", 1.5, 1.0)])

    assert [e.text for e in overlays.text_elements] == ["bottom", "top"]
    assert overlays.active_word is not None
    assert overlays.active_word.word == "narrated"
    assert overlays.current_time == 2.0
