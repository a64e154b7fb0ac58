"""Time-based visibility of overlay elements."""

from shared.models import ManualTextElement, VisibleOverlays, WordElement


def visible_text_elements(current_time: float, elements: list[ManualTextElement]) -> list[ManualTextElement]:
    """Text elements shown at current_time, in layer order.

    Both interval ends are inclusive. Hidden elements never show.
    """
    return [
        element for element in elements
        if element.visible and element.start_time <= current_time <= element.start_time + element.duration
    ]


def active_word(current_time: float, words: list[WordElement]) -> WordElement | None:
    """The single word shown at current_time.

    The interval is half-open so adjacent words never match together at their
    shared boundary; the first match in timeline order wins.
    """
    for word in words:
        if word.start_time <= current_time < word.start_time + word.duration:
            return word
    return None


def resolve_overlays(
    current_time: float,
    text_elements: list[ManualTextElement],
    words: list[WordElement],
) -> VisibleOverlays:
    return VisibleOverlays(
        current_time=current_time,
        text_elements=visible_text_elements(current_time, text_elements),
        active_word=active_word(current_time, words),
    )
