import pytest

from shared.config import ServiceConfig
from shared.utils import clamp, config, generate_element_id, is_positive_duration, sanitize_filename


def test_config_env_loading() -> None:
    # Keys should resolve even when not explicitly configured
    assert config.get("openai_api_key") in (None, "") or isinstance(config.get("openai_api_key"), str)
    assert isinstance(config.get("speech_driver"), str)
    assert isinstance(config.get("speech_timeout"), int)
    allowed_origins = config.get("allowed_origins")
    assert isinstance(allowed_origins, list)


def test_editor_config_defaults() -> None:
    assert config.get_editor_value("captions.max_segment_duration") == 3.0
    assert config.get_editor_value("timeline.default_duration") == 15.0
    assert config.get_editor_value("sync.max_audio_offset") == 2.0
    assert config.get_editor_value("captions.missing_key", "fallback") == "fallback"


def test_editor_config_env_override(monkeypatch) -> None:
    settings = ServiceConfig()
    monkeypatch.setenv("EDITOR_FLAG_SYNC_MAX_AUDIO_OFFSET", "1.5")
    monkeypatch.setenv("EDITOR_FLAG_TIMELINE_AUDIO_BUFFER", "-0.5")

    assert settings.get_editor_value("sync.max_audio_offset") == 1.5
    assert settings.get_editor_value("timeline.audio_buffer") == -0.5


def test_set_editor_config() -> None:
    settings = ServiceConfig()
    settings.set_editor_config({"captions": {"long_word_length": 8}})

    assert settings.get_editor_value("captions.long_word_length") == 8
    assert settings.get_editor_value("timeline.tick_step", 0.1) == 0.1


def test_sanitize_filename() -> None:
    fname = "bad:file/name?.mp4"
    safe = sanitize_filename(fname)
    assert ":" not in safe and "/" not in safe and "?" not in safe


def test_generate_element_id_is_unique() -> None:
    ids = {generate_element_id() for _ in range(100)}
    assert len(ids) == 100


@pytest.mark.parametrize(
    "value,expected",
    [(1.0, True), (0.001, True), (0.0, False), (-1.0, False), (None, False), (float("nan"), False),
     (float("inf"), False), ("abc", False)],
)
def test_is_positive_duration(value, expected) -> None:
    assert is_positive_duration(value) is expected


def test_clamp() -> None:
    assert clamp(5.0, -2.0, 2.0) == 2.0
    assert clamp(-5.0, -2.0, 2.0) == -2.0
    assert clamp(0.5, -2.0, 2.0) == 0.5
