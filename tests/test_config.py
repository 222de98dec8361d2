import pytest

from desk_api.config import load_settings
from workflows.desk_flow import Pacing


def test_defaults(monkeypatch):
    for name in ["LOG_LEVEL", "MARGIN_CONTENT_PATH", "MARGIN_MAX_DESKS", "MARGIN_STAMP_DELAY_MS",
                 "MARGIN_SUCCESS_HOLD_MS", "MARGIN_FAILURE_HOLD_MS", "MARGIN_BUZZER_MS", "MARGIN_DESK_TTL_S"]:
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()
    assert settings.log_level == "INFO"
    assert settings.content_path is None
    assert settings.max_desks == 1000
    assert settings.desk_ttl_s == 1800
    assert settings.pacing == Pacing(stamp_delay_ms=250, success_hold_ms=800, failure_hold_ms=3500, buzzer_ms=600)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("MARGIN_FAILURE_HOLD_MS", "5000")
    monkeypatch.setenv("MARGIN_MAX_DESKS", "5")

    settings = load_settings()
    assert settings.log_level == "DEBUG"
    assert settings.max_desks == 5
    assert settings.pacing.failure_hold_ms == 5000
    assert settings.pacing.follow_up_delay(correct=False) == 250 + 5000


def test_bad_integer_rejected(monkeypatch):
    monkeypatch.setenv("MARGIN_BUZZER_MS", "loud")
    with pytest.raises(ValueError):
        load_settings()


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="CHATTY"):
        load_settings()


def test_desk_ttl_from_environment(monkeypatch):
    monkeypatch.setenv("MARGIN_DESK_TTL_S", "60")
    assert load_settings().desk_ttl_s == 60
