import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from event_bus.bus import Dispatcher, FailurePolicy
from event_bus.config import Settings, get_settings


def test_defaults(monkeypatch):
    for var in ("EVENT_BUS_ALLOW_FAILURES", "EVENT_BUS_FAIL_FAST_STRUCTURAL", "EVENT_BUS_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.allow_failures is False
    assert settings.fail_fast_structural is False
    assert settings.log_format == "plain"


def test_environment_enables_tolerant_policy(monkeypatch):
    monkeypatch.setenv("EVENT_BUS_ALLOW_FAILURES", "true")
    bus = Dispatcher([], settings=Settings(_env_file=None))
    assert bus.policy is FailurePolicy.TOLERANT


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("EVENT_BUS_LOG_LEVEL", "debug")
    try:
        first = get_settings()
        assert first.log_level == "debug"
        assert get_settings() is first
    finally:
        get_settings.cache_clear()
