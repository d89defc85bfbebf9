"""
Tests for environment-driven settings
"""

import pytest

from companion.app.errors import ConfigError
from companion.app.settings import load_settings


@pytest.fixture
def env(monkeypatch):
    for name in (
        "GEMINI_MODEL",
        "MAX_HISTORY_LENGTH",
        "ENABLE_USER_MEMORY",
        "ENABLE_IMAGE_RECOGNITION",
        "ENABLE_VOICE_RECOGNITION",
        "INACTIVITY_DAYS",
        "SWEEP_INTERVAL_HOURS",
        "GEMINI_TEMPERATURE",
        "STORE_PATH",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return monkeypatch


class TestLoadSettings:
    def test_defaults(self, env):
        s = load_settings()

        assert s.gemini_api_key == "test-key"
        assert s.gemini_model == "gemini-2.5-flash"
        assert s.max_history_length == 30
        assert s.enable_user_memory is True
        assert s.enable_image_recognition is False
        assert s.inactivity_days == 30
        assert s.sweep_interval_hours == 24
        assert s.store_path.endswith("db.json")
        assert s.log_file is None

    def test_overrides(self, env):
        env.setenv("MAX_HISTORY_LENGTH", "10")
        env.setenv("ENABLE_USER_MEMORY", "false")
        env.setenv("ENABLE_IMAGE_RECOGNITION", "yes")
        env.setenv("GEMINI_TEMPERATURE", "0.2")

        s = load_settings()

        assert s.max_history_length == 10
        assert s.enable_user_memory is False
        assert s.enable_image_recognition is True
        assert s.gemini_temperature == 0.2

    def test_missing_api_key(self, env):
        env.delenv("GEMINI_API_KEY")

        with pytest.raises(ConfigError):
            load_settings()

    def test_bad_integer(self, env):
        env.setenv("MAX_HISTORY_LENGTH", "lots")

        with pytest.raises(ConfigError):
            load_settings()

    def test_history_too_small(self, env):
        env.setenv("MAX_HISTORY_LENGTH", "1")

        with pytest.raises(ConfigError):
            load_settings()

    def test_non_positive_sweep_values(self, env):
        env.setenv("INACTIVITY_DAYS", "0")

        with pytest.raises(ConfigError):
            load_settings()
