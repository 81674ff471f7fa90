"""
Tests for decoder settings.
"""
import pytest

from munin_protocol.config import Settings, get_settings, load_settings
from munin_protocol.exceptions import ConfigurationError


def test_defaults():
    config = Settings()
    assert config.max_response_bytes == 1024 * 1024
    assert config.log_to_file is False
    assert config.shell_prompt == "munin> "


def test_environment_override(monkeypatch):
    monkeypatch.setenv("MUNIN_PROTOCOL_MAX_RESPONSE_BYTES", "4096")
    monkeypatch.setenv("MUNIN_PROTOCOL_LOG_LEVEL", "debug")

    config = Settings()

    assert config.max_response_bytes == 4096
    assert config.log_level == "DEBUG"


def test_load_settings_wraps_validation_errors():
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(max_response_bytes=0)
    assert exc_info.value.details["errors"]


def test_load_settings_overrides():
    assert load_settings(shell_prompt="> ").shell_prompt == "> "


class TestGetSettings:
    """Tests for the lazily built default settings."""

    @pytest.fixture(autouse=True)
    def fresh_defaults(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_defaults_are_cached(self):
        assert get_settings() is get_settings()

    def test_environment_error_is_wrapped(self, monkeypatch):
        monkeypatch.setenv("MUNIN_PROTOCOL_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()
        assert "unknown log level: LOUD" in exc_info.value.details["errors"][0]
