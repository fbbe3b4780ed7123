"""
Test module for chainlog.config.settings
"""

import pytest
from pydantic import ValidationError

from chainlog.config.settings import LoggerSettings, get_settings, reset_settings
from chainlog.core.levels import LogLevel
from chainlog.exceptions import ConfigurationError

ENV_VARS = (
    "CHAINLOG_LEVEL",
    "CHAINLOG_COLORS",
    "CHAINLOG_TIMESTAMP",
    "CHAINLOG_DEPTH",
    "CHAINLOG_MAX_ARRAY_LENGTH",
    "CHAINLOG_DIAGNOSTICS_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoggerSettings:
    """Test cases for LoggerSettings."""

    def test_defaults(self):
        settings = LoggerSettings(_env_file=None)

        assert settings.level is LogLevel.DEBUG
        assert settings.colors is None
        assert settings.timestamp is None
        assert settings.depth == 4
        assert settings.max_array_length == 100
        assert settings.diagnostics_level == "WARNING"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CHAINLOG_LEVEL", "warn")
        monkeypatch.setenv("CHAINLOG_COLORS", "false")
        monkeypatch.setenv("CHAINLOG_TIMESTAMP", "unix")
        monkeypatch.setenv("CHAINLOG_DEPTH", "2")
        monkeypatch.setenv("CHAINLOG_MAX_ARRAY_LENGTH", "10")
        monkeypatch.setenv("CHAINLOG_DIAGNOSTICS_LEVEL", "debug")

        settings = LoggerSettings(_env_file=None)

        assert settings.level is LogLevel.WARNING
        assert settings.colors is False
        assert settings.timestamp == "unix"
        assert settings.depth == 2
        assert settings.max_array_length == 10
        assert settings.diagnostics_level == "DEBUG"

    @pytest.mark.parametrize("raw,expected", [
        ("true", "iso"),
        ("1", "iso"),
        ("off", None),
        ("ISO", "iso"),
        ("locale", "locale"),
    ])
    def test_timestamp_values(self, monkeypatch, raw, expected):
        monkeypatch.setenv("CHAINLOG_TIMESTAMP", raw)
        assert LoggerSettings(_env_file=None).timestamp == expected

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("CHAINLOG_LEVEL=error\nCHAINLOG_DEPTH=9\n")

        settings = LoggerSettings(_env_file=env_file)

        assert settings.level is LogLevel.ERROR
        assert settings.depth == 9

    def test_field_names_accepted(self):
        settings = LoggerSettings(_env_file=None, level="fatal", max_array_length=3)

        assert settings.level is LogLevel.FATAL
        assert settings.max_array_length == 3

    @pytest.mark.parametrize("name,value", [
        ("CHAINLOG_LEVEL", "loud"),
        ("CHAINLOG_DEPTH", "-1"),
        ("CHAINLOG_MAX_ARRAY_LENGTH", "-3"),
        ("CHAINLOG_DIAGNOSTICS_LEVEL", "TRACE"),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            LoggerSettings(_env_file=None)


class TestSettingsSingleton:
    """Test cases for get_settings/reset_settings."""

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_reset_creates_new_instance(self):
        first = get_settings()
        reset_settings()
        assert get_settings() is not first

    def test_invalid_environment_raises_configuration_error(self, monkeypatch):
        monkeypatch.setenv("CHAINLOG_LEVEL", "loud")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert exc_info.value.error_code == "SETTINGS_INIT_ERROR"
        assert exc_info.value.context["error_type"] == "ValidationError"
