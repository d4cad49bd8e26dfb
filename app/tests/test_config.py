"""
Tests for configuration, preferences and log formatting.
"""

import json
import logging

import pytest

from scicalc.config import Config, load_config
from scicalc.errors import ErrorKind
from scicalc.logging_config import JSONFormatter, get_logger, set_correlation_id
from scicalc.preferences import Preferences, load_preferences, save_preferences


class TestConfig:
    """Tests for the Config class."""

    def test_default_values(self):
        config = Config()

        assert config.history_limit == 12
        assert config.significant_digits == 12
        assert config.factorial_limit == 170
        assert config.error_reset_delay == 1.5
        assert config.validate() == []

    @pytest.mark.parametrize("kwargs, field_name", [
        ({"history_limit": 0}, "HISTORY_LIMIT"),
        ({"significant_digits": 0}, "SIGNIFICANT_DIGITS"),
        ({"significant_digits": 18}, "SIGNIFICANT_DIGITS"),
        ({"factorial_limit": 171}, "FACTORIAL_LIMIT"),
        ({"error_reset_delay": -1.0}, "ERROR_RESET_DELAY"),
        ({"log_level": "LOUD"}, "LOG_LEVEL"),
        ({"max_sessions": 0}, "MAX_SESSIONS"),
    ])
    def test_invalid_values_rejected(self, kwargs, field_name):
        with pytest.raises(ValueError) as exc_info:
            Config(**kwargs)
        assert field_name in str(exc_info.value)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HISTORY_LIMIT", "5")
        monkeypatch.setenv("SIGNIFICANT_DIGITS", "8")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_JSON", "no")
        monkeypatch.setenv("ALLOWED_CORS_ORIGINS", "http://a.test, http://b.test")

        config = load_config()

        assert config.history_limit == 5
        assert config.significant_digits == 8
        assert config.log_level == "DEBUG"
        assert config.log_json is False
        assert config.allowed_cors_origins == ["http://a.test", "http://b.test"]

    def test_bad_numbers_fall_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("HISTORY_LIMIT", "lots")
        monkeypatch.setenv("ERROR_RESET_DELAY", "soon")

        config = Config.from_env()

        assert config.history_limit == 12
        assert config.error_reset_delay == 1.5


class TestPreferences:
    """Tests for caller-owned display preferences."""

    def test_defaults(self):
        assert Preferences().theme == "default"

    def test_unknown_theme(self):
        with pytest.raises(ValueError):
            Preferences(theme="neon")

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "prefs.json"
        save_preferences(Preferences(theme="dark"), path)

        assert json.loads(path.read_text()) == {"theme": "dark"}
        assert load_preferences(path).theme == "dark"

    def test_missing_file(self, tmp_path):
        assert load_preferences(tmp_path / "missing.json") == Preferences()

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"theme": "neon"}'])
    def test_unreadable_file(self, tmp_path, content):
        path = tmp_path / "prefs.json"
        path.write_text(content)
        assert load_preferences(path).theme == "default"


class TestLogging:
    """Tests for the JSON log format."""

    def _record(self, **extra):
        record = logging.LogRecord(
            "scicalc.services", logging.INFO, __file__, 1, "Action failed", None, None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_calculator_context_fields(self):
        record = self._record(
            session_id="abc", action="factorial", error_kind=ErrorKind.TOO_LARGE
        )
        data = json.loads(JSONFormatter().format(record))

        assert data["session_id"] == "abc"
        assert data["action"] == "factorial"
        assert data["error_kind"] == "too_large"
        assert data["logger"] == "scicalc.services"

    def test_correlation_id(self):
        set_correlation_id("req_1234")
        try:
            data = json.loads(JSONFormatter().format(self._record()))
        finally:
            set_correlation_id(None)

        assert data["correlation_id"] == "req_1234"
        assert "session_id" not in data

    def test_get_logger_namespace(self):
        assert get_logger("session").name == "scicalc.session"
