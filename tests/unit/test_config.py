"""Tests for clauselens/config.py — Settings, defaults, environment overrides."""

import pytest
from pydantic import ValidationError

from clauselens.config import Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("ENVIRONMENT", "DEBUG", "LOG_LEVEL", "ANALYSIS_MODEL", "RISK_ID_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_get_settings_returns_instance(self):
        assert isinstance(get_settings(), Settings)

    def test_get_settings_returns_singleton(self):
        assert get_settings() is get_settings()

    def test_defaults(self, clean_env):
        s = Settings(_env_file=None)
        assert s.environment == "development"
        assert s.debug is False
        assert s.log_level == "INFO"
        assert s.analysis_model == "gpt-4o"
        assert s.risk_id_prefix == "risk"

    def test_log_level_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"
        assert Settings(log_level=" warning ").log_level == "WARNING"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_env_override(self, clean_env):
        clean_env.setenv("ANALYSIS_MODEL", "gpt-4o-mini")
        clean_env.setenv("RISK_ID_PREFIX", "flag")
        s = Settings(_env_file=None)
        assert s.analysis_model == "gpt-4o-mini"
        assert s.risk_id_prefix == "flag"

    def test_env_case_insensitive(self, clean_env):
        clean_env.setenv("log_level", "error")
        assert Settings(_env_file=None).log_level == "ERROR"

    def test_cache_cleared_between_tests(self, clean_env):
        clean_env.setenv("ANALYSIS_MODEL", "claude-3")
        get_settings.cache_clear()
        assert get_settings().analysis_model == "claude-3"
