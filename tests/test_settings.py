"""
Tests for configuration.
"""

import pytest
from datetime import date

from pydantic import ValidationError

from couple_tracker.config import AppSettings, get_settings, validate_all_settings
from couple_tracker.orchestrator import make_today_provider


class TestAppSettings:

    def test_defaults(self, monkeypatch):
        for name in ("APP_LOCALE", "APP_TIMEZONE", "APP_DASHBOARD_UPCOMING_LIMIT", "APP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.locale == "pt-BR"
        assert settings.timezone is None
        assert settings.dashboard_upcoming_limit == 2
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("APP_LOCALE", "en")
        monkeypatch.setenv("APP_DASHBOARD_UPCOMING_LIMIT", "5")
        settings = AppSettings(_env_file=None)
        assert settings.locale == "en"
        assert settings.dashboard_upcoming_limit == 5

    def test_unsupported_locale(self):
        with pytest.raises(ValidationError):
            AppSettings(locale="fr", _env_file=None)

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            AppSettings(timezone="Mars/Olympus_Mons", _env_file=None)

    def test_blank_timezone_means_local(self):
        assert AppSettings(timezone="", _env_file=None).zone is None

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug", _env_file=None).log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="loud", _env_file=None)

    def test_upcoming_limit_bounds(self):
        with pytest.raises(ValidationError):
            AppSettings(dashboard_upcoming_limit=0, _env_file=None)


def test_today_provider_without_timezone():
    provider = make_today_provider(AppSettings(timezone=None, _env_file=None))
    assert isinstance(provider(), date)


def test_validate_all_settings(monkeypatch):
    monkeypatch.setenv("APP_LOCALE", "xx")
    get_settings.cache_clear()
    try:
        results = validate_all_settings()
    finally:
        get_settings.cache_clear()
    assert results["app"] is False
    assert "app_error" in results
