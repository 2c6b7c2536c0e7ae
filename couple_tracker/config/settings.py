"""
Configuration Management for Couple Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The document store and authentication are provided by the hosting backend,
so what is left to configure is how dates are presented and checked.
"""

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from couple_tracker.recurrence.countdown import SUPPORTED_LOCALES


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from APP_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for structured logs"
    )

    # Presentation
    locale: str = Field(
        default="pt-BR",
        description="Language of countdown texts"
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone used to decide what 'today' is (host local date if unset)"
    )
    dashboard_upcoming_limit: int = Field(
        default=2,
        ge=1,
        le=20,
        description="How many upcoming dates the dashboard shows"
    )

    # Validation thresholds
    max_years_ahead: int = Field(
        default=50,
        ge=1,
        description="One-off dates further ahead than this get a warning"
    )

    @field_validator('locale')
    @classmethod
    def validate_locale(cls, v: str) -> str:
        if v not in SUPPORTED_LOCALES:
            raise ValueError(f"Unsupported locale: {v}. Allowed: {SUPPORTED_LOCALES}")
        return v

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def zone(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.timezone) if self.timezone else None


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {section: is_valid}, plus {section}_error on failure.
    Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
