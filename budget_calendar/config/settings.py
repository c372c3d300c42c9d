"""
Configuration Management for Budget Calendar

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every setting has a working default, so the core runs fully offline with
no environment at all. Only remote sync needs explicit configuration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Durable key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_CALENDAR_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".budget_calendar",
        description="Directory holding the file-backed key-value store"
    )

    # Keys within the key-value store
    events_key: str = Field(
        default="@calendar_events",
        description="Key of the serialized event index"
    )
    settings_key: str = Field(
        default="@calendar_settings",
        description="Key of the opaque user settings blob"
    )
    last_sync_key: str = Field(
        default="@calendar_last_sync",
        description="Key of the last successful sync timestamp"
    )

    @property
    def all_keys(self) -> list[str]:
        """Every key owned by the event store."""
        return [self.events_key, self.settings_key, self.last_sync_key]


class SyncSettings(BaseSettings):
    """Remote sync API configuration (optional)."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_CALENDAR_SYNC_",
        extra="ignore"
    )

    api_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the sync API. Sync is disabled when unset."
    )
    auth_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent with sync requests"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Per-request timeout"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per request before giving up"
    )
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        le=30,
        description="Base of the exponential backoff between attempts"
    )

    @field_validator('api_base_url')
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the base URL so paths can be appended directly."""
        if v is None:
            return v
        v = v.strip().rstrip("/")
        return v or None

    @property
    def enabled(self) -> bool:
        return self.api_base_url is not None


class CalendarSettings(BaseSettings):
    """Presentation constants consumed by the calendar views."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_CALENDAR_CALENDAR_",
        extra="ignore"
    )

    marker_threshold: int = Field(
        default=3,
        ge=1,
        description="Event counts up to this render as markers, above as a badge"
    )
    dismiss_distance: float = Field(
        default=100.0,
        gt=0,
        description="Drag distance past which a released panel closes"
    )
    dismiss_velocity: float = Field(
        default=0.5,
        gt=0,
        description="Release velocity (units/ms) past which the panel closes"
    )
    drag_activation_distance: float = Field(
        default=5.0,
        ge=0,
        description="Downward movement needed before a drag begins"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def sync(self) -> SyncSettings:
        return SyncSettings()

    @property
    def calendar(self) -> CalendarSettings:
        return CalendarSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "sync", "calendar", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
