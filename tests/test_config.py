"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from budget_calendar.config import (
    CalendarSettings,
    StorageSettings,
    SyncSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults_run_offline(self, monkeypatch):
        monkeypatch.delenv("BUDGET_CALENDAR_SYNC_API_BASE_URL", raising=False)
        settings = get_settings()
        assert settings.storage.events_key == "@calendar_events"
        assert settings.sync.enabled is False
        assert settings.sync.timeout_seconds == 10.0
        assert settings.calendar.dismiss_distance == 100.0
        assert settings.calendar.dismiss_velocity == 0.5

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUDGET_CALENDAR_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("BUDGET_CALENDAR_SYNC_API_BASE_URL", "https://sync.example.test/")
        monkeypatch.setenv("BUDGET_CALENDAR_CALENDAR_MARKER_THRESHOLD", "5")

        assert StorageSettings().data_dir == Path(tmp_path)
        assert SyncSettings().api_base_url == "https://sync.example.test"
        assert CalendarSettings().marker_threshold == 5

    def test_out_of_range_values_rejected(self):
        with pytest.raises(ValidationError):
            SyncSettings(max_attempts=0)
        with pytest.raises(ValidationError):
            CalendarSettings(dismiss_velocity=0)

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("BUDGET_CALENDAR_SYNC_TIMEOUT_SECONDS", "-1")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["sync"] is False
        assert "sync_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
