"""
Tests for SettingsService.

Tests cover:
1. Defaults on first access
2. Partial updates
3. Effective date from the stored zone
"""
import pytest
from datetime import date, datetime, timezone

from productivity_backend.services.settings_service import SettingsService
from productivity_backend.schemas import SettingsUpdate
from productivity_backend.constants import DEFAULT_TIMEZONE
from productivity_backend.exceptions import ValidationException


class TestSettingsUpdate:
    """Tests for update"""

    def test_defaults(self, db_session):
        settings = SettingsService(db_session).get()

        assert settings.timezone == DEFAULT_TIMEZONE
        assert settings.day_start_enabled is False
        assert settings.window_size_days == 30

    def test_partial_update_keeps_other_fields(self, db_session):
        """Changing only the window leaves zone and day start alone"""
        service = SettingsService(db_session)
        service.update(SettingsUpdate(timezone="Asia/Tokyo", day_start_enabled=True, day_start_time="05:00"))

        settings = service.update(SettingsUpdate(window_size_days=14))

        assert settings.window_size_days == 14
        assert settings.timezone == "Asia/Tokyo"
        assert settings.day_start_enabled is True
        assert settings.day_start_time == "05:00"

    def test_explicit_null_is_ignored(self, db_session):
        service = SettingsService(db_session)
        service.update(SettingsUpdate(timezone="Asia/Tokyo"))

        settings = service.update(SettingsUpdate(timezone=None, window_size_days=7))

        assert settings.timezone == "Asia/Tokyo"

    def test_unknown_zone(self, db_session):
        with pytest.raises(ValidationException):
            SettingsService(db_session).update(SettingsUpdate(timezone="Mars/Olympus"))

    def test_effective_date_uses_stored_zone(self, db_session):
        service = SettingsService(db_session)
        service.update(SettingsUpdate(timezone="Asia/Tokyo"))

        result = service.get_effective_date(datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc))

        assert result == date(2026, 3, 2)
