"""
Tests for DateService.

Tests cover:
1. Effective date in the reference time zone
2. Day start time offset
3. Date parsing helpers
"""
import pytest
from datetime import date, datetime, timezone

from productivity_backend.services.date_service import DateService
from productivity_backend.exceptions import InvalidDateException, ValidationException


class TestEffectiveDate:
    """Tests for get_effective_date"""

    def test_returns_today_when_day_start_disabled(self, default_settings):
        default_settings.day_start_enabled = False

        result = DateService.get_effective_date(default_settings, datetime(2026, 1, 30, 3, 0))

        assert result == date(2026, 1, 30)

    def test_returns_today_when_after_day_start(self, default_settings):
        default_settings.day_start_enabled = True
        default_settings.day_start_time = "06:00"

        result = DateService.get_effective_date(default_settings, datetime(2026, 1, 30, 10, 0))

        assert result == date(2026, 1, 30)

    def test_returns_yesterday_when_before_day_start(self, default_settings):
        """Before day_start_time the user is still in yesterday"""
        default_settings.day_start_enabled = True
        default_settings.day_start_time = "06:00"

        result = DateService.get_effective_date(default_settings, datetime(2026, 1, 30, 3, 0))

        assert result == date(2026, 1, 29)

    def test_aware_instant_converted_to_reference_zone(self, default_settings):
        """23:30 UTC is already the next day in Tokyo"""
        default_settings.timezone = "Asia/Tokyo"

        result = DateService.get_effective_date(
            default_settings, datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)
        )

        assert result == date(2026, 3, 2)

    def test_aware_instant_behind_utc(self, default_settings):
        default_settings.timezone = "America/New_York"

        result = DateService.get_effective_date(
            default_settings, datetime(2026, 3, 2, 2, 0, tzinfo=timezone.utc)
        )

        assert result == date(2026, 3, 1)

    def test_invalid_day_start_time_is_ignored(self, default_settings):
        default_settings.day_start_enabled = True
        default_settings.day_start_time = "garbage"

        result = DateService.get_effective_date(default_settings, datetime(2026, 1, 30, 3, 0))

        assert result == date(2026, 1, 30)

    def test_unknown_zone(self, default_settings):
        default_settings.timezone = "Mars/Olympus"

        with pytest.raises(ValidationException):
            DateService.get_effective_date(default_settings, datetime(2026, 1, 30, 3, 0))


class TestParsing:
    """Tests for parse_time and parse_iso_date"""

    def test_parse_time(self):
        assert DateService.parse_time("06:30") == (6, 30)

    def test_parse_time_out_of_range(self):
        with pytest.raises(ValueError):
            DateService.parse_time("25:00")

    def test_parse_iso_date_variants(self):
        assert DateService.parse_iso_date("2026-10-14") == date(2026, 10, 14)
        assert DateService.parse_iso_date("2026-10-14 08:15:00") == date(2026, 10, 14)
        assert DateService.parse_iso_date(datetime(2026, 10, 14, 8, 15)) == date(2026, 10, 14)
        assert DateService.parse_iso_date(date(2026, 10, 14)) == date(2026, 10, 14)

    @pytest.mark.parametrize("value", ["", "14/10/2026", "2026-13-01", None, 20261014])
    def test_parse_iso_date_rejects(self, value):
        with pytest.raises(InvalidDateException):
            DateService.parse_iso_date(value)

    def test_date_range(self):
        assert DateService.get_date_range(date(2026, 10, 14), 7) == (date(2026, 10, 8), date(2026, 10, 14))

    def test_day_name(self):
        assert DateService.day_name(date(2026, 10, 14)) == "Wednesday"
