"""
Date calculation and manipulation service.
Handles the reference time zone, effective dates and day start time logic.
"""
from datetime import datetime, timedelta, date
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from productivity_backend.models import Settings
from productivity_backend.constants import DEFAULT_TIMEZONE
from productivity_backend.exceptions import InvalidDateException, ValidationException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def get_zone(name: Optional[str]) -> ZoneInfo:
        """
        Resolve an IANA time zone name.

        Raises:
            ValidationException: If the zone is unknown
        """
        try:
            return ZoneInfo(name or DEFAULT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationException("timezone", f"unknown time zone {name!r}")

    @staticmethod
    def get_effective_date(settings: Settings, now: Optional[datetime] = None) -> date:
        """
        Get the effective current date in the settings' reference time zone.

        If day_start_enabled is True and the local time is before
        day_start_time, returns yesterday's date.

        Example: If day_start_time = "06:00" and local time is 03:00,
        the effective date is still yesterday because the user hasn't
        started their "new day" yet.

        Args:
            settings: Settings object with timezone and day_start configuration
            now: Current instant. Naive values are taken as local to the
                reference zone; aware values are converted into it.

        Returns:
            Effective date (today or yesterday)
        """
        zone = DateService.get_zone(settings.timezone)
        if now is None:
            now = datetime.now(zone)
        elif now.tzinfo is not None:
            now = now.astimezone(zone)

        today = now.date()

        if not settings.day_start_enabled:
            return today

        try:
            day_start_hour, day_start_minute = DateService.parse_time(
                settings.day_start_time or "06:00"
            )
        except (ValueError, IndexError, AttributeError):
            return today

        # If current time is before day_start_time, we're still in "yesterday"
        current_minutes = now.hour * 60 + now.minute
        start_minutes = day_start_hour * 60 + day_start_minute

        if current_minutes < start_minutes:
            return today - timedelta(days=1)

        return today

    @staticmethod
    def parse_time(time_str: str) -> tuple[int, int]:
        """
        Parse time string into hour and minute.

        Args:
            time_str: Time string in "HH:MM" format

        Returns:
            Tuple of (hour, minute)

        Raises:
            ValueError: If time string is invalid
        """
        parts = time_str.split(":")
        hour = int(parts[0])
        minute = int(parts[1])
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Time out of range: {time_str}")
        return hour, minute

    @staticmethod
    def parse_iso_date(value: Union[str, date, datetime, None]) -> date:
        """
        Coerce a stored or submitted value into a calendar date.

        Accepts date objects, datetimes (date part is used) and ISO strings
        ("YYYY-MM-DD", optionally followed by a time part).

        Raises:
            InvalidDateException: If the value cannot be read as a date
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                pass
        raise InvalidDateException(value)

    @staticmethod
    def get_date_range(reference_date: date, days: int) -> tuple[date, date]:
        """
        Get the inclusive range of `days` calendar dates ending at reference_date.

        Args:
            reference_date: Last date of the range
            days: Number of dates in the range (>= 1)

        Returns:
            Tuple of (first_date, reference_date)
        """
        return reference_date - timedelta(days=max(days, 1) - 1), reference_date

    @staticmethod
    def day_name(target_date: date) -> str:
        """English weekday name, e.g. "Monday" """
        return target_date.strftime("%A")
