"""
Streak and continuity statistics.

Pure computations over a collection of daily records: current and longest
streak, a rolling window of per-day status for heatmaps, and weekly/monthly
completion buckets. Nothing here touches the database; callers pass in
whatever the repositories returned.

A record is anything with a `date` and a `completed` value, either as
attributes (ORM rows) or as mapping keys (dicts). Dates may be `date`,
`datetime` or ISO strings; completion flags may be booleans, 0/1 or their
string forms. Records that cannot be read are skipped and logged.
"""
import logging
from collections import OrderedDict
from collections.abc import Mapping
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from productivity_backend.constants import (
    GRANULARITY_WEEK,
    GRANULARITY_MONTH,
    DEFAULT_WINDOW_SIZE_DAYS,
    WEEKLY_STATS_LOOKBACK_DAYS,
    WEEKLY_STATS_LIMIT,
    MONTHLY_STATS_LIMIT,
)
from productivity_backend.exceptions import InvalidDateException
from productivity_backend.services.date_service import DateService

logger = logging.getLogger("dashboard.streaks")

_TRUE_STRINGS = {"1", "true", "t", "yes"}
_FALSE_STRINGS = {"0", "false", "f", "no", ""}


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _to_bool(value: Any) -> bool:
    """Read a completion flag stored as bool, 0/1 or text."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"Unreadable completion flag: {value!r}")


class StreakService:
    """Streak, window and period statistics over daily records"""

    @staticmethod
    def normalize_records(records: Optional[Iterable[Any]]) -> Dict[date, bool]:
        """
        Reduce raw records to a {date: completed} mapping.

        Malformed records are skipped with a warning so one corrupt row
        cannot take down the whole aggregate. If a date appears twice the
        later record wins.
        """
        days: Dict[date, bool] = {}
        if not records:
            return days

        for record in records:
            if record is None:
                continue
            raw_date = _field(record, "date")
            try:
                record_date = DateService.parse_iso_date(raw_date)
                completed = _to_bool(_field(record, "completed"))
            except (InvalidDateException, ValueError) as e:
                logger.warning(f"Skipping malformed record {raw_date!r}: {e}")
                continue

            if record_date in days:
                logger.warning(f"Duplicate record for {record_date.isoformat()}, keeping the later one")
            days[record_date] = completed

        return days

    @staticmethod
    def compute_current_and_longest_streak(
        records: Iterable[Any],
        reference_date: date
    ) -> Tuple[int, int]:
        """
        Compute (current_streak, longest_streak).

        The current streak counts consecutive completed dates ending at
        reference_date inclusive; if reference_date itself has no completed
        record the current streak is 0. A missing date breaks a run exactly
        like an incomplete one. Records dated after reference_date are ignored.

        longest_streak is the longest run anywhere in the history and may be
        larger than current_streak.
        """
        days = StreakService.normalize_records(records)
        return StreakService._streaks(days, reference_date)

    @staticmethod
    def build_rolling_window(
        records: Iterable[Any],
        window_size_days: int,
        reference_date: date
    ) -> List[dict]:
        """
        Build exactly window_size_days entries, oldest first, ending at reference_date.

        Dates without a record appear with completed=None and has_task=False.
        """
        if window_size_days < 1:
            raise ValueError("window_size_days must be at least 1")
        days = StreakService.normalize_records(records)
        return StreakService._window(days, window_size_days, reference_date)

    @staticmethod
    def group_by_period(
        records: Iterable[Any],
        granularity: str,
        limit: Optional[int] = None
    ) -> List[dict]:
        """
        Bucket records by ISO week ("YYYY-Www") or month ("YYYY-MM").

        Each bucket carries total, completed and
        completion_rate = round(100 * completed / total, 1).
        Buckets are ordered most recent period first; empty buckets are never
        emitted.

        Args:
            records: Daily records to group
            granularity: "week" or "month"
            limit: Keep only the N most recent buckets

        Raises:
            ValueError: If granularity is not supported
        """
        if granularity not in (GRANULARITY_WEEK, GRANULARITY_MONTH):
            raise ValueError(f"Unsupported granularity: {granularity}")
        days = StreakService.normalize_records(records)
        return StreakService._periods(days, granularity, limit)

    @staticmethod
    def build_summary(
        records: Iterable[Any],
        reference_date: date,
        window_size_days: int = DEFAULT_WINDOW_SIZE_DAYS
    ) -> dict:
        """
        Build the full streak summary for a series.

        Weekly stats cover the last 90 days (12 buckets at most); monthly
        stats keep the 6 most recent months. A series with no history gets
        zero streaks, a window of empty days and no buckets.
        """
        if window_size_days < 1:
            raise ValueError("window_size_days must be at least 1")

        days = StreakService.normalize_records(records)
        days = {d: done for d, done in days.items() if d <= reference_date}

        current, longest = StreakService._streaks(days, reference_date)

        weekly_start = reference_date - timedelta(days=WEEKLY_STATS_LOOKBACK_DAYS - 1)
        recent_days = {d: done for d, done in days.items() if d >= weekly_start}

        return {
            "current_streak": current,
            "longest_streak": longest,
            "last_30_days": StreakService._window(days, window_size_days, reference_date),
            "weekly_stats": StreakService._periods(recent_days, GRANULARITY_WEEK, WEEKLY_STATS_LIMIT),
            "monthly_stats": StreakService._periods(days, GRANULARITY_MONTH, MONTHLY_STATS_LIMIT),
            "streak_percentage": StreakService.streak_percentage(current, window_size_days),
        }

    @staticmethod
    def streak_percentage(current_streak: int, window_size_days: int = DEFAULT_WINDOW_SIZE_DAYS) -> int:
        """Current streak as a share of the window, capped at 100"""
        if current_streak <= 0 or window_size_days <= 0:
            return 0
        return min(100, int(current_streak * 100 / window_size_days + 0.5))

    @staticmethod
    def _streaks(days: Dict[date, bool], reference_date: date) -> Tuple[int, int]:
        current = 0
        cursor = reference_date
        while days.get(cursor):
            current += 1
            cursor -= timedelta(days=1)

        longest = 0
        run = 0
        previous: Optional[date] = None
        for completed_date in sorted(d for d, done in days.items() if done and d <= reference_date):
            if previous is not None and (completed_date - previous).days == 1:
                run += 1
            else:
                run = 1
            longest = max(longest, run)
            previous = completed_date

        return current, longest

    @staticmethod
    def _window(days: Dict[date, bool], window_size_days: int, reference_date: date) -> List[dict]:
        start, _ = DateService.get_date_range(reference_date, window_size_days)
        window = []
        for offset in range(window_size_days):
            day = start + timedelta(days=offset)
            if day in days:
                window.append({"date": day, "completed": days[day], "has_task": True})
            else:
                window.append({"date": day, "completed": None, "has_task": False})
        return window

    @staticmethod
    def _period_key(day: date, granularity: str) -> str:
        if granularity == GRANULARITY_WEEK:
            iso_year, iso_week, _ = day.isocalendar()
            return f"{iso_year}-W{iso_week:02d}"
        return day.strftime("%Y-%m")

    @staticmethod
    def _periods(days: Dict[date, bool], granularity: str, limit: Optional[int]) -> List[dict]:
        buckets: "OrderedDict[str, List[int]]" = OrderedDict()
        for day in sorted(days, reverse=True):
            key = StreakService._period_key(day, granularity)
            counts = buckets.setdefault(key, [0, 0])
            counts[0] += 1
            if days[day]:
                counts[1] += 1

        stats = []
        for period, (total, completed) in buckets.items():
            if total == 0:
                continue
            stats.append({
                "period": period,
                "total": total,
                "completed": completed,
                "completion_rate": round(100 * completed / total, 1),
            })

        if limit is not None:
            stats = stats[:limit]
        return stats
