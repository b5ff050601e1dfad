"""
Most-Important-Task (MIT) daily service.
One task per day stored as a record of the "mit" series.
"""
import logging
from datetime import date, timedelta
from typing import List
from sqlalchemy.orm import Session

from productivity_backend.models import DailyRecord
from productivity_backend.repositories.daily_record_repository import DailyRecordRepository
from productivity_backend.services.date_service import DateService
from productivity_backend.services.series_service import SeriesService
from productivity_backend.services.streak_service import StreakService
from productivity_backend.exceptions import RecordNotFoundException, ValidationException
from productivity_backend.constants import (
    SERIES_MIT, GRANULARITY_MONTH, MIT_WEEKLY_LOOKBACK_DAYS, DEFAULT_WINDOW_SIZE_DAYS
)

logger = logging.getLogger("dashboard.mit")


class MITService:
    """Service for the daily most important task"""

    def __init__(self, db: Session):
        self.db = db
        self.record_repo = DailyRecordRepository()
        self.series_service = SeriesService(db)

    def get_today(self, today: date) -> dict:
        """Get today's MIT, or an empty placeholder if none was set"""
        record = self.record_repo.get_by_series_and_date(self.db, SERIES_MIT, today)
        if not record:
            return {"date": today, "task": "", "completed": False, "exists": False}

        return {
            "id": record.id,
            "date": record.date,
            "task": record.task or "",
            "completed": bool(record.completed),
            "exists": True,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }

    def set_today(self, task: str, today: date) -> DailyRecord:
        """
        Set (or replace) today's MIT.

        Changing the text resets completion; re-submitting the same text
        keeps it.

        Raises:
            ValidationException: If the task text is blank
        """
        text = (task or "").strip()
        if not text:
            raise ValidationException("task", "Task is required")

        existing = self.record_repo.get_by_series_and_date(self.db, SERIES_MIT, today)
        completed = bool(existing.completed) if existing and existing.task == text else False

        record = self.record_repo.upsert_record(
            self.db, SERIES_MIT, today, {"task": text, "completed": completed}
        )
        logger.info(f"MIT set for {today.isoformat()}")
        return record

    def toggle_complete(self, record_id: int, completed: bool, today: date) -> DailyRecord:
        """
        Mark today's MIT done or not done.

        Raises:
            RecordNotFoundException: If no MIT has this ID
            ValidationException: If the MIT is not today's
        """
        record = self._get_mit(record_id)

        if record.date != today:
            raise ValidationException("completed", "Can only update completion for today's task")

        updated = self.record_repo.upsert_record(
            self.db, SERIES_MIT, record.date, {"completed": bool(completed)}
        )
        logger.info(f"MIT {record_id} completed={bool(completed)}")
        return updated

    def delete(self, record_id: int) -> None:
        """
        Delete an MIT.

        Raises:
            RecordNotFoundException: If no MIT has this ID
        """
        record = self._get_mit(record_id)
        self.record_repo.delete(self.db, record)
        logger.info(f"MIT {record_id} deleted")

    def get_history(self, limit: int, today: date) -> dict:
        """Most recent MITs and the current/longest streak"""
        return self.series_service.get_history(SERIES_MIT, limit, today)

    def get_streak_summary(self, today: date, window_size_days: int = DEFAULT_WINDOW_SIZE_DAYS) -> dict:
        """Full streak summary for the MIT series"""
        return self.series_service.get_streak_summary(SERIES_MIT, today, window_size_days)

    def get_weekly_completion(self, today: date) -> List[dict]:
        """MITs of the last four weeks with their weekday names, oldest first"""
        start = today - timedelta(days=MIT_WEEKLY_LOOKBACK_DAYS)
        records = self.record_repo.find_records_in_range(self.db, SERIES_MIT, start, today)
        return [
            {
                "date": record.date,
                "completed": bool(record.completed),
                "day_name": DateService.day_name(record.date),
            }
            for record in records
        ]

    def get_monthly_stats(self, today: date) -> List[dict]:
        """Completion per month over all history, most recent first"""
        records = self.series_service.get_records(SERIES_MIT, today)
        return StreakService.group_by_period(records, GRANULARITY_MONTH)

    def _get_mit(self, record_id: int) -> DailyRecord:
        record = self.record_repo.get_by_id(self.db, record_id)
        if not record or record.series != SERIES_MIT:
            raise RecordNotFoundException(record_id)
        return record
