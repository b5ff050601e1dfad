"""
Series service - streak statistics for any tracked series.
Reads records through the repository and hands them to the streak engine.
"""
from datetime import date
from typing import List
from sqlalchemy.orm import Session

from productivity_backend.models import DailyRecord
from productivity_backend.repositories.daily_record_repository import DailyRecordRepository
from productivity_backend.services.streak_service import StreakService
from productivity_backend.constants import DEFAULT_WINDOW_SIZE_DAYS


class SeriesService:
    """Service for series-level statistics"""

    def __init__(self, db: Session):
        self.db = db
        self.record_repo = DailyRecordRepository()

    def list_series(self) -> List[str]:
        """Get names of all series with history"""
        return self.record_repo.list_series(self.db)

    def get_records(self, series: str, until: date) -> List[DailyRecord]:
        """All records of a series up to and including a date"""
        return self.record_repo.find_records_in_range(self.db, series, None, until)

    def get_streak_pair(self, series: str, today: date) -> dict:
        """Current and longest streak of a series"""
        current, longest = StreakService.compute_current_and_longest_streak(
            self.get_records(series, today), today
        )
        return {"current_streak": current, "longest_streak": longest}

    def get_streak_summary(
        self,
        series: str,
        today: date,
        window_size_days: int = DEFAULT_WINDOW_SIZE_DAYS
    ) -> dict:
        """
        Full streak summary. A series without records yields an empty
        summary rather than an error.
        """
        return StreakService.build_summary(
            self.get_records(series, today), today, window_size_days
        )

    def get_history(self, series: str, limit: int, today: date) -> dict:
        """Most recent N records plus the current/longest streak pair"""
        history = self.record_repo.get_recent(self.db, series, limit)
        return {
            "history": history,
            "streak": self.get_streak_pair(series, today),
        }
