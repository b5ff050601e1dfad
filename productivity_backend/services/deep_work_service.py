"""
Deep work session service.

A session's countdown is stored as `time_left` as of `last_observed_at`.
While a session runs, every read recomputes the remaining time from the
wall-clock delta since the last observation instead of trusting a tick
counter, so missed ticks (a closed tab, a sleeping laptop) never cause drift.

All instants are stored and compared as UTC.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session

from productivity_backend.models import DeepWorkSession, DeepWorkStat
from productivity_backend.schemas import DeepWorkSessionCreate, DeepWorkSessionUpdate
from productivity_backend.repositories.deep_work_repository import (
    DeepWorkSessionRepository, DeepWorkStatRepository
)
from productivity_backend.repositories.daily_record_repository import DailyRecordRepository
from productivity_backend.exceptions import SessionNotFoundException, ValidationException
from productivity_backend.constants import SERIES_DEEP_WORK

logger = logging.getLogger("dashboard.deepwork")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize an instant to aware UTC.

    Naive values are taken as UTC; SQLite hands stored timestamps back
    without their offset.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now(now: Optional[datetime] = None) -> datetime:
    """The given instant in UTC, or the current one"""
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


class DeepWorkService:
    """Service for deep work sessions and their statistics"""

    def __init__(self, db: Session):
        self.db = db
        self.session_repo = DeepWorkSessionRepository()
        self.stat_repo = DeepWorkStatRepository()
        self.record_repo = DailyRecordRepository()

    # ===== TIMER =====

    @staticmethod
    def observe(session: DeepWorkSession, now: datetime) -> bool:
        """
        Bring a running session's remaining time up to `now`.

        Only whole elapsed seconds are consumed; the fractional remainder
        stays in last_observed_at for the next read. A session whose time
        runs out stops being active.

        Returns:
            True if the session changed
        """
        now = as_utc(now)
        if not session.is_active or session.completed:
            return False

        if session.last_observed_at is None:
            session.last_observed_at = now
            return True

        last_observed = as_utc(session.last_observed_at)
        elapsed = int((now - last_observed).total_seconds())
        if elapsed <= 0:
            return False

        session.time_left = max(0, (session.time_left or 0) - elapsed)
        session.last_observed_at = last_observed + timedelta(seconds=elapsed)

        if session.time_left == 0:
            session.is_active = False
            logger.info(f"Deep work session {session.id} ran out of time")

        return True

    def _observe_and_save(self, session: DeepWorkSession, now: datetime) -> DeepWorkSession:
        if self.observe(session, now):
            return self.session_repo.update(self.db, session)
        return session

    # ===== SESSIONS =====

    def get_session(self, session_id: int, now: Optional[datetime] = None) -> DeepWorkSession:
        """
        Get a session with its timer brought up to date.

        Raises:
            SessionNotFoundException: If the session does not exist
        """
        session = self.session_repo.get_by_id(self.db, session_id)
        if not session:
            raise SessionNotFoundException(session_id)
        return self._observe_and_save(session, utc_now(now))

    def get_sessions(self, now: Optional[datetime] = None) -> List[DeepWorkSession]:
        """All sessions, newest first"""
        now = utc_now(now)
        return [self._observe_and_save(s, now) for s in self.session_repo.get_all(self.db)]

    def get_active_session(self, now: Optional[datetime] = None) -> Optional[DeepWorkSession]:
        """The running session, or None if nothing is running (or it just ran out)"""
        session = self.session_repo.get_active(self.db)
        if not session:
            return None
        session = self._observe_and_save(session, utc_now(now))
        return session if session.is_active else None

    def get_completed_sessions(self) -> List[DeepWorkSession]:
        """Completed sessions, most recent first"""
        return self.session_repo.get_completed(self.db)

    def create_session(self, data: DeepWorkSessionCreate, now: Optional[datetime] = None) -> DeepWorkSession:
        """
        Create a session.

        Raises:
            ValidationException: If the task is blank
        """
        now = utc_now(now)
        task = (data.task or "").strip()
        if not task:
            raise ValidationException("task", "Task is required")

        time_left = data.duration if data.time_left is None else min(data.time_left, data.duration)

        session = DeepWorkSession(
            task=task,
            duration=data.duration,
            time_left=time_left,
            is_active=data.is_active and time_left > 0,
            is_task_locked=data.is_task_locked,
            session_output="",
            completed=False,
            last_observed_at=now
        )
        session = self.session_repo.create(self.db, session)
        logger.info(f"Deep work session {session.id} created ({session.duration}s): {task}")
        return session

    def update_session(
        self,
        session_id: int,
        session_update: DeepWorkSessionUpdate,
        now: Optional[datetime] = None
    ) -> DeepWorkSession:
        """
        Apply a partial update.

        The timer is observed first so a pause or a manual time_left change
        starts from the correct remaining time.

        Raises:
            SessionNotFoundException: If the session does not exist
            ValidationException: If a completed session would be restarted
        """
        now = utc_now(now)
        session = self.get_session(session_id, now)

        update_data = session_update.model_dump(exclude_unset=True)
        if "task" in update_data:
            task = (update_data["task"] or "").strip()
            if not task:
                raise ValidationException("task", "Task is required")
            update_data["task"] = task

        if session.completed and update_data.get("is_active"):
            raise ValidationException("is_active", "Session already completed")

        for key, value in update_data.items():
            if value is not None:
                setattr(session, key, value)

        if session.duration is not None and session.time_left > session.duration:
            session.time_left = session.duration

        # Any change to the running state or remaining time restarts the observation
        if "is_active" in update_data or "time_left" in update_data:
            session.last_observed_at = now
        if session.time_left == 0:
            session.is_active = False

        return self.session_repo.update(self.db, session)

    def pause_session(self, session_id: int, now: Optional[datetime] = None) -> DeepWorkSession:
        """Stop the countdown, keeping the remaining time"""
        return self.update_session(session_id, DeepWorkSessionUpdate(is_active=False), now)

    def resume_session(self, session_id: int, now: Optional[datetime] = None) -> DeepWorkSession:
        """
        Restart the countdown.

        Raises:
            ValidationException: If no time is left
        """
        session = self.get_session(session_id, now)
        if session.time_left <= 0:
            raise ValidationException("time_left", "No time left in this session")
        return self.update_session(session_id, DeepWorkSessionUpdate(is_active=True), now)

    def complete_session(
        self,
        session_id: int,
        session_output: str,
        today: date,
        now: Optional[datetime] = None
    ) -> DeepWorkSession:
        """
        Complete a session with its output and count it toward today's stats.

        Args:
            session_id: Session to complete
            session_output: What the sprint produced (required)
            today: Effective date the sprint counts toward
            now: Completion instant

        Raises:
            SessionNotFoundException: If the session does not exist
            ValidationException: If the output is blank or the session is already completed
        """
        now = utc_now(now)
        output = (session_output or "").strip()
        if not output:
            raise ValidationException("session_output", "Session output is required for completion")

        session = self.get_session(session_id, now)
        if session.completed:
            raise ValidationException("completed", "Session already completed")

        session.session_output = output
        session.completed = True
        session.is_active = False
        session.time_left = 0
        session.is_task_locked = False
        session.completed_at = now
        session.completed_date = today
        session.last_observed_at = now
        session = self.session_repo.update(self.db, session)

        self._add_to_daily_stats(today, sprints=1, minutes=(session.duration or 0) // 60, outputs=1)
        logger.info(f"Deep work session {session_id} completed on {today.isoformat()}")
        return session

    def delete_session(self, session_id: int) -> None:
        """
        Delete a session. Daily stats are left as they are; use
        rebuild_daily_stats() to recount.

        Raises:
            SessionNotFoundException: If the session does not exist
        """
        session = self.session_repo.get_by_id(self.db, session_id)
        if not session:
            raise SessionNotFoundException(session_id)
        self.session_repo.delete(self.db, session)

    # ===== STATS =====

    def get_stats(self) -> dict:
        """Lifetime totals over completed sessions"""
        completed = self.session_repo.get_completed(self.db)
        return {
            "total_sprints": len(completed),
            "total_minutes": sum(s.duration or 0 for s in completed) // 60,
            "total_outputs": len(completed),
        }

    def get_daily_stats(self, target_date: date) -> dict:
        """Stats for one day (zeros when nothing was completed)"""
        stat = self.stat_repo.get_by_date(self.db, target_date)
        if not stat:
            return {"date": target_date, "total_sprints": 0, "total_minutes": 0, "total_outputs": 0}
        return {
            "date": stat.date,
            "total_sprints": stat.total_sprints or 0,
            "total_minutes": stat.total_minutes or 0,
            "total_outputs": stat.total_outputs or 0,
        }

    def rebuild_daily_stats(self) -> List[dict]:
        """Recount every day's stats and the deep work series from completed sessions"""
        self.stat_repo.delete_all(self.db)
        self.record_repo.delete_series(self.db, SERIES_DEEP_WORK)

        for session in self.session_repo.get_completed(self.db):
            session_date = session.completed_date or (session.completed_at or session.created_at).date()
            self._add_to_daily_stats(
                session_date, sprints=1, minutes=(session.duration or 0) // 60, outputs=1
            )

        stats = self.stat_repo.get_all(self.db)
        logger.info(f"Deep work stats rebuilt for {len(stats)} day(s)")
        return [self.get_daily_stats(stat.date) for stat in stats]

    def _add_to_daily_stats(self, target_date: date, sprints: int, minutes: int, outputs: int) -> DeepWorkStat:
        stat = self.stat_repo.get_by_date(self.db, target_date)
        if stat:
            stat.total_sprints = (stat.total_sprints or 0) + sprints
            stat.total_minutes = (stat.total_minutes or 0) + minutes
            stat.total_outputs = (stat.total_outputs or 0) + outputs
            stat = self.stat_repo.update(self.db, stat)
        else:
            stat = self.stat_repo.create(self.db, DeepWorkStat(
                date=target_date,
                total_sprints=sprints,
                total_minutes=minutes,
                total_outputs=outputs
            ))

        self.record_repo.upsert_record(self.db, SERIES_DEEP_WORK, target_date, {
            "count": stat.total_sprints,
            "completed": stat.total_sprints > 0,
        })
        return stat
