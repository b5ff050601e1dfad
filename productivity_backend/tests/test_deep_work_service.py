"""
Tests for DeepWorkService.

Tests cover:
1. Wall-clock timer (drift-free countdown, pause/resume, running out)
2. Completion and daily stats
3. Stats rebuild
"""
import pytest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from productivity_backend.services.deep_work_service import DeepWorkService
from productivity_backend.repositories.daily_record_repository import DailyRecordRepository
from productivity_backend.schemas import DeepWorkSessionCreate, DeepWorkSessionUpdate
from productivity_backend.exceptions import SessionNotFoundException, ValidationException

T0 = datetime(2026, 10, 14, 9, 0, 0)


@pytest.fixture
def service(db_session):
    return DeepWorkService(db_session)


def start(service, duration=3600, task="Write chapter 3"):
    return service.create_session(
        DeepWorkSessionCreate(task=task, duration=duration, is_active=True), now=T0
    )


class TestTimer:
    """Tests for the wall-clock countdown"""

    def test_time_left_follows_wall_clock(self, service):
        """Remaining time comes from elapsed wall-clock time, not ticks"""
        session = start(service)

        session = service.get_session(session.id, now=T0 + timedelta(minutes=10))

        assert session.time_left == 3000
        assert session.is_active is True

    def test_repeated_reads_do_not_drift(self, service):
        session = start(service)

        for seconds in (1.4, 2.8, 4.2, 5.6, 7.0):
            session = service.get_session(session.id, now=T0 + timedelta(seconds=seconds))

        assert session.time_left == 3600 - 7

    def test_paused_session_does_not_count_down(self, service):
        session = start(service)
        service.pause_session(session.id, now=T0 + timedelta(minutes=5))

        session = service.get_session(session.id, now=T0 + timedelta(hours=3))

        assert session.time_left == 3300
        assert session.is_active is False

    def test_resume_continues_from_pause(self, service):
        session = start(service)
        service.pause_session(session.id, now=T0 + timedelta(minutes=5))
        service.resume_session(session.id, now=T0 + timedelta(minutes=30))

        session = service.get_session(session.id, now=T0 + timedelta(minutes=40))

        assert session.time_left == 3300 - 600

    def test_runs_out(self, service):
        session = start(service, duration=600)

        assert service.get_active_session(now=T0 + timedelta(minutes=5)).id == session.id
        assert service.get_active_session(now=T0 + timedelta(hours=1)) is None

        session = service.get_session(session.id, now=T0 + timedelta(hours=1))
        assert session.time_left == 0
        assert session.is_active is False

    def test_resume_without_time_left(self, service):
        session = start(service, duration=600)
        service.get_session(session.id, now=T0 + timedelta(hours=1))

        with pytest.raises(ValidationException):
            service.resume_session(session.id, now=T0 + timedelta(hours=2))

    def test_update_time_left_resets_observation(self, service):
        session = start(service)

        service.update_session(
            session.id, DeepWorkSessionUpdate(time_left=1200), now=T0 + timedelta(minutes=20)
        )
        session = service.get_session(session.id, now=T0 + timedelta(minutes=25))

        assert session.time_left == 900

    def test_countdown_across_dst_fall_back(self, service):
        """02:50 CEST to 02:10 CET is 20 real minutes"""
        berlin = ZoneInfo("Europe/Berlin")
        before = datetime(2026, 10, 25, 2, 50, tzinfo=berlin)
        after = datetime(2026, 10, 25, 2, 10, fold=1, tzinfo=berlin)
        session = service.create_session(
            DeepWorkSessionCreate(task="Night shift", duration=3600, is_active=True), now=before
        )

        session = service.get_session(session.id, now=after)

        assert session.time_left == 2400

    def test_countdown_across_dst_spring_forward(self, service):
        """01:50 CET to 03:10 CEST is 20 real minutes"""
        berlin = ZoneInfo("Europe/Berlin")
        session = service.create_session(
            DeepWorkSessionCreate(task="Night shift", duration=3600, is_active=True),
            now=datetime(2026, 3, 29, 1, 50, tzinfo=berlin)
        )

        session = service.get_session(session.id, now=datetime(2026, 3, 29, 3, 10, tzinfo=berlin))

        assert session.time_left == 2400
        assert session.is_active is True

    def test_aware_and_naive_utc_agree(self, service):
        session = start(service)

        session = service.get_session(session.id, now=(T0 + timedelta(minutes=1)).replace(tzinfo=timezone.utc))

        assert session.time_left == 3540


class TestSessions:
    """Tests for session lifecycle"""

    def test_blank_task_rejected(self, service):
        with pytest.raises(ValidationException):
            service.create_session(DeepWorkSessionCreate(task="   "), now=T0)

    def test_time_left_defaults_to_duration(self, service):
        session = service.create_session(DeepWorkSessionCreate(task="Read", duration=1800), now=T0)

        assert session.time_left == 1800
        assert session.is_active is False

    def test_unknown_session(self, service):
        with pytest.raises(SessionNotFoundException):
            service.get_session(99, now=T0)
        with pytest.raises(SessionNotFoundException):
            service.delete_session(99)

    def test_complete_requires_output(self, service, today):
        session = start(service)

        with pytest.raises(ValidationException):
            service.complete_session(session.id, "  ", today, now=T0)

    def test_complete_session(self, service, db_session, today):
        session = start(service, duration=1500)

        session = service.complete_session(session.id, "Draft done", today, now=T0 + timedelta(minutes=20))

        assert session.completed is True
        assert session.is_active is False
        assert session.time_left == 0
        assert session.completed_date == today
        assert service.get_daily_stats(today) == {
            "date": today, "total_sprints": 1, "total_minutes": 25, "total_outputs": 1
        }
        day = DailyRecordRepository.get_by_series_and_date(db_session, "deepwork", today)
        assert day.completed is True
        assert day.count == 1

    def test_complete_twice(self, service, today):
        session = start(service)
        service.complete_session(session.id, "Done", today, now=T0)

        with pytest.raises(ValidationException):
            service.complete_session(session.id, "Again", today, now=T0)

    def test_completed_session_cannot_restart(self, service, today):
        session = start(service)
        service.complete_session(session.id, "Done", today, now=T0)

        with pytest.raises(ValidationException):
            service.update_session(session.id, DeepWorkSessionUpdate(is_active=True), now=T0)

    def test_lists(self, service, today):
        first = start(service, task="First")
        second = start(service, task="Second")
        service.complete_session(first.id, "Done", today, now=T0)

        assert {s.id for s in service.get_sessions(now=T0)} == {first.id, second.id}
        assert [s.id for s in service.get_completed_sessions()] == [first.id]
        assert service.get_active_session(now=T0).id == second.id


class TestStats:
    """Tests for lifetime and daily stats"""

    def test_empty_day(self, service, today):
        assert service.get_daily_stats(today) == {
            "date": today, "total_sprints": 0, "total_minutes": 0, "total_outputs": 0
        }

    def test_lifetime_stats(self, service, today, yesterday):
        a = start(service, duration=3600)
        b = start(service, duration=1800)
        service.complete_session(a.id, "A", yesterday, now=T0)
        service.complete_session(b.id, "B", today, now=T0)

        assert service.get_stats() == {"total_sprints": 2, "total_minutes": 90, "total_outputs": 2}

    def test_rebuild_after_delete(self, service, db_session, today, yesterday):
        """Deleting a session leaves stats alone until they are rebuilt"""
        a = start(service)
        b = start(service)
        service.complete_session(a.id, "A", yesterday, now=T0)
        service.complete_session(b.id, "B", today, now=T0)
        service.delete_session(a.id)
        assert service.get_daily_stats(yesterday)["total_sprints"] == 1

        rebuilt = service.rebuild_daily_stats()

        assert [day["date"] for day in rebuilt] == [today]
        assert service.get_daily_stats(yesterday)["total_sprints"] == 0
        assert DailyRecordRepository.get_by_series_and_date(db_session, "deepwork", yesterday) is None
        assert DailyRecordRepository.get_by_series_and_date(db_session, "deepwork", today).count == 1
