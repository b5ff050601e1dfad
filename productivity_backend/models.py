from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, UniqueConstraint
from datetime import datetime

from productivity_backend.database import Base
from productivity_backend.constants import (
    DEFAULT_TIMEZONE, DEFAULT_WINDOW_SIZE_DAYS, DEFAULT_OUTPUT_COLOR, DEFAULT_SESSION_DURATION
)


class DailyRecord(Base):
    """One row per (series, date). `completed` is decided by the writer."""
    __tablename__ = "daily_records"
    __table_args__ = (
        UniqueConstraint("series", "date", name="uq_daily_records_series_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    series = Column(String, nullable=False, index=True)  # mit, output, output:<type>, deepwork
    date = Column(Date, nullable=False, index=True)
    completed = Column(Boolean, default=False)

    # Series-specific payload
    task = Column(String, nullable=True)     # MIT text
    count = Column(Integer, nullable=True)   # Output count / sprints
    target = Column(Integer, nullable=True)  # Output target at write time

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class OutputType(Base):
    __tablename__ = "output_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True, index=True)
    unit = Column(String, nullable=False)  # e.g. "words", "commits"
    target = Column(Integer, nullable=False, default=1)  # Daily target
    color = Column(String, default=DEFAULT_OUTPUT_COLOR)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class OutputEntry(Base):
    __tablename__ = "output_entries"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    type = Column(String, nullable=False, index=True)  # OutputType.name
    count = Column(Integer, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class DeepWorkSession(Base):
    __tablename__ = "deep_work_sessions"

    id = Column(Integer, primary_key=True, index=True)
    task = Column(String, nullable=False)
    duration = Column(Integer, default=DEFAULT_SESSION_DURATION)  # seconds
    time_left = Column(Integer, default=DEFAULT_SESSION_DURATION)  # seconds, as of last_observed_at
    last_observed_at = Column(DateTime(timezone=True), nullable=True)  # UTC instant time_left was last recomputed
    is_active = Column(Boolean, default=False)
    is_task_locked = Column(Boolean, default=False)
    session_output = Column(String, default="")
    completed = Column(Boolean, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)  # UTC
    completed_date = Column(Date, nullable=True)  # Effective date the sprint counts toward
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class DeepWorkStat(Base):
    __tablename__ = "deep_work_stats"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True)
    total_sprints = Column(Integer, default=0)
    total_minutes = Column(Integer, default=0)
    total_outputs = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)

    # Reference time zone for "today" (IANA name, e.g. "Europe/Berlin")
    timezone = Column(String, default=DEFAULT_TIMEZONE)

    # Day boundary: before day_start_time the effective date is still yesterday
    day_start_enabled = Column(Boolean, default=False)
    day_start_time = Column(String, default="06:00")  # HH:MM

    # Rolling window length for heatmaps
    window_size_days = Column(Integer, default=DEFAULT_WINDOW_SIZE_DAYS)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
