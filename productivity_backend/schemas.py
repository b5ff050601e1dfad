from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import Optional, List, Dict

from productivity_backend.constants import DEFAULT_TIMEZONE, DEFAULT_WINDOW_SIZE_DAYS

DAY_START_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# Daily record / streak schemas
class DailyRecordResponse(BaseModel):
    id: int
    series: str
    date: date
    completed: bool
    task: Optional[str] = None
    count: Optional[int] = None
    target: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WindowDay(BaseModel):
    date: date
    completed: Optional[bool]  # None when no record exists
    has_task: bool


class PeriodStats(BaseModel):
    period: str  # "2026-W42" or "2026-10"
    total: int
    completed: int
    completion_rate: float


class StreakPair(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0


class StreakSummaryResponse(StreakPair):
    last_30_days: List[WindowDay] = []
    weekly_stats: List[PeriodStats] = []
    monthly_stats: List[PeriodStats] = []
    streak_percentage: int = 0


class SeriesHistoryResponse(BaseModel):
    history: List[DailyRecordResponse]
    streak: StreakPair


# MIT schemas
class MITTaskSet(BaseModel):
    task: str = Field(..., max_length=500)


class MITCompleteUpdate(BaseModel):
    completed: bool


class MITTodayResponse(BaseModel):
    id: Optional[int] = None
    date: date
    task: str = ""
    completed: bool = False
    exists: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MITWeekdayEntry(BaseModel):
    date: date
    completed: bool
    day_name: str


# Output schemas
class OutputTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    unit: str = Field(..., min_length=1, max_length=50)
    target: int = Field(..., ge=1)
    color: Optional[str] = Field(None, max_length=30)

    @field_validator("name", "unit")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return _strip_required(value)


class OutputTypeCreate(OutputTypeBase):
    pass


class OutputTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    target: Optional[int] = Field(None, ge=1)
    color: Optional[str] = Field(None, max_length=30)

    @field_validator("name", "unit")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _strip_required(value)


class OutputTypeResponse(BaseModel):
    id: int
    name: str
    unit: str
    target: int
    color: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OutputEntryCreate(BaseModel):
    date: date
    type: str = Field(..., min_length=1)
    count: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=1000)


class OutputEntryResponse(BaseModel):
    id: int
    date: date
    type: str
    count: int
    notes: Optional[str] = None
    unit: Optional[str] = None
    color: Optional[str] = None
    target: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class OutputTypeDayStats(BaseModel):
    today_total: int
    entries_count: int
    target: int
    percentage: float


class OutputDailyStatsResponse(BaseModel):
    date: date
    total_output: int
    entries_count: int
    streak: int
    type_stats: Dict[str, OutputTypeDayStats]


# Deep work schemas
class DeepWorkSessionCreate(BaseModel):
    task: str = Field(..., max_length=500)
    duration: int = Field(default=3600, ge=60, le=6 * 3600)
    time_left: Optional[int] = Field(None, ge=0)
    is_active: bool = False
    is_task_locked: bool = False


class DeepWorkSessionUpdate(BaseModel):
    task: Optional[str] = Field(None, max_length=500)
    duration: Optional[int] = Field(None, ge=60, le=6 * 3600)
    time_left: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    is_task_locked: Optional[bool] = None
    session_output: Optional[str] = None


class DeepWorkSessionComplete(BaseModel):
    session_output: str = Field(..., max_length=2000)


class DeepWorkSessionResponse(BaseModel):
    id: int
    task: str
    duration: int
    time_left: int
    last_observed_at: Optional[datetime] = None
    is_active: bool
    is_task_locked: bool
    session_output: str = ""
    completed: bool
    completed_at: Optional[datetime] = None
    completed_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DeepWorkStatsResponse(BaseModel):
    total_sprints: int = 0
    total_minutes: int = 0
    total_outputs: int = 0


class DeepWorkDailyStatsResponse(DeepWorkStatsResponse):
    date: date


# Settings schemas
class SettingsBase(BaseModel):
    timezone: str = Field(default=DEFAULT_TIMEZONE, min_length=1, max_length=64)
    day_start_enabled: bool = Field(default=False)
    day_start_time: str = Field(default="06:00", pattern=DAY_START_PATTERN)
    window_size_days: int = Field(default=DEFAULT_WINDOW_SIZE_DAYS, ge=7, le=366)


class SettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value"""
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)
    day_start_enabled: Optional[bool] = None
    day_start_time: Optional[str] = Field(None, pattern=DAY_START_PATTERN)
    window_size_days: Optional[int] = Field(None, ge=7, le=366)


class SettingsResponse(SettingsBase):
    id: int
    updated_at: datetime
    effective_date: Optional[date] = None  # Current date in the reference time zone

    class Config:
        from_attributes = True
