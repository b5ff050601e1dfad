"""
MIT (most important task) HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from typing import List

from productivity_backend.database import get_db
from productivity_backend.services.mit_service import MITService
from productivity_backend.services.settings_service import SettingsService
from productivity_backend.schemas import (
    MITTaskSet, MITCompleteUpdate, MITTodayResponse, MITWeekdayEntry,
    DailyRecordResponse, SeriesHistoryResponse, StreakSummaryResponse, PeriodStats
)
from productivity_backend.exceptions import RecordNotFoundException, ValidationException
from productivity_backend.constants import DEFAULT_HISTORY_LIMIT

router = APIRouter(prefix="/api/mit", tags=["mit"])


@router.get("/today", response_model=MITTodayResponse)
def get_today_mit(db: Session = Depends(get_db)):
    """Get today's MIT (an empty placeholder if none was set)."""
    today = SettingsService(db).get_effective_date()
    return MITService(db).get_today(today)


@router.post("/today", response_model=DailyRecordResponse)
def set_today_mit(mit: MITTaskSet, db: Session = Depends(get_db)):
    """Set or replace today's MIT."""
    today = SettingsService(db).get_effective_date()
    try:
        return MITService(db).set_today(mit.task, today)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.patch("/{mit_id}/complete", response_model=DailyRecordResponse)
def complete_mit(mit_id: int, update: MITCompleteUpdate, db: Session = Depends(get_db)):
    """Mark today's MIT as done or not done."""
    today = SettingsService(db).get_effective_date()
    try:
        return MITService(db).toggle_complete(mit_id, update.completed, today)
    except RecordNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/{mit_id}")
def delete_mit(mit_id: int, db: Session = Depends(get_db)):
    """Delete an MIT."""
    try:
        MITService(db).delete(mit_id)
    except RecordNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "MIT deleted successfully"}


@router.get("/history", response_model=SeriesHistoryResponse)
def get_mit_history(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=366),
    db: Session = Depends(get_db)
):
    """Recent MITs with the current and longest streak."""
    today = SettingsService(db).get_effective_date()
    return MITService(db).get_history(limit, today)


@router.get("/streak", response_model=StreakSummaryResponse)
def get_mit_streak(db: Session = Depends(get_db)):
    """Full MIT streak summary."""
    settings_service = SettingsService(db)
    today = settings_service.get_effective_date()
    return MITService(db).get_streak_summary(today, settings_service.get_window_size())


@router.get("/weekly", response_model=List[MITWeekdayEntry])
def get_mit_weekly(db: Session = Depends(get_db)):
    """MITs of the last four weeks."""
    today = SettingsService(db).get_effective_date()
    return MITService(db).get_weekly_completion(today)


@router.get("/monthly", response_model=List[PeriodStats])
def get_mit_monthly(db: Session = Depends(get_db)):
    """MIT completion per month."""
    today = SettingsService(db).get_effective_date()
    return MITService(db).get_monthly_stats(today)
