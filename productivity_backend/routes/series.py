"""
Series HTTP routes.
Streak statistics for any tracked series ("mit", "output", "output:<type>", "deepwork").
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from productivity_backend.database import get_db
from productivity_backend.services.series_service import SeriesService
from productivity_backend.services.settings_service import SettingsService
from productivity_backend.schemas import StreakSummaryResponse, SeriesHistoryResponse
from productivity_backend.constants import DEFAULT_HISTORY_LIMIT

router = APIRouter(prefix="/api/series", tags=["series"])


@router.get("", response_model=List[str])
def list_series(db: Session = Depends(get_db)):
    """Names of all series that have at least one record."""
    return SeriesService(db).list_series()


@router.get("/{name}/streak", response_model=StreakSummaryResponse)
def get_series_streak(name: str, db: Session = Depends(get_db)):
    """Streak summary for a series as of today."""
    settings_service = SettingsService(db)
    today = settings_service.get_effective_date()
    return SeriesService(db).get_streak_summary(name, today, settings_service.get_window_size())


@router.get("/{name}/history", response_model=SeriesHistoryResponse)
def get_series_history(
    name: str,
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=366),
    db: Session = Depends(get_db)
):
    """Most recent records of a series plus its streak pair."""
    today = SettingsService(db).get_effective_date()
    return SeriesService(db).get_history(name, limit, today)
