"""
Output tracker HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from productivity_backend.database import get_db
from productivity_backend.services.output_service import OutputService
from productivity_backend.services.settings_service import SettingsService
from productivity_backend.schemas import (
    OutputTypeCreate, OutputTypeUpdate, OutputTypeResponse,
    OutputEntryCreate, OutputEntryResponse,
    OutputDailyStatsResponse, StreakSummaryResponse
)
from productivity_backend.exceptions import (
    OutputTypeNotFoundException, OutputEntryNotFoundException,
    DuplicateOutputTypeException, ValidationException
)
from productivity_backend.constants import DEFAULT_ENTRIES_LIMIT

router = APIRouter(prefix="/api/output", tags=["output"])


# ===== TYPES =====

@router.get("/types", response_model=List[OutputTypeResponse])
def get_output_types(db: Session = Depends(get_db)):
    """Get all output types."""
    return OutputService(db).get_types()


@router.post("/types", response_model=OutputTypeResponse, status_code=201)
def create_output_type(output_type: OutputTypeCreate, db: Session = Depends(get_db)):
    """Create an output type."""
    try:
        return OutputService(db).create_type(output_type)
    except DuplicateOutputTypeException as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/types/{type_id}", response_model=OutputTypeResponse)
def update_output_type(type_id: int, output_type: OutputTypeUpdate, db: Session = Depends(get_db)):
    """Update an output type."""
    try:
        return OutputService(db).update_type(type_id, output_type)
    except OutputTypeNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateOutputTypeException as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/types/{type_id}")
def delete_output_type(type_id: int, db: Session = Depends(get_db)):
    """Delete an output type with all of its entries."""
    try:
        deleted = OutputService(db).delete_type(type_id)
    except OutputTypeNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Output type deleted successfully", "deleted_type": deleted}


# ===== ENTRIES =====

@router.get("/entries", response_model=List[OutputEntryResponse])
def get_output_entries(
    limit: int = Query(DEFAULT_ENTRIES_LIMIT, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """Most recent output entries."""
    return OutputService(db).get_entries(limit)


@router.post("/entries", response_model=OutputEntryResponse, status_code=201)
def create_output_entry(entry: OutputEntryCreate, db: Session = Depends(get_db)):
    """Log an output entry."""
    try:
        return OutputService(db).create_entry(entry)
    except OutputTypeNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/entries/{entry_id}")
def delete_output_entry(entry_id: int, db: Session = Depends(get_db)):
    """Delete an output entry."""
    try:
        OutputService(db).delete_entry(entry_id)
    except OutputEntryNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Entry deleted successfully"}


# ===== STATS =====

@router.get("/stats", response_model=OutputDailyStatsResponse)
def get_output_stats(
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Daily totals per type (defaults to today)."""
    if target_date is None:
        target_date = SettingsService(db).get_effective_date()
    return OutputService(db).get_daily_stats(target_date)


@router.get("/streak", response_model=StreakSummaryResponse)
def get_output_streak(db: Session = Depends(get_db)):
    """Full streak summary for days where every target was met."""
    settings_service = SettingsService(db)
    today = settings_service.get_effective_date()
    return OutputService(db).get_streak_summary(today, settings_service.get_window_size())
