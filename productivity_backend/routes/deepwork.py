"""
Deep work HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from productivity_backend.database import get_db
from productivity_backend.services.deep_work_service import DeepWorkService
from productivity_backend.services.settings_service import SettingsService
from productivity_backend.schemas import (
    DeepWorkSessionCreate, DeepWorkSessionUpdate, DeepWorkSessionComplete,
    DeepWorkSessionResponse, DeepWorkStatsResponse, DeepWorkDailyStatsResponse
)
from productivity_backend.exceptions import SessionNotFoundException, ValidationException

router = APIRouter(prefix="/api/deepwork", tags=["deepwork"])


# ===== SESSIONS =====

@router.post("/sessions", response_model=DeepWorkSessionResponse, status_code=201)
def create_session(session: DeepWorkSessionCreate, db: Session = Depends(get_db)):
    """Create a deep work session."""
    try:
        return DeepWorkService(db).create_session(session)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/sessions", response_model=List[DeepWorkSessionResponse])
def get_sessions(db: Session = Depends(get_db)):
    """All sessions, newest first."""
    return DeepWorkService(db).get_sessions()


@router.get("/sessions/active", response_model=Optional[DeepWorkSessionResponse])
def get_active_session(db: Session = Depends(get_db)):
    """The running session, if any."""
    return DeepWorkService(db).get_active_session()


@router.get("/sessions/completed", response_model=List[DeepWorkSessionResponse])
def get_completed_sessions(db: Session = Depends(get_db)):
    """Completed sessions, most recent first."""
    return DeepWorkService(db).get_completed_sessions()


@router.get("/sessions/{session_id}", response_model=DeepWorkSessionResponse)
def get_session(session_id: int, db: Session = Depends(get_db)):
    """Get a single session."""
    try:
        return DeepWorkService(db).get_session(session_id)
    except SessionNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/sessions/{session_id}", response_model=DeepWorkSessionResponse)
def update_session(session_id: int, session: DeepWorkSessionUpdate, db: Session = Depends(get_db)):
    """Update a session (task, remaining time, running state)."""
    try:
        return DeepWorkService(db).update_session(session_id, session)
    except SessionNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/sessions/{session_id}/pause", response_model=DeepWorkSessionResponse)
def pause_session(session_id: int, db: Session = Depends(get_db)):
    """Pause a running session."""
    try:
        return DeepWorkService(db).pause_session(session_id)
    except SessionNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/sessions/{session_id}/resume", response_model=DeepWorkSessionResponse)
def resume_session(session_id: int, db: Session = Depends(get_db)):
    """Resume a paused session."""
    try:
        return DeepWorkService(db).resume_session(session_id)
    except SessionNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.patch("/sessions/{session_id}/complete", response_model=DeepWorkSessionResponse)
def complete_session(session_id: int, completion: DeepWorkSessionComplete, db: Session = Depends(get_db)):
    """Complete a session with its output."""
    today = SettingsService(db).get_effective_date()
    try:
        return DeepWorkService(db).complete_session(session_id, completion.session_output, today)
    except SessionNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/sessions/{session_id}")
def delete_session(session_id: int, db: Session = Depends(get_db)):
    """Delete a session."""
    try:
        DeepWorkService(db).delete_session(session_id)
    except SessionNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Session deleted successfully"}


# ===== STATS =====

@router.get("/stats", response_model=DeepWorkStatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """Lifetime totals."""
    return DeepWorkService(db).get_stats()


@router.get("/stats/daily", response_model=DeepWorkDailyStatsResponse)
def get_daily_stats(
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Stats for one day (defaults to today)."""
    if target_date is None:
        target_date = SettingsService(db).get_effective_date()
    return DeepWorkService(db).get_daily_stats(target_date)


@router.post("/stats/rebuild", response_model=List[DeepWorkDailyStatsResponse])
def rebuild_daily_stats(db: Session = Depends(get_db)):
    """Recount daily stats from completed sessions."""
    return DeepWorkService(db).rebuild_daily_stats()
