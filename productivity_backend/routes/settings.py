"""
Settings HTTP routes.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from productivity_backend.database import get_db
from productivity_backend.services.settings_service import SettingsService
from productivity_backend.schemas import SettingsUpdate, SettingsResponse
from productivity_backend.exceptions import ValidationException

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _settings_response(service: SettingsService, settings) -> SettingsResponse:
    response = SettingsResponse.model_validate(settings)
    response.effective_date = service.get_effective_date()
    return response


@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    """Get settings with the current effective date."""
    service = SettingsService(db)
    return _settings_response(service, service.get())


@router.put("", response_model=SettingsResponse)
def update_settings(settings: SettingsUpdate, db: Session = Depends(get_db)):
    """Update settings."""
    service = SettingsService(db)
    try:
        updated = service.update(settings)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message)
    return _settings_response(service, updated)
