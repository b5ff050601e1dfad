"""
Settings service.
Owns the single settings row and the effective "today" derived from it.
"""
import logging
from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session

from productivity_backend.models import Settings
from productivity_backend.schemas import SettingsUpdate
from productivity_backend.repositories.settings_repository import SettingsRepository
from productivity_backend.services.date_service import DateService

logger = logging.getLogger("dashboard.settings")


class SettingsService:
    """Service for user settings"""

    def __init__(self, db: Session):
        self.db = db
        self.settings_repo = SettingsRepository()

    def get(self) -> Settings:
        """Get settings (created with defaults on first access)"""
        return self.settings_repo.get(self.db)

    def update(self, settings_update: SettingsUpdate) -> Settings:
        """
        Update the fields present in the request; the rest keep their value.

        Raises:
            ValidationException: If the time zone is unknown
        """
        update_data = {
            key: value for key, value in settings_update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if "timezone" in update_data:
            DateService.get_zone(update_data["timezone"])

        logger.info(f"Settings updated: {', '.join(sorted(update_data)) or 'no changes'}")
        return self.settings_repo.update(self.db, update_data)

    def get_effective_date(self, now: Optional[datetime] = None) -> date:
        """Today's date in the configured reference time zone"""
        return DateService.get_effective_date(self.get(), now)

    def get_window_size(self) -> int:
        """Rolling window length used for heatmaps"""
        return self.get().window_size_days
