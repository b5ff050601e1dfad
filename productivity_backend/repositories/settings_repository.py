"""
Settings repository - the single row holding the reference time zone,
day start offset and heatmap window size.
"""
from sqlalchemy.orm import Session
from productivity_backend.models import Settings


class SettingsRepository:
    """Repository for the settings row"""

    @staticmethod
    def get(db: Session) -> Settings:
        """
        Get the settings row, inserting one with model defaults on first use.

        Defaults: timezone from DASHBOARD_TIMEZONE (else UTC), day start
        disabled at 06:00, 30-day window.
        """
        settings = db.query(Settings).order_by(Settings.id).first()
        if settings is None:
            settings = Settings()
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, fields: dict) -> Settings:
        """
        Write the given columns (timezone, day_start_enabled, day_start_time,
        window_size_days) to the settings row.
        """
        settings = SettingsRepository.get(db)
        for key, value in fields.items():
            setattr(settings, key, value)
        db.commit()
        db.refresh(settings)
        return settings
