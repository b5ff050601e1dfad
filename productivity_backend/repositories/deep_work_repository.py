"""
Deep work repository - Data access layer for deep work sessions and stats.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from productivity_backend.models import DeepWorkSession, DeepWorkStat


class DeepWorkSessionRepository:
    """Repository for DeepWorkSession data access"""

    @staticmethod
    def get_by_id(db: Session, session_id: int) -> Optional[DeepWorkSession]:
        """Get session by ID"""
        return db.query(DeepWorkSession).filter(DeepWorkSession.id == session_id).first()

    @staticmethod
    def get_all(db: Session) -> List[DeepWorkSession]:
        """Get all sessions, newest first"""
        return db.query(DeepWorkSession).order_by(
            DeepWorkSession.created_at.desc(), DeepWorkSession.id.desc()
        ).all()

    @staticmethod
    def get_active(db: Session) -> Optional[DeepWorkSession]:
        """Get the most recent running, uncompleted session"""
        return db.query(DeepWorkSession).filter(
            DeepWorkSession.is_active == True,
            DeepWorkSession.completed == False
        ).order_by(DeepWorkSession.created_at.desc(), DeepWorkSession.id.desc()).first()

    @staticmethod
    def get_completed(db: Session) -> List[DeepWorkSession]:
        """Get completed sessions, most recently completed first"""
        return db.query(DeepWorkSession).filter(
            DeepWorkSession.completed == True
        ).order_by(DeepWorkSession.completed_at.desc(), DeepWorkSession.id.desc()).all()

    @staticmethod
    def create(db: Session, session: DeepWorkSession) -> DeepWorkSession:
        """Create new session"""
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def update(db: Session, session: DeepWorkSession) -> DeepWorkSession:
        """Update existing session"""
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def delete(db: Session, session: DeepWorkSession) -> None:
        """Delete a session"""
        db.delete(session)
        db.commit()


class DeepWorkStatRepository:
    """Repository for DeepWorkStat data access"""

    @staticmethod
    def get_by_date(db: Session, target_date: date) -> Optional[DeepWorkStat]:
        """Get stats for a specific date"""
        return db.query(DeepWorkStat).filter(DeepWorkStat.date == target_date).first()

    @staticmethod
    def get_all(db: Session) -> List[DeepWorkStat]:
        """Get stats for all days, oldest first"""
        return db.query(DeepWorkStat).order_by(DeepWorkStat.date).all()

    @staticmethod
    def create(db: Session, stat: DeepWorkStat) -> DeepWorkStat:
        """Create new stats row"""
        db.add(stat)
        db.commit()
        db.refresh(stat)
        return stat

    @staticmethod
    def update(db: Session, stat: DeepWorkStat) -> DeepWorkStat:
        """Update existing stats row"""
        db.commit()
        db.refresh(stat)
        return stat

    @staticmethod
    def delete_all(db: Session) -> int:
        """Delete all stats rows"""
        deleted = db.query(DeepWorkStat).delete(synchronize_session=False)
        db.commit()
        return deleted
