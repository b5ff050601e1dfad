"""
Daily record repository - Data access layer for DailyRecord model.
One row per (series, date); this is the only writer of daily_records.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from productivity_backend.models import DailyRecord


class DailyRecordRepository:
    """Repository for DailyRecord data access"""

    @staticmethod
    def get_by_id(db: Session, record_id: int) -> Optional[DailyRecord]:
        """Get record by ID"""
        return db.query(DailyRecord).filter(DailyRecord.id == record_id).first()

    @staticmethod
    def get_by_series_and_date(db: Session, series: str, record_date: date) -> Optional[DailyRecord]:
        """Get the record of a series for a specific date"""
        return db.query(DailyRecord).filter(
            DailyRecord.series == series,
            DailyRecord.date == record_date
        ).first()

    @staticmethod
    def find_records_in_range(
        db: Session,
        series: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[DailyRecord]:
        """
        Get records of a series between two dates (inclusive), oldest first.
        Either bound may be omitted.
        """
        query = db.query(DailyRecord).filter(DailyRecord.series == series)
        if start_date is not None:
            query = query.filter(DailyRecord.date >= start_date)
        if end_date is not None:
            query = query.filter(DailyRecord.date <= end_date)
        return query.order_by(DailyRecord.date).all()

    @staticmethod
    def get_recent(db: Session, series: str, limit: int) -> List[DailyRecord]:
        """Get the most recent N records of a series, newest first"""
        return db.query(DailyRecord).filter(
            DailyRecord.series == series
        ).order_by(DailyRecord.date.desc()).limit(limit).all()

    @staticmethod
    def list_series(db: Session) -> List[str]:
        """Get all series names that have at least one record"""
        rows = db.query(DailyRecord.series).distinct().order_by(DailyRecord.series).all()
        return [row[0] for row in rows]

    @staticmethod
    def upsert_record(db: Session, series: str, record_date: date, fields: dict) -> DailyRecord:
        """
        Create the record for (series, date) or update it in place.

        Args:
            db: Database session
            series: Series name
            record_date: Calendar date of the record
            fields: Column values to set (completed, task, count, target)

        Returns:
            The stored record
        """
        record = DailyRecordRepository.get_by_series_and_date(db, series, record_date)
        if record is None:
            record = DailyRecord(series=series, date=record_date)
            db.add(record)

        for key, value in fields.items():
            setattr(record, key, value)

        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete_record(db: Session, series: str, record_date: date) -> bool:
        """Delete the record for (series, date). Returns False if none existed."""
        record = DailyRecordRepository.get_by_series_and_date(db, series, record_date)
        if record is None:
            return False
        db.delete(record)
        db.commit()
        return True

    @staticmethod
    def delete(db: Session, record: DailyRecord) -> None:
        """Delete a record"""
        db.delete(record)
        db.commit()

    @staticmethod
    def rename_series(db: Session, old_series: str, new_series: str) -> int:
        """Move all records of a series to a new name. Returns rows changed."""
        changed = db.query(DailyRecord).filter(
            DailyRecord.series == old_series
        ).update({DailyRecord.series: new_series}, synchronize_session=False)
        db.commit()
        return changed

    @staticmethod
    def delete_series(db: Session, series: str) -> int:
        """Delete every record of a series. Returns rows deleted."""
        deleted = db.query(DailyRecord).filter(
            DailyRecord.series == series
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
