"""
Output repository - Data access layer for output tracker models.
Handles all database queries related to output types and entries.
"""
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from productivity_backend.models import OutputType, OutputEntry


class OutputTypeRepository:
    """Repository for OutputType data access"""

    @staticmethod
    def get_all(db: Session) -> List[OutputType]:
        """Get all output types ordered by name"""
        return db.query(OutputType).order_by(OutputType.name).all()

    @staticmethod
    def get_by_id(db: Session, type_id: int) -> Optional[OutputType]:
        """Get output type by ID"""
        return db.query(OutputType).filter(OutputType.id == type_id).first()

    @staticmethod
    def get_by_name(db: Session, name: str) -> Optional[OutputType]:
        """Get output type by its unique name"""
        return db.query(OutputType).filter(OutputType.name == name).first()

    @staticmethod
    def create(db: Session, output_type: OutputType) -> OutputType:
        """Create new output type"""
        db.add(output_type)
        db.commit()
        db.refresh(output_type)
        return output_type

    @staticmethod
    def update(db: Session, output_type: OutputType) -> OutputType:
        """Update existing output type"""
        db.commit()
        db.refresh(output_type)
        return output_type

    @staticmethod
    def delete(db: Session, output_type: OutputType) -> None:
        """Delete an output type"""
        db.delete(output_type)
        db.commit()


class OutputEntryRepository:
    """Repository for OutputEntry data access"""

    @staticmethod
    def get_by_id(db: Session, entry_id: int) -> Optional[OutputEntry]:
        """Get entry by ID"""
        return db.query(OutputEntry).filter(OutputEntry.id == entry_id).first()

    @staticmethod
    def get_recent_with_types(db: Session, limit: int) -> List[Tuple[OutputEntry, Optional[OutputType]]]:
        """Get most recent entries joined with their type (type may be missing)"""
        return db.query(OutputEntry, OutputType).outerjoin(
            OutputType, OutputEntry.type == OutputType.name
        ).order_by(
            OutputEntry.date.desc(), OutputEntry.created_at.desc(), OutputEntry.id.desc()
        ).limit(limit).all()

    @staticmethod
    def get_by_date(db: Session, target_date: date) -> List[OutputEntry]:
        """Get all entries logged for a date"""
        return db.query(OutputEntry).filter(
            OutputEntry.date == target_date
        ).order_by(OutputEntry.created_at.desc()).all()

    @staticmethod
    def get_all_dates(db: Session) -> List[date]:
        """Get the distinct dates that have any entry"""
        rows = db.query(OutputEntry.date).distinct().all()
        return [row[0] for row in rows]

    @staticmethod
    def get_dates_for_type(db: Session, type_name: str) -> List[date]:
        """Get the distinct dates on which a type has entries"""
        rows = db.query(OutputEntry.date).filter(
            OutputEntry.type == type_name
        ).distinct().all()
        return [row[0] for row in rows]

    @staticmethod
    def create(db: Session, entry: OutputEntry) -> OutputEntry:
        """Create new entry"""
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def delete(db: Session, entry: OutputEntry) -> None:
        """Delete an entry"""
        db.delete(entry)
        db.commit()

    @staticmethod
    def rename_type(db: Session, old_name: str, new_name: str) -> int:
        """Point all entries of a type at its new name"""
        changed = db.query(OutputEntry).filter(
            OutputEntry.type == old_name
        ).update({OutputEntry.type: new_name}, synchronize_session=False)
        db.commit()
        return changed

    @staticmethod
    def delete_by_type(db: Session, type_name: str) -> int:
        """Delete all entries of a type"""
        deleted = db.query(OutputEntry).filter(
            OutputEntry.type == type_name
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
