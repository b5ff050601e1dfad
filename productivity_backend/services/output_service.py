"""
Output tracker service.
Handles output types, output entries and the daily records derived from them.

Every write that changes a day's entries recalculates that day's records:
one per output type ("output:<name>", completed when the day's count reaches
the type's target) and one aggregate ("output", completed when every type
reached its target).
"""
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List
from sqlalchemy.orm import Session

from productivity_backend.models import OutputType, OutputEntry
from productivity_backend.schemas import (
    OutputTypeCreate, OutputTypeUpdate, OutputTypeResponse, OutputEntryCreate
)
from productivity_backend.repositories.output_repository import (
    OutputTypeRepository, OutputEntryRepository
)
from productivity_backend.repositories.daily_record_repository import DailyRecordRepository
from productivity_backend.services.series_service import SeriesService
from productivity_backend.exceptions import (
    OutputTypeNotFoundException, OutputEntryNotFoundException,
    DuplicateOutputTypeException, ValidationException
)
from productivity_backend.constants import (
    SERIES_OUTPUT, SERIES_OUTPUT_TYPE_PREFIX, DEFAULT_OUTPUT_COLOR, DEFAULT_WINDOW_SIZE_DAYS
)

logger = logging.getLogger("dashboard.output")


def type_series(type_name: str) -> str:
    """Series name of a single output type"""
    return f"{SERIES_OUTPUT_TYPE_PREFIX}{type_name}"


class OutputService:
    """Service for the output tracker"""

    def __init__(self, db: Session):
        self.db = db
        self.type_repo = OutputTypeRepository()
        self.entry_repo = OutputEntryRepository()
        self.record_repo = DailyRecordRepository()
        self.series_service = SeriesService(db)

    # ===== TYPES =====

    def get_types(self) -> List[OutputType]:
        """Get all output types"""
        return self.type_repo.get_all(self.db)

    def create_type(self, type_data: OutputTypeCreate) -> OutputType:
        """
        Create an output type.

        Raises:
            DuplicateOutputTypeException: If the name is taken
        """
        if self.type_repo.get_by_name(self.db, type_data.name):
            raise DuplicateOutputTypeException(type_data.name)

        output_type = OutputType(
            name=type_data.name,
            unit=type_data.unit,
            target=type_data.target,
            color=type_data.color or DEFAULT_OUTPUT_COLOR
        )
        output_type = self.type_repo.create(self.db, output_type)
        logger.info(f"Output type created: {output_type.name} (target {output_type.target} {output_type.unit})")
        return output_type

    def update_type(self, type_id: int, type_update: OutputTypeUpdate) -> OutputType:
        """
        Update an output type.

        Renaming moves the type's entries and series along. Changing the
        target recalculates every day the type has entries.

        Raises:
            OutputTypeNotFoundException: If the type does not exist
            DuplicateOutputTypeException: If the new name is taken
            ValidationException: If nothing to update was given
        """
        output_type = self.type_repo.get_by_id(self.db, type_id)
        if not output_type:
            raise OutputTypeNotFoundException(type_id)

        update_data = {
            key: value for key, value in type_update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not update_data:
            raise ValidationException("body", "No fields to update")

        old_name = output_type.name
        new_name = update_data.get("name", old_name).strip()
        if not new_name:
            raise ValidationException("name", "must not be blank")
        update_data["name"] = new_name

        if new_name != old_name:
            if self.type_repo.get_by_name(self.db, new_name):
                raise DuplicateOutputTypeException(new_name)
            self.entry_repo.rename_type(self.db, old_name, new_name)
            self.record_repo.rename_series(self.db, type_series(old_name), type_series(new_name))
            logger.info(f"Output type renamed: {old_name} -> {new_name}")

        target_changed = "target" in update_data and update_data["target"] != output_type.target

        for key, value in update_data.items():
            setattr(output_type, key, value)
        output_type = self.type_repo.update(self.db, output_type)

        if target_changed:
            self.recalculate_days(self.entry_repo.get_dates_for_type(self.db, output_type.name))

        return output_type

    def delete_type(self, type_id: int) -> OutputTypeResponse:
        """
        Delete an output type together with its entries and series.

        Every day with entries gets its aggregate record recalculated
        without the deleted type.

        Returns:
            Snapshot of the deleted type

        Raises:
            OutputTypeNotFoundException: If the type does not exist
        """
        output_type = self.type_repo.get_by_id(self.db, type_id)
        if not output_type:
            raise OutputTypeNotFoundException(type_id)

        snapshot = OutputTypeResponse.model_validate(output_type)
        affected_dates = self.entry_repo.get_dates_for_type(self.db, output_type.name)

        removed = self.entry_repo.delete_by_type(self.db, output_type.name)
        self.record_repo.delete_series(self.db, type_series(output_type.name))
        self.type_repo.delete(self.db, output_type)
        logger.info(f"Output type deleted: {snapshot.name} ({removed} entries removed)")

        # Days that only had entries of the deleted type lose their aggregate record
        self.recalculate_days(set(affected_dates) | set(self.entry_repo.get_all_dates(self.db)))
        return snapshot

    # ===== ENTRIES =====

    def get_entries(self, limit: int) -> List[dict]:
        """Most recent entries with their type's unit, color and target"""
        rows = self.entry_repo.get_recent_with_types(self.db, limit)
        return [self._entry_dict(entry, output_type) for entry, output_type in rows]

    def create_entry(self, entry_data: OutputEntryCreate) -> dict:
        """
        Log an output entry and refresh that day's records.

        Raises:
            OutputTypeNotFoundException: If the type does not exist
        """
        output_type = self.type_repo.get_by_name(self.db, entry_data.type)
        if not output_type:
            raise OutputTypeNotFoundException(entry_data.type)

        entry = OutputEntry(
            date=entry_data.date,
            type=output_type.name,
            count=entry_data.count,
            notes=entry_data.notes
        )
        entry = self.entry_repo.create(self.db, entry)
        self.recalculate_day(entry.date)
        return self._entry_dict(entry, output_type)

    def delete_entry(self, entry_id: int) -> None:
        """
        Delete an entry and refresh that day's records.

        Raises:
            OutputEntryNotFoundException: If the entry does not exist
        """
        entry = self.entry_repo.get_by_id(self.db, entry_id)
        if not entry:
            raise OutputEntryNotFoundException(entry_id)

        entry_date = entry.date
        self.entry_repo.delete(self.db, entry)
        self.recalculate_day(entry_date)

    # ===== DAILY RECORDS =====

    def recalculate_day(self, target_date: date) -> None:
        """Rewrite the per-type and aggregate records for one day"""
        types = self.type_repo.get_all(self.db)
        entries = self.entry_repo.get_by_date(self.db, target_date)

        totals: Dict[str, int] = defaultdict(int)
        for entry in entries:
            totals[entry.type] += entry.count

        for output_type in types:
            series = type_series(output_type.name)
            if output_type.name in totals:
                count = totals[output_type.name]
                self.record_repo.upsert_record(self.db, series, target_date, {
                    "count": count,
                    "target": output_type.target,
                    "completed": count >= output_type.target,
                })
            else:
                self.record_repo.delete_record(self.db, series, target_date)

        if entries:
            all_targets_met = all(totals.get(t.name, 0) >= t.target for t in types)
            self.record_repo.upsert_record(self.db, SERIES_OUTPUT, target_date, {
                "count": sum(totals.values()),
                "target": None,
                "completed": all_targets_met,
            })
        else:
            self.record_repo.delete_record(self.db, SERIES_OUTPUT, target_date)

        logger.debug(f"Output records recalculated for {target_date.isoformat()}")

    def recalculate_days(self, dates: Iterable[date]) -> None:
        """Recalculate several days"""
        for target_date in sorted(set(dates)):
            self.recalculate_day(target_date)

    # ===== STATS =====

    def get_daily_stats(self, target_date: date) -> dict:
        """Totals for a day, per-type progress and the aggregate streak as of that day"""
        entries = self.entry_repo.get_by_date(self.db, target_date)
        streak = self.series_service.get_streak_pair(SERIES_OUTPUT, target_date)["current_streak"]

        type_stats = {}
        for output_type in self.type_repo.get_all(self.db):
            type_entries = [e for e in entries if e.type == output_type.name]
            total = sum(e.count for e in type_entries)
            percentage = min(total / output_type.target * 100, 100) if output_type.target > 0 else 0
            type_stats[output_type.name] = {
                "today_total": total,
                "entries_count": len(type_entries),
                "target": output_type.target,
                "percentage": round(percentage, 1),
            }

        return {
            "date": target_date,
            "total_output": sum(e.count for e in entries),
            "entries_count": len(entries),
            "streak": streak,
            "type_stats": type_stats,
        }

    def get_streak_summary(self, today: date, window_size_days: int = DEFAULT_WINDOW_SIZE_DAYS) -> dict:
        """Full streak summary for the aggregate output series"""
        return self.series_service.get_streak_summary(SERIES_OUTPUT, today, window_size_days)

    def _entry_dict(self, entry: OutputEntry, output_type) -> dict:
        return {
            "id": entry.id,
            "date": entry.date,
            "type": entry.type,
            "count": entry.count,
            "notes": entry.notes,
            "unit": output_type.unit if output_type else None,
            "color": output_type.color if output_type else None,
            "target": output_type.target if output_type else None,
            "created_at": entry.created_at,
            "updated_at": entry.updated_at,
        }
