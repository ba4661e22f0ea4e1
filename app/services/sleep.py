# services/sleep.py
from datetime import datetime, timedelta
from uuid import UUID
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, RecordWriteError
from app.crud.sleep_record import crud_sleep_record
from app.schemas.sleep_record import (
    SleepEntryRequest,
    SleepRecordCreate,
    SleepRecordOut,
    SleepRecordUpdate,
    SleepSummary,
)
from app.services import metrics
from app.utils.datetime_utils import local_tz, today_local

SLEEP_WINDOW_DAYS = 7


class SleepService:
    """Service layer for the sleep log."""

    def __init__(self):
        self.crud = crud_sleep_record

    def get_summary(self, db: Session, *, user_id: UUID, days: int = SLEEP_WINDOW_DAYS) -> SleepSummary:
        """Recent nights with average duration and quality."""
        end_date = today_local()
        start_date = end_date - timedelta(days=days)
        records = self.crud.get_records(db, user_id=user_id, start_date=start_date, end_date=end_date)

        return SleepSummary(
            records=records,
            average_duration_hours=metrics.average(records, "duration_hours"),
            average_quality=metrics.average(records, "quality_score"),
        )

    def add_entry(self, db: Session, *, user_id: UUID, entry: SleepEntryRequest) -> SleepRecordOut:
        """
        Store a night from its date and bed/wake clock times.

        Raises:
            RecordWriteError: If the store could not save it (including a
                second record for the same night)
        """
        tz = local_tz()
        start_time = datetime.combine(entry.date, entry.start_time, tzinfo=tz)
        end_time = datetime.combine(entry.date, entry.end_time, tzinfo=tz)
        if end_time < start_time:
            end_time += timedelta(days=1)

        record = self.crud.insert(
            db,
            obj_in=SleepRecordCreate(
                user_id=user_id,
                date=entry.date,
                start_time=start_time,
                end_time=end_time,
                duration_hours=metrics.sleep_duration_hours(start_time, end_time),
                quality_score=entry.quality_score,
                notes=entry.notes or None,
            ),
        )
        if record is None:
            raise RecordWriteError("Failed to add sleep record")
        return record

    def update_entry(
        self, db: Session, *, user_id: UUID, record_id: UUID, update_data: SleepRecordUpdate
    ) -> SleepRecordOut:
        """
        Raises:
            NotFoundError: If the user has no such record
            RecordWriteError: If the store could not save the change
        """
        if self.crud.get(db, user_id=user_id, record_id=record_id) is None:
            raise NotFoundError("Sleep record not found")

        record = self.crud.update(db, user_id=user_id, record_id=record_id, obj_in=update_data)
        if record is None:
            raise RecordWriteError("Failed to update sleep record")
        return record

    def delete_entry(self, db: Session, *, user_id: UUID, record_id: UUID) -> None:
        if not self.crud.delete(db, user_id=user_id, record_id=record_id):
            raise RecordWriteError("Failed to delete sleep record")


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

sleep_service = SleepService()
