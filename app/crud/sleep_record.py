# crud/sleep_record.py
import logging
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime, timedelta, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.cache import TTLCache, MISSING
from app.models.sleep_record import SleepRecord
from app.schemas.sleep_record import (
    SleepRecordCreate,
    SleepRecordUpdate,
    SleepRecordOut,
)
from app.utils.datetime_utils import as_utc

logger = logging.getLogger(__name__)


class CRUDSleepRecord:
    """
    Sleep record store.

    Reads are served from a five-minute cache keyed by their parameters; any
    write clears the whole cache. Database failures are logged and degrade to
    an empty result, so an empty list can mean "no records" or "read failed".
    """

    def __init__(self, cache: Optional[TTLCache] = None):
        self.cache = cache if cache is not None else TTLCache()

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get_records(
        self, db: Session, *, user_id: UUID, start_date: date, end_date: date
    ) -> List[SleepRecordOut]:
        """
        Get sleep records for a date range, newest first.

        Args:
            db: Database session
            user_id: Owning user UUID
            start_date: First night (inclusive)
            end_date: Last night (inclusive)

        Returns:
            List of SleepRecordOut (empty on failure)
        """
        cache_key = ("records", user_id, start_date.isoformat(), end_date.isoformat())
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        try:
            rows = (
                db.query(SleepRecord)
                .filter(
                    SleepRecord.user_id == user_id,
                    SleepRecord.date >= start_date,
                    SleepRecord.date <= end_date,
                )
                .order_by(SleepRecord.date.desc())
                .all()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching sleep records")
            return []

        data = [SleepRecordOut.model_validate(row) for row in rows]
        self.cache.set(cache_key, data)
        return data

    def get(self, db: Session, *, user_id: UUID, record_id: UUID) -> Optional[SleepRecordOut]:
        """
        Get one sleep record owned by the user (uncached).

        Returns:
            SleepRecordOut, or None when missing or the read failed
        """
        try:
            db_obj = (
                db.query(SleepRecord)
                .filter(SleepRecord.id == record_id, SleepRecord.user_id == user_id)
                .first()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching sleep record")
            return None

        return SleepRecordOut.model_validate(db_obj) if db_obj else None

    # =====================================================================
    # WRITE OPERATIONS
    # =====================================================================

    def insert(self, db: Session, *, obj_in: SleepRecordCreate) -> Optional[SleepRecordOut]:
        """
        Insert a sleep record. A second record for the same night fails.

        Returns:
            Created record, or None if the write failed
        """
        obj_data = obj_in.model_dump()
        obj_data["start_time"] = as_utc(obj_data["start_time"])
        obj_data["end_time"] = as_utc(obj_data["end_time"])
        db_obj = SleepRecord(**obj_data)

        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error adding sleep record")
            return None

        self.cache.clear()
        return SleepRecordOut.model_validate(db_obj)

    def update(
        self, db: Session, *, user_id: UUID, record_id: UUID, obj_in: SleepRecordUpdate
    ) -> Optional[SleepRecordOut]:
        """
        Update a sleep record owned by the user.

        New start/end times are merged with the stored ones and duration is
        re-derived; an end before the start rolls to the next day.

        Returns:
            Updated record, or None if missing or the write failed
        """
        update_data = obj_in.model_dump(exclude_unset=True)
        for field in ("start_time", "end_time"):
            if update_data.get(field) is not None:
                update_data[field] = as_utc(update_data[field])
            else:
                update_data.pop(field, None)

        try:
            db_obj = (
                db.query(SleepRecord)
                .filter(SleepRecord.id == record_id, SleepRecord.user_id == user_id)
                .first()
            )
            if db_obj is None:
                return None

            if "start_time" in update_data or "end_time" in update_data:
                start = update_data.get("start_time", as_utc(db_obj.start_time))
                end = update_data.get("end_time", as_utc(db_obj.end_time))
                while end < start:
                    end += timedelta(days=1)
                update_data["start_time"] = start
                update_data["end_time"] = end
                update_data["duration_hours"] = round((end - start).total_seconds() / 3600, 2)

            for field, value in update_data.items():
                setattr(db_obj, field, value)

            db_obj.updated_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(db_obj)
            data = SleepRecordOut.model_validate(db_obj)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error updating sleep record")
            return None

        self.cache.clear()
        return data

    def delete(self, db: Session, *, user_id: UUID, record_id: UUID) -> bool:
        """
        Delete a sleep record owned by the user.

        Returns:
            True if the statement ran, False if the write failed
        """
        try:
            (
                db.query(SleepRecord)
                .filter(SleepRecord.id == record_id, SleepRecord.user_id == user_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error deleting sleep record")
            return False

        self.cache.clear()
        return True


# Create singleton instance
crud_sleep_record = CRUDSleepRecord()
