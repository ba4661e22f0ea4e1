# crud/commit_record.py
import logging
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.cache import TTLCache, MISSING
from app.crud.upsert import conflict_insert
from app.models.commit_record import CommitRecord
from app.schemas.commit_record import (
    CommitRecordCreate,
    CommitRecordOut,
    CommitStats,
)
from app.utils.datetime_utils import as_utc, local_day_bounds, to_local

logger = logging.getLogger(__name__)


class CRUDCommitRecord:
    """
    Commit record store.

    Rows are only inserted, never updated. Inserts rely on the
    (user_id, commit_hash) unique constraint: a conflicting insert is
    silently ignored, which is what makes re-syncing the same events safe.
    """

    def __init__(self, cache: Optional[TTLCache] = None):
        self.cache = cache if cache is not None else TTLCache()

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get_records(
        self, db: Session, *, user_id: UUID, start: datetime, end: datetime
    ) -> List[CommitRecordOut]:
        """
        Get commits whose timestamp falls in [start, end], newest first.

        Args:
            db: Database session
            user_id: Owning user UUID
            start: Window start (inclusive)
            end: Window end (inclusive)

        Returns:
            List of CommitRecordOut (empty on failure)
        """
        start, end = as_utc(start), as_utc(end)
        cache_key = ("records", user_id, start.isoformat(), end.isoformat())
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        try:
            rows = (
                db.query(CommitRecord)
                .filter(
                    CommitRecord.user_id == user_id,
                    CommitRecord.commit_timestamp >= start,
                    CommitRecord.commit_timestamp <= end,
                )
                .order_by(CommitRecord.commit_timestamp.desc())
                .all()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching commit records")
            return []

        data = [CommitRecordOut.model_validate(row) for row in rows]
        self.cache.set(cache_key, data)
        return data

    def get_commit_stats(self, db: Session, *, user_id: UUID, day: date) -> CommitStats:
        """
        Commit count and active hours for one local calendar day.

        An active hour is a clock hour holding at least one commit, so commits
        at 09:10, 09:40 and 10:05 give count=3, hours=2.

        Returns:
            CommitStats (zeros on failure)
        """
        cache_key = ("stats", user_id, day.isoformat())
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        start, end = local_day_bounds(day)
        try:
            timestamps = [
                row.commit_timestamp
                for row in db.query(CommitRecord.commit_timestamp)
                .filter(
                    CommitRecord.user_id == user_id,
                    CommitRecord.commit_timestamp >= start,
                    CommitRecord.commit_timestamp <= end,
                )
                .all()
            ]
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching commit stats")
            return CommitStats(count=0, hours=0)

        hours = {to_local(ts).hour for ts in timestamps}
        stats = CommitStats(count=len(timestamps), hours=len(hours))
        self.cache.set(cache_key, stats)
        return stats

    # =====================================================================
    # WRITE OPERATIONS
    # =====================================================================

    def insert(self, db: Session, *, obj_in: CommitRecordCreate) -> Optional[CommitRecordOut]:
        """
        Insert a commit record, ignoring a conflict on (user_id, commit_hash).

        Returns:
            Created record; None if the commit was already stored or the
            write failed
        """
        values = obj_in.model_dump()
        values["commit_timestamp"] = as_utc(values["commit_timestamp"])

        stmt = (
            conflict_insert(db, CommitRecord)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["user_id", "commit_hash"])
        )

        try:
            result = db.execute(stmt)
            db.commit()
            if result.rowcount == 0:
                logger.debug(f"Commit {obj_in.commit_hash} already stored, skipped")
                return None

            db_obj = (
                db.query(CommitRecord)
                .filter(
                    CommitRecord.user_id == obj_in.user_id,
                    CommitRecord.commit_hash == obj_in.commit_hash,
                )
                .one()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error adding commit record")
            return None

        self.cache.clear()
        return CommitRecordOut.model_validate(db_obj)


# Create singleton instance
crud_commit_record = CRUDCommitRecord()
