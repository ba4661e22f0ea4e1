# crud/activity_insight.py
import logging
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.cache import TTLCache, MISSING
from app.crud.upsert import conflict_insert
from app.models.activity_insight import ActivityInsight
from app.schemas.activity_insight import (
    ActivityInsightUpsert,
    ActivityInsightUpdate,
    ActivityInsightOut,
)

logger = logging.getLogger(__name__)


class CRUDActivityInsight:
    """Activity insight store. Same caching and failure rules as the other stores."""

    def __init__(self, cache: Optional[TTLCache] = None):
        self.cache = cache if cache is not None else TTLCache()

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get_insights(
        self, db: Session, *, user_id: UUID, start_date: date, end_date: date
    ) -> List[ActivityInsightOut]:
        """
        Get daily insights for a date range, newest first.

        Args:
            db: Database session
            user_id: Owning user UUID
            start_date: First day (inclusive)
            end_date: Last day (inclusive)

        Returns:
            List of ActivityInsightOut (empty on failure)
        """
        cache_key = ("insights", user_id, start_date.isoformat(), end_date.isoformat())
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        try:
            rows = (
                db.query(ActivityInsight)
                .filter(
                    ActivityInsight.user_id == user_id,
                    ActivityInsight.date >= start_date,
                    ActivityInsight.date <= end_date,
                )
                .order_by(ActivityInsight.date.desc())
                .all()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching insights")
            return []

        data = [ActivityInsightOut.model_validate(row) for row in rows]
        self.cache.set(cache_key, data)
        return data

    def get_latest(self, db: Session, *, user_id: UUID) -> Optional[ActivityInsightOut]:
        """
        Get the most recent insight.

        Returns:
            ActivityInsightOut, or None when there is none or the read failed
        """
        cache_key = ("latest", user_id)
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        try:
            row = (
                db.query(ActivityInsight)
                .filter(ActivityInsight.user_id == user_id)
                .order_by(ActivityInsight.date.desc())
                .first()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching latest insight")
            return None

        if row is None:
            return None

        data = ActivityInsightOut.model_validate(row)
        self.cache.set(cache_key, data)
        return data

    def get(self, db: Session, *, user_id: UUID, insight_id: UUID) -> Optional[ActivityInsightOut]:
        """Get one insight owned by the user (uncached). None when missing or the read failed."""
        try:
            row = (
                db.query(ActivityInsight)
                .filter(ActivityInsight.id == insight_id, ActivityInsight.user_id == user_id)
                .first()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error fetching insight")
            return None

        return ActivityInsightOut.model_validate(row) if row else None

    # =====================================================================
    # WRITE OPERATIONS
    # =====================================================================

    def upsert(self, db: Session, *, obj_in: ActivityInsightUpsert) -> Optional[ActivityInsightOut]:
        """
        Insert an insight or replace the scores of the existing one for the
        same (user_id, date).

        Returns:
            Stored insight, or None if the write failed
        """
        values = obj_in.model_dump()
        now = datetime.now(timezone.utc)
        changed = {
            key: value for key, value in values.items() if key not in ("user_id", "date")
        }
        changed["updated_at"] = now

        stmt = (
            conflict_insert(db, ActivityInsight)
            .values(**values)
            .on_conflict_do_update(index_elements=["user_id", "date"], set_=changed)
        )

        try:
            db.execute(stmt)
            db.commit()
            db_obj = (
                db.query(ActivityInsight)
                .filter(
                    ActivityInsight.user_id == obj_in.user_id,
                    ActivityInsight.date == obj_in.date,
                )
                .one()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error upserting insight")
            return None

        self.cache.clear()
        return ActivityInsightOut.model_validate(db_obj)

    def update(
        self, db: Session, *, user_id: UUID, insight_id: UUID, obj_in: ActivityInsightUpdate
    ) -> Optional[ActivityInsightOut]:
        """
        Update an insight owned by the user.

        Returns:
            Updated insight, or None if missing or the write failed
        """
        update_data = obj_in.model_dump(exclude_unset=True)

        try:
            db_obj = (
                db.query(ActivityInsight)
                .filter(ActivityInsight.id == insight_id, ActivityInsight.user_id == user_id)
                .first()
            )
            if db_obj is None:
                return None

            for field, value in update_data.items():
                setattr(db_obj, field, value)

            db_obj.updated_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(db_obj)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error updating insight")
            return None

        self.cache.clear()
        return ActivityInsightOut.model_validate(db_obj)


# Create singleton instance
crud_activity_insight = CRUDActivityInsight()
