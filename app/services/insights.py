# services/insights.py
from datetime import date
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, RecordWriteError
from app.crud.activity_insight import crud_activity_insight
from app.schemas.activity_insight import (
    ActivityInsightOut,
    ActivityInsightUpdate,
    ActivityInsightUpsert,
    ActivityInsightWrite,
)


class InsightService:
    """Service layer for daily activity insights."""

    def __init__(self):
        self.crud = crud_activity_insight

    def get_insights(
        self, db: Session, *, user_id: UUID, start_date: date, end_date: date
    ) -> List[ActivityInsightOut]:
        return self.crud.get_insights(db, user_id=user_id, start_date=start_date, end_date=end_date)

    def get_latest(self, db: Session, *, user_id: UUID) -> Optional[ActivityInsightOut]:
        return self.crud.get_latest(db, user_id=user_id)

    def save_insight(self, db: Session, *, user_id: UUID, insight_data: ActivityInsightWrite) -> ActivityInsightOut:
        """
        Store the day's insight, replacing any existing one for that date.

        Raises:
            RecordWriteError: If the store rejected the write
        """
        insight = self.crud.upsert(
            db, obj_in=ActivityInsightUpsert(user_id=user_id, **insight_data.model_dump())
        )
        if insight is None:
            raise RecordWriteError("Failed to save insight")
        return insight

    def update_insight(
        self, db: Session, *, user_id: UUID, insight_id: UUID, update_data: ActivityInsightUpdate
    ) -> ActivityInsightOut:
        if self.crud.get(db, user_id=user_id, insight_id=insight_id) is None:
            raise NotFoundError("Insight not found")

        insight = self.crud.update(db, user_id=user_id, insight_id=insight_id, obj_in=update_data)
        if insight is None:
            raise RecordWriteError("Failed to update insight")
        return insight


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

insight_service = InsightService()
