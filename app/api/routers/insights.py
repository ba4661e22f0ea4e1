# app/api/routers/insights.py
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_identity
from app.schemas.activity_insight import (
    ActivityInsightOut,
    ActivityInsightUpdate,
    ActivityInsightWrite,
)
from app.schemas.session import Identity
from app.services.insights import insight_service
from app.utils.datetime_utils import today_local

router = APIRouter(prefix="/insights", tags=["Insights"])

DEFAULT_RANGE_DAYS = 30


# =====================================================================
# READ ENDPOINTS
# =====================================================================

@router.get("", response_model=List[ActivityInsightOut], summary="Insights in a date range")
def get_insights(
    start_date: Optional[date] = Query(None, description="Defaults to 30 days ago"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Daily insights newest first, both bounds inclusive."""
    end_date = end_date or today_local()
    start_date = start_date or end_date - timedelta(days=DEFAULT_RANGE_DAYS)
    return insight_service.get_insights(
        db, user_id=identity.user_id, start_date=start_date, end_date=end_date
    )


@router.get("/latest", response_model=Optional[ActivityInsightOut], summary="Most recent insight")
def get_latest_insight(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Returns null when no insight has been produced yet."""
    return insight_service.get_latest(db, user_id=identity.user_id)


# =====================================================================
# WRITE ENDPOINTS - used by the analysis process
# =====================================================================

@router.put("", response_model=ActivityInsightOut, summary="Save the insight for a day")
def save_insight(
    insight_data: ActivityInsightWrite,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Insert the insight for ``date`` or replace the existing one.

    **Fields:**
    - productivity_score, sleep_score: 0-100
    - commit_count, active_hours: the day's activity
    - recommendations: list of suggestions shown on the dashboard
    """
    return insight_service.save_insight(db, user_id=identity.user_id, insight_data=insight_data)


@router.patch("/{insight_id}", response_model=ActivityInsightOut, summary="Update an insight")
def update_insight(
    insight_id: UUID,
    update_data: ActivityInsightUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return insight_service.update_insight(
        db, user_id=identity.user_id, insight_id=insight_id, update_data=update_data
    )
