# app/api/routers/reports.py
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_identity
from app.schemas.reports import DashboardSummary, MonthlyReport
from app.schemas.session import Identity
from app.services.dashboard import dashboard_service
from app.utils.datetime_utils import start_of_month, today_local

router = APIRouter(tags=["Reports"])


@router.get("/dashboard", response_model=DashboardSummary, summary="Dashboard page")
def get_dashboard(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Greeting, last week of sleep, today's commit stats and the latest
    insight with its recommendations.
    """
    return dashboard_service.get_dashboard(db, user_id=identity.user_id)


@router.get("/reports/monthly", response_model=MonthlyReport, summary="Monthly report")
def get_monthly_report(
    month: Optional[str] = Query(None, description="Month as YYYY-MM, defaults to the current month"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Monthly totals, averages, goals met and consistency, broken into weeks.
    The current month also carries the change against the previous month.
    """
    if month is None:
        report_month = start_of_month(today_local())
    else:
        try:
            report_month = datetime.strptime(month, "%Y-%m").date()
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="month must be formatted as YYYY-MM",
            )

    return dashboard_service.get_monthly_report(db, user_id=identity.user_id, month=report_month)
