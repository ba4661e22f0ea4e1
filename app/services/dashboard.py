# services/dashboard.py
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from app.crud.activity_insight import crud_activity_insight
from app.crud.commit_record import crud_commit_record
from app.crud.profile import crud_profile
from app.crud.sleep_record import crud_sleep_record
from app.schemas.commit_record import CommitActivity
from app.schemas.reports import DashboardSummary, MonthlyReport, SleepChartPoint
from app.services import metrics
from app.utils.datetime_utils import (
    end_of_month,
    local_tz,
    previous_month,
    start_of_month,
    today_local,
    utcnow,
)

DASHBOARD_SLEEP_DAYS = 7
RECENT_COMMITS = 5


class DashboardService:
    """Assembles the page-level payloads from the stores and metrics."""

    # =====================================================================
    # DASHBOARD
    # =====================================================================

    def get_dashboard(self, db: Session, *, user_id: UUID, display_name: Optional[str] = None) -> DashboardSummary:
        today = today_local()
        sleep_records = crud_sleep_record.get_records(
            db, user_id=user_id, start_date=today - timedelta(days=DASHBOARD_SLEEP_DAYS), end_date=today
        )
        commit_stats = crud_commit_record.get_commit_stats(db, user_id=user_id, day=today)
        latest = crud_activity_insight.get_latest(db, user_id=user_id)

        if display_name is None:
            profile = crud_profile.get(db, id=user_id)
            display_name = profile.display_name if profile else None

        return DashboardSummary(
            greeting=metrics.time_of_day(datetime.now(local_tz()).hour),
            display_name=display_name or "Developer",
            sleep_records=sleep_records,
            sleep_chart=[
                SleepChartPoint(
                    date=record.date,
                    hours=record.duration_hours,
                    quality=record.quality_score,
                    is_today=record.date == today,
                )
                for record in sleep_records
            ],
            average_sleep_hours=metrics.average(sleep_records, "duration_hours"),
            commit_stats=commit_stats,
            commits_per_hour=metrics.commits_per_hour(commit_stats),
            latest_insight=latest,
            productivity_status=metrics.productivity_status(latest.productivity_score if latest else None),
            recommendations=(latest.recommendations or []) if latest else [],
        )

    # =====================================================================
    # COMMITS
    # =====================================================================

    def get_commit_activity(self, db: Session, *, user_id: UUID) -> CommitActivity:
        """Last 24 hours of commits plus today's stats."""
        end = utcnow()
        commits = crud_commit_record.get_records(db, user_id=user_id, start=end - timedelta(days=1), end=end)
        stats = crud_commit_record.get_commit_stats(db, user_id=user_id, day=today_local())
        by_hour = metrics.commits_by_hour(commits)

        return CommitActivity(
            stats=stats,
            commits_by_hour=by_hour,
            peak_hour=metrics.peak_hour(by_hour),
            repositories=metrics.repository_breakdown(commits),
            recent=commits[:RECENT_COMMITS],
        )

    # =====================================================================
    # REPORTS
    # =====================================================================

    def get_monthly_report(self, db: Session, *, user_id: UUID, month: date) -> MonthlyReport:
        """
        Monthly stats and weekly buckets. For the current month the previous
        month's stats and the percentage change of each metric are included.
        """
        start = start_of_month(month)
        insights = crud_activity_insight.get_insights(
            db, user_id=user_id, start_date=start, end_date=end_of_month(month)
        )
        ordered = metrics.sort_by_date(insights)
        stats = metrics.monthly_stats(ordered)

        previous_stats = None
        changes = None
        if start == start_of_month(today_local()):
            previous_start = previous_month(start)
            previous_insights = crud_activity_insight.get_insights(
                db, user_id=user_id, start_date=previous_start, end_date=end_of_month(previous_start)
            )
            previous_stats = metrics.monthly_stats(metrics.sort_by_date(previous_insights))
            changes = metrics.compare_stats(stats, previous_stats)

        return MonthlyReport(
            month=start.strftime("%Y-%m"),
            stats=stats,
            weekly=metrics.weekly_buckets(ordered, start),
            previous=previous_stats,
            changes=changes,
            insights=insights,
        )


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

dashboard_service = DashboardService()
