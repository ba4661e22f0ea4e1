# schemas/reports.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import date as date_type

from app.schemas.activity_insight import ActivityInsightOut
from app.schemas.commit_record import CommitStats
from app.schemas.sleep_record import SleepRecordOut


# =====================================================================
# MONTHLY REPORT
# =====================================================================

class MonthlyStats(BaseModel):
    total_commits: int = 0
    avg_sleep: float = 0
    avg_productivity: float = 0
    goals_met_count: int = 0
    active_hours: float = 0
    consistency_score: float = 0


class MonthlyChanges(BaseModel):
    """Percentage change of each metric against the previous month."""
    total_commits: float
    avg_sleep: float
    avg_productivity: float
    consistency_score: float


class WeeklyBucket(BaseModel):
    week: str
    week_start: date_type
    commits: int = 0
    sleep: float = 0
    productivity: float = 0
    active_hours: float = 0


class MonthlyReport(BaseModel):
    month: str  # YYYY-MM
    stats: MonthlyStats
    weekly: List[WeeklyBucket]
    previous: Optional[MonthlyStats] = None
    changes: Optional[MonthlyChanges] = None
    insights: List[ActivityInsightOut]


# =====================================================================
# DASHBOARD
# =====================================================================

class SleepChartPoint(BaseModel):
    date: date_type
    hours: float
    quality: Optional[int] = None
    is_today: bool = False


class DashboardSummary(BaseModel):
    greeting: str  # morning | afternoon | evening
    display_name: str
    sleep_records: List[SleepRecordOut]
    sleep_chart: List[SleepChartPoint]
    average_sleep_hours: float
    commit_stats: CommitStats
    commits_per_hour: Optional[float] = None
    latest_insight: Optional[ActivityInsightOut] = None
    productivity_status: str
    recommendations: List[str]
