# app/schemas/__init__.py

from .session import (
    Identity,
    SessionCreate,
    ProviderTokenUpdate,
    SessionOut,
    SyncResult,
    SuccessResponse,
)
from .profile import ProfileCreate, ProfileUpdate, ProfileOut
from .sleep_record import (
    SleepRecordBase,
    SleepRecordCreate,
    SleepEntryRequest,
    SleepRecordUpdate,
    SleepRecordOut,
    SleepSummary,
)
from .commit_record import (
    CommitRecordCreate,
    CommitRecordOut,
    CommitStats,
    CommitActivity,
)
from .activity_insight import (
    ActivityInsightUpsert,
    ActivityInsightWrite,
    ActivityInsightUpdate,
    ActivityInsightOut,
)
from .github import PushEvent, PushCommit, GitHubProfile
from .reports import MonthlyStats, MonthlyChanges, WeeklyBucket, MonthlyReport, DashboardSummary


__all__ = [
    # Session
    "Identity", "SessionCreate", "ProviderTokenUpdate", "SessionOut", "SyncResult", "SuccessResponse",

    # Profile
    "ProfileCreate", "ProfileUpdate", "ProfileOut",

    # Sleep
    "SleepRecordBase", "SleepRecordCreate", "SleepEntryRequest", "SleepRecordUpdate",
    "SleepRecordOut", "SleepSummary",

    # Commits
    "CommitRecordCreate", "CommitRecordOut", "CommitStats", "CommitActivity",

    # Insights
    "ActivityInsightUpsert", "ActivityInsightWrite", "ActivityInsightUpdate", "ActivityInsightOut",

    # GitHub
    "PushEvent", "PushCommit", "GitHubProfile",

    # Reports
    "MonthlyStats", "MonthlyChanges", "WeeklyBucket", "MonthlyReport", "DashboardSummary",
]
