# schemas/commit_record.py
from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class CommitRecordCreate(BaseModel):
    """Insert payload produced by the commit sync."""
    user_id: UUID
    repository: str
    commit_hash: str
    commit_message: Optional[str] = None
    commit_timestamp: datetime


class CommitRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    repository: str
    commit_hash: str
    commit_message: Optional[str] = None
    commit_timestamp: datetime
    created_at: Optional[datetime] = None


class CommitStats(BaseModel):
    """Commits in one local calendar day and the distinct clock hours they touch."""
    count: int = 0
    hours: int = 0


class HourBucket(BaseModel):
    hour: str  # "HH:00"
    commits: int


class RepositoryActivity(BaseModel):
    repository: str
    commits: int


class CommitActivity(BaseModel):
    """Commits page payload."""
    stats: CommitStats
    commits_by_hour: List[HourBucket]
    peak_hour: Optional[str] = None
    repositories: List[RepositoryActivity]
    recent: List[CommitRecordOut]
