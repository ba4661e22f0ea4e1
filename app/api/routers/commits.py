# app/api/routers/commits.py
from datetime import date, datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_identity, get_current_session
from app.core.session import AuthSession
from app.crud.commit_record import crud_commit_record
from app.schemas.commit_record import CommitActivity, CommitRecordOut, CommitStats
from app.schemas.session import Identity, SyncResult
from app.services.dashboard import dashboard_service
from app.services.github_sync import sync_trigger
from app.utils.datetime_utils import today_local, utcnow

router = APIRouter(prefix="/commits", tags=["Commits"])


@router.get("", response_model=CommitActivity, summary="Commit activity page")
def get_commit_activity(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Last 24 hours of commits by hour and repository, plus today's stats."""
    return dashboard_service.get_commit_activity(db, user_id=identity.user_id)


@router.get("/records", response_model=List[CommitRecordOut], summary="Commits in a time window")
def get_commit_records(
    start: datetime = Query(..., description="Window start (inclusive)"),
    end: datetime = Query(..., description="Window end (inclusive)"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Commits newest first. An empty list may also mean the store was unreachable."""
    return crud_commit_record.get_records(db, user_id=identity.user_id, start=start, end=end)


@router.get("/stats", response_model=CommitStats, summary="Commit count and active hours for a day")
def get_commit_stats(
    day: Optional[date] = Query(None, description="Local calendar day, defaults to today"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return crud_commit_record.get_commit_stats(db, user_id=identity.user_id, day=day or today_local())


@router.post("/sync", response_model=SyncResult, summary="Sync commits from GitHub now")
async def sync_commits(session: AuthSession = Depends(get_current_session)):
    """
    Copy the last 30 days of pushed commits into the commit table.

    Already stored commits are skipped. On failure the commits written before
    the error are kept and ``success`` is false.
    """
    ok = await sync_trigger.run(session)
    return SyncResult(success=ok, synced_at=utcnow())
