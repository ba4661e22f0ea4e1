# app/api/routers/sleep.py
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_identity
from app.schemas.session import Identity, SuccessResponse
from app.schemas.sleep_record import (
    SleepEntryRequest,
    SleepRecordOut,
    SleepRecordUpdate,
    SleepSummary,
)
from app.services.sleep import sleep_service

router = APIRouter(prefix="/sleep", tags=["Sleep"])


@router.get("", response_model=SleepSummary, summary="Sleep page")
def get_sleep_summary(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Last 7 nights with average duration and quality."""
    return sleep_service.get_summary(db, user_id=identity.user_id)


@router.post(
    "",
    response_model=SleepRecordOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a sleep record"
)
def add_sleep_record(
    entry: SleepEntryRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Log one night.

    - **date**: the night's date
    - **start_time** / **end_time**: bed and wake clock times; a wake time
      before the bed time is on the next day
    - **quality_score**: 0-100
    """
    return sleep_service.add_entry(db, user_id=identity.user_id, entry=entry)


@router.put("/{record_id}", response_model=SleepRecordOut, summary="Update a sleep record")
def update_sleep_record(
    record_id: UUID,
    update_data: SleepRecordUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return sleep_service.update_entry(
        db, user_id=identity.user_id, record_id=record_id, update_data=update_data
    )


@router.delete("/{record_id}", response_model=SuccessResponse, summary="Delete a sleep record")
def delete_sleep_record(
    record_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    sleep_service.delete_entry(db, user_id=identity.user_id, record_id=record_id)
    return SuccessResponse(message="Sleep record deleted successfully")
