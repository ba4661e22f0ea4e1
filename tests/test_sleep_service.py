from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone

import pytest

from app.core.exceptions import NotFoundError, RecordWriteError
from app.schemas.activity_insight import ActivityInsightUpdate, ActivityInsightWrite
from app.schemas.sleep_record import SleepEntryRequest, SleepRecordUpdate
from app.services.insights import insight_service
from app.services.sleep import sleep_service


def _add_night(db, user_id):
    return sleep_service.add_entry(
        db,
        user_id=user_id,
        entry=SleepEntryRequest(date=date(2026, 3, 1), start_time=time(23, 0), end_time=time(7, 0)),
    )


def test_update_of_missing_sleep_record_is_not_found(db, user_id):
    with pytest.raises(NotFoundError):
        sleep_service.update_entry(
            db, user_id=user_id, record_id=uuid.uuid4(), update_data=SleepRecordUpdate(quality_score=50)
        )


def test_sleep_update_failed_write_is_a_write_error(monkeypatch, db, user_id):
    record = _add_night(db, user_id)
    monkeypatch.setattr(sleep_service.crud, "update", lambda *args, **kwargs: None)

    with pytest.raises(RecordWriteError):
        sleep_service.update_entry(
            db, user_id=user_id, record_id=record.id, update_data=SleepRecordUpdate(quality_score=50)
        )


def test_sleep_update_with_start_only_keeps_duration_positive(db, user_id):
    record = _add_night(db, user_id)

    updated = sleep_service.update_entry(
        db,
        user_id=user_id,
        record_id=record.id,
        update_data=SleepRecordUpdate(start_time=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)),
    )

    assert updated.duration_hours == 22.0
    summary_records = sleep_service.crud.get_records(
        db, user_id=user_id, start_date=date(2026, 3, 1), end_date=date(2026, 3, 1)
    )
    assert [r.id for r in summary_records] == [record.id]


def test_insight_update_distinguishes_missing_from_failed_write(monkeypatch, db, user_id):
    with pytest.raises(NotFoundError):
        insight_service.update_insight(
            db, user_id=user_id, insight_id=uuid.uuid4(), update_data=ActivityInsightUpdate(sleep_score=70)
        )

    saved = insight_service.save_insight(
        db, user_id=user_id, insight_data=ActivityInsightWrite(date=date(2026, 3, 2), sleep_score=60)
    )
    monkeypatch.setattr(insight_service.crud, "update", lambda *args, **kwargs: None)

    with pytest.raises(RecordWriteError):
        insight_service.update_insight(
            db, user_id=user_id, insight_id=saved.id, update_data=ActivityInsightUpdate(sleep_score=70)
        )
