from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError

from app.core.cache import TTLCache
from app.crud.activity_insight import CRUDActivityInsight
from app.crud.commit_record import CRUDCommitRecord
from app.crud.sleep_record import CRUDSleepRecord
from app.models.commit_record import CommitRecord
from app.schemas.activity_insight import ActivityInsightUpdate, ActivityInsightUpsert
from app.schemas.commit_record import CommitRecordCreate
from app.schemas.sleep_record import SleepRecordCreate


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class BrokenSession:
    """Stands in for a session whose connection is gone."""

    def __init__(self):
        self.rolled_back = False

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def add(self, obj):
        raise OperationalError("INSERT", {}, Exception("connection refused"))

    def rollback(self):
        self.rolled_back = True


def _commit(user_id, sha: str, at: datetime, repo: str = "me/alpha") -> CommitRecordCreate:
    return CommitRecordCreate(
        user_id=user_id,
        repository=repo,
        commit_hash=sha,
        commit_message=f"commit {sha}",
        commit_timestamp=at,
    )


def _night(user_id, day: date, quality: int = 80) -> SleepRecordCreate:
    start = datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc).replace(hour=23)
    return SleepRecordCreate(
        user_id=user_id,
        date=day,
        start_time=start,
        end_time=start + timedelta(hours=8),
        duration_hours=8,
        quality_score=quality,
    )


# =====================================================================
# COMMITS
# =====================================================================

def test_commit_stats_count_commits_and_distinct_hours(db, user_id):
    store = CRUDCommitRecord(cache=TTLCache())
    day = date(2026, 3, 2)
    for sha, hour, minute in (("a1", 9, 10), ("a2", 9, 40), ("a3", 10, 5)):
        store.insert(db, obj_in=_commit(user_id, sha, datetime(2026, 3, 2, hour, minute, tzinfo=timezone.utc)))
    # next day, not counted
    store.insert(db, obj_in=_commit(user_id, "b1", datetime(2026, 3, 3, 9, 0, tzinfo=timezone.utc)))

    stats = store.get_commit_stats(db, user_id=user_id, day=day)

    assert stats.count == 3
    assert stats.hours == 2


def test_commit_stats_use_the_local_calendar_day_and_clock_hours(monkeypatch, db, user_id):
    from app.core.config import settings

    monkeypatch.setattr(settings, "LOCAL_TIMEZONE", "America/New_York")
    store = CRUDCommitRecord(cache=TTLCache())
    timestamps = {
        "before": datetime(2026, 3, 2, 4, 30, tzinfo=timezone.utc),  # 2026-03-01 23:30 local
        "morning": datetime(2026, 3, 2, 14, 10, tzinfo=timezone.utc),  # 09:10 local
        "evening": datetime(2026, 3, 3, 2, 30, tzinfo=timezone.utc),  # 21:30 local, past UTC midnight
        "evening2": datetime(2026, 3, 3, 2, 50, tzinfo=timezone.utc),  # 21:50 local
        "late": datetime(2026, 3, 3, 3, 15, tzinfo=timezone.utc),  # 22:15 local
        "after": datetime(2026, 3, 3, 5, 30, tzinfo=timezone.utc),  # 2026-03-03 00:30 local
    }
    for sha, at in timestamps.items():
        store.insert(db, obj_in=_commit(user_id, sha, at))

    stats = store.get_commit_stats(db, user_id=user_id, day=date(2026, 3, 2))

    # a UTC calendar day would give count=2, hours=2
    assert stats.count == 4
    assert stats.hours == 3


def test_duplicate_commit_insert_is_ignored(db, user_id):
    store = CRUDCommitRecord(cache=TTLCache())
    at = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

    first = store.insert(db, obj_in=_commit(user_id, "abc123", at))
    second = store.insert(db, obj_in=_commit(user_id, "abc123", at))

    assert first is not None
    assert first.commit_hash == "abc123"
    assert second is None
    assert db.query(CommitRecord).filter(CommitRecord.user_id == user_id).count() == 1


def test_commit_records_newest_first_within_window(db, user_id):
    store = CRUDCommitRecord(cache=TTLCache())
    base = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
    store.insert(db, obj_in=_commit(user_id, "old", base - timedelta(days=3)))
    store.insert(db, obj_in=_commit(user_id, "mid", base - timedelta(hours=5)))
    store.insert(db, obj_in=_commit(user_id, "new", base - timedelta(hours=1)))

    records = store.get_records(db, user_id=user_id, start=base - timedelta(days=1), end=base)

    assert [r.commit_hash for r in records] == ["new", "mid"]


def test_reads_are_cached_until_a_write_clears_the_cache(db, user_id):
    clock = FakeClock()
    store = CRUDCommitRecord(cache=TTLCache(ttl_seconds=300, clock=clock))
    day = date(2026, 3, 2)
    at = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

    assert store.get_commit_stats(db, user_id=user_id, day=day).count == 0

    # a row written behind the store's back is not seen while the entry is fresh
    db.add(CommitRecord(user_id=user_id, repository="me/alpha", commit_hash="x1", commit_timestamp=at))
    db.commit()
    clock.now += 120
    assert store.get_commit_stats(db, user_id=user_id, day=day).count == 0

    clock.now += 180
    assert store.get_commit_stats(db, user_id=user_id, day=day).count == 1

    store.insert(db, obj_in=_commit(user_id, "x2", at))
    assert store.get_commit_stats(db, user_id=user_id, day=day).count == 2


def test_commit_reads_degrade_to_empty_on_database_error(user_id):
    store = CRUDCommitRecord(cache=TTLCache())
    broken = BrokenSession()

    assert store.get_records(
        broken, user_id=user_id,
        start=datetime(2026, 3, 1, tzinfo=timezone.utc), end=datetime(2026, 3, 2, tzinfo=timezone.utc),
    ) == []
    stats = store.get_commit_stats(broken, user_id=user_id, day=date(2026, 3, 2))
    assert (stats.count, stats.hours) == (0, 0)
    assert broken.rolled_back
    # failures are not cached
    assert len(store.cache) == 0


# =====================================================================
# SLEEP
# =====================================================================

def test_sleep_records_in_range_newest_first(db, user_id):
    store = CRUDSleepRecord(cache=TTLCache())
    for day in (date(2026, 3, 1), date(2026, 3, 3), date(2026, 3, 10)):
        assert store.insert(db, obj_in=_night(user_id, day)) is not None

    records = store.get_records(db, user_id=user_id, start_date=date(2026, 3, 1), end_date=date(2026, 3, 7))

    assert [r.date for r in records] == [date(2026, 3, 3), date(2026, 3, 1)]


def test_second_sleep_record_for_same_night_fails(db, user_id):
    store = CRUDSleepRecord(cache=TTLCache())
    assert store.insert(db, obj_in=_night(user_id, date(2026, 3, 1))) is not None
    assert store.insert(db, obj_in=_night(user_id, date(2026, 3, 1), quality=50)) is None


def test_sleep_update_rederives_duration(db, user_id):
    from app.schemas.sleep_record import SleepRecordUpdate

    store = CRUDSleepRecord(cache=TTLCache())
    record = store.insert(db, obj_in=_night(user_id, date(2026, 3, 1)))
    new_end = datetime(2026, 3, 2, 5, 30, tzinfo=timezone.utc)

    updated = store.update(
        db, user_id=user_id, record_id=record.id, obj_in=SleepRecordUpdate(end_time=new_end, quality_score=60)
    )

    assert updated.duration_hours == 6.5
    assert updated.quality_score == 60


def test_sleep_update_of_start_only_merges_with_stored_end(db, user_id):
    from app.schemas.sleep_record import SleepRecordUpdate

    store = CRUDSleepRecord(cache=TTLCache())
    night = date(2026, 3, 1)
    record = store.insert(db, obj_in=_night(user_id, night))  # 23:00 -> 07:00

    later = store.update(
        db, user_id=user_id, record_id=record.id,
        obj_in=SleepRecordUpdate(start_time=datetime(2026, 3, 2, 0, 30, tzinfo=timezone.utc)),
    )
    assert later.duration_hours == 6.5

    # a start after the stored end rolls the end to the next day
    rolled = store.update(
        db, user_id=user_id, record_id=record.id,
        obj_in=SleepRecordUpdate(start_time=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)),
    )
    assert rolled.duration_hours == 22.0

    records = store.get_records(db, user_id=user_id, start_date=night, end_date=night)
    assert [r.duration_hours for r in records] == [22.0]


def test_sleep_update_of_end_before_start_rolls_to_next_day(db, user_id):
    from app.schemas.sleep_record import SleepRecordUpdate

    store = CRUDSleepRecord(cache=TTLCache())
    record = store.insert(db, obj_in=_night(user_id, date(2026, 3, 1)))  # starts 23:00

    updated = store.update(
        db, user_id=user_id, record_id=record.id,
        obj_in=SleepRecordUpdate(end_time=datetime(2026, 3, 1, 6, 0, tzinfo=timezone.utc)),
    )

    assert updated.duration_hours == 7.0
    assert store.get(db, user_id=user_id, record_id=record.id).duration_hours == 7.0


def test_sleep_write_failure_returns_none(user_id):
    store = CRUDSleepRecord(cache=TTLCache())
    broken = BrokenSession()

    assert store.insert(broken, obj_in=_night(user_id, date(2026, 3, 1))) is None
    assert store.get_records(broken, user_id=user_id, start_date=date(2026, 3, 1), end_date=date(2026, 3, 7)) == []
    assert broken.rolled_back


# =====================================================================
# INSIGHTS
# =====================================================================

def test_insight_upsert_replaces_the_days_scores(db, user_id):
    store = CRUDActivityInsight(cache=TTLCache())
    day = date(2026, 3, 2)

    first = store.upsert(db, obj_in=ActivityInsightUpsert(
        user_id=user_id, date=day, productivity_score=50, sleep_score=60, commit_count=2,
        recommendations=["Go to bed earlier"],
    ))
    second = store.upsert(db, obj_in=ActivityInsightUpsert(
        user_id=user_id, date=day, productivity_score=85, sleep_score=90, commit_count=7,
    ))

    assert first.id == second.id
    assert second.productivity_score == 85
    assert second.commit_count == 7
    assert second.recommendations == []


def test_latest_insight_and_partial_update(db, user_id):
    store = CRUDActivityInsight(cache=TTLCache())
    assert store.get_latest(db, user_id=user_id) is None

    store.upsert(db, obj_in=ActivityInsightUpsert(user_id=user_id, date=date(2026, 3, 1), sleep_score=70))
    newest = store.upsert(db, obj_in=ActivityInsightUpsert(user_id=user_id, date=date(2026, 3, 2), sleep_score=75))

    assert store.get_latest(db, user_id=user_id).id == newest.id

    updated = store.update(
        db, user_id=user_id, insight_id=newest.id, obj_in=ActivityInsightUpdate(productivity_score=88)
    )
    assert updated.productivity_score == 88
    assert updated.sleep_score == 75
    assert store.get_latest(db, user_id=user_id).productivity_score == 88
