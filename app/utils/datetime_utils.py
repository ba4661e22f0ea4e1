# app/utils/datetime_utils.py
from datetime import datetime, date, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def local_tz(tz_name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(tz_name or settings.LOCAL_TIMEZONE)


def as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC. Naive values (SQLite round trips) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime, tz_name: Optional[str] = None) -> datetime:
    return as_utc(value).astimezone(local_tz(tz_name))


def today_local(tz_name: Optional[str] = None) -> date:
    return datetime.now(local_tz(tz_name)).date()


def local_day_bounds(day: date, tz_name: Optional[str] = None) -> Tuple[datetime, datetime]:
    """First and last instant of a local calendar day, as UTC datetimes."""
    tz = local_tz(tz_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def start_of_week(d: date) -> date:
    """Return Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    next_month = (d.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)


def previous_month(d: date) -> date:
    """First day of the month before the one containing d."""
    return start_of_month(start_of_month(d) - timedelta(days=1))
