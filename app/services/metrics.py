# services/metrics.py
"""
Derived metrics over already-fetched records. Pure functions, no I/O.

Records may be ORM rows, pydantic models or plain dicts; missing and None
field values count as 0.
"""
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from app.schemas.commit_record import CommitStats, HourBucket, RepositoryActivity
from app.schemas.reports import MonthlyChanges, MonthlyStats, WeeklyBucket
from app.utils.datetime_utils import end_of_month, start_of_month, start_of_week, to_local

GOAL_THRESHOLD = 70
CONSISTENCY_MAX_DELTA = 20


def _value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def _number(record: Any, field: str) -> float:
    value = _value(record, field)
    return value if value is not None else 0


# =====================================================================
# GENERIC AGGREGATES
# =====================================================================

def total(records: Iterable[Any], field: str) -> float:
    return sum(_number(record, field) for record in records)


def average(records: Sequence[Any], field: str) -> float:
    """Mean of a field; an empty sequence averages to 0."""
    if not records:
        return 0
    return total(records, field) / len(records)


def percentage_change(current: float, previous: float) -> float:
    """Relative change in percent. Defined as 100 whenever previous is 0."""
    if previous == 0:
        return 100
    return (current - previous) / previous * 100


# =====================================================================
# INSIGHT SCORES
# =====================================================================

def consistency_score(insights: Sequence[Any]) -> float:
    """
    Day-over-day stability of sleep and productivity scores, 0-100.

    Each adjacent pair of days earns one point when the sleep scores differ by
    less than 20 and one when the productivity scores do. Expects the days in
    date order; fewer than two days score 0.
    """
    if len(insights) < 2:
        return 0

    points = 0
    for previous_day, current_day in zip(insights, insights[1:]):
        if abs(_number(previous_day, "sleep_score") - _number(current_day, "sleep_score")) < CONSISTENCY_MAX_DELTA:
            points += 1
        if abs(_number(previous_day, "productivity_score") - _number(current_day, "productivity_score")) < CONSISTENCY_MAX_DELTA:
            points += 1

    return points / ((len(insights) - 1) * 2) * 100


def goals_met(insight: Any) -> bool:
    return (
        _number(insight, "sleep_score") >= GOAL_THRESHOLD
        and _number(insight, "productivity_score") >= GOAL_THRESHOLD
    )


def goals_met_count(insights: Iterable[Any]) -> int:
    return sum(1 for insight in insights if goals_met(insight))


def sort_by_date(records: Iterable[Any]) -> List[Any]:
    return sorted(records, key=lambda record: _value(record, "date"))


def monthly_stats(insights: Sequence[Any]) -> MonthlyStats:
    return MonthlyStats(
        total_commits=int(total(insights, "commit_count")),
        avg_sleep=average(insights, "sleep_score"),
        avg_productivity=average(insights, "productivity_score"),
        goals_met_count=goals_met_count(insights),
        active_hours=total(insights, "active_hours"),
        consistency_score=consistency_score(insights),
    )


def compare_stats(current: MonthlyStats, previous: MonthlyStats) -> MonthlyChanges:
    return MonthlyChanges(
        total_commits=percentage_change(current.total_commits, previous.total_commits),
        avg_sleep=percentage_change(current.avg_sleep, previous.avg_sleep),
        avg_productivity=percentage_change(current.avg_productivity, previous.avg_productivity),
        consistency_score=percentage_change(current.consistency_score, previous.consistency_score),
    )


def weekly_buckets(insights: Iterable[Any], month: date) -> List[WeeklyBucket]:
    """
    Split a month's insights into Monday-start weeks.

    Buckets run from the week holding the 1st through the week holding the
    month's last day. Counts are summed, scores averaged (0 when empty).
    """
    first_week = start_of_week(start_of_month(month))
    last_week = start_of_week(end_of_month(month))

    by_week = {}
    for insight in insights:
        by_week.setdefault(start_of_week(_value(insight, "date")), []).append(insight)

    buckets = []
    week_start = first_week
    index = 1
    while week_start <= last_week:
        week_insights = by_week.get(week_start, [])
        buckets.append(
            WeeklyBucket(
                week=f"Week {index}",
                week_start=week_start,
                commits=int(total(week_insights, "commit_count")),
                sleep=average(week_insights, "sleep_score"),
                productivity=average(week_insights, "productivity_score"),
                active_hours=total(week_insights, "active_hours"),
            )
        )
        week_start += timedelta(days=7)
        index += 1
    return buckets


def productivity_status(score: Optional[float]) -> str:
    if not score:
        return "No data"
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    return "Needs improvement"


# =====================================================================
# COMMITS
# =====================================================================

def commits_by_hour(commits: Iterable[Any]) -> List[HourBucket]:
    """Commit counts for each local clock hour 00-23."""
    counts = Counter(to_local(_value(commit, "commit_timestamp")).hour for commit in commits)
    return [HourBucket(hour=f"{hour:02d}:00", commits=counts.get(hour, 0)) for hour in range(24)]


def peak_hour(buckets: Sequence[HourBucket]) -> Optional[str]:
    """Busiest hour; the earliest wins a tie. None when there are no commits."""
    best = None
    for bucket in buckets:
        if bucket.commits and (best is None or bucket.commits > best.commits):
            best = bucket
    return best.hour if best else None


def repository_breakdown(commits: Iterable[Any]) -> List[RepositoryActivity]:
    """Commit count per repository, in order of first appearance."""
    counts = Counter()
    for commit in commits:
        counts[_value(commit, "repository")] += 1
    return [RepositoryActivity(repository=repo, commits=count) for repo, count in counts.items()]


def commits_per_hour(stats: CommitStats) -> Optional[float]:
    if stats.count == 0 or stats.hours == 0:
        return None
    return stats.count / stats.hours


# =====================================================================
# SLEEP
# =====================================================================

def sleep_duration_hours(start: datetime, end: datetime) -> float:
    """Hours between bed and wake time, to 2 decimals. An earlier wake time rolls to the next day."""
    if end < start:
        end += timedelta(days=1)
    return round((end - start).total_seconds() / 3600, 2)


def time_of_day(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"
