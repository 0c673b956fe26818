"""Pattern insights derived from task history - pure logic, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from .tasks import Task, TaskStatus, ensure_comparable, to_local

MAX_INSIGHTS = 4
MORNING_START = 6
MORNING_END = 12
AVOIDANCE_MIN_DAYS = 3
MOMENTUM_MIN_PER_DAY = 3
DEFAULT_DURATION_MINUTES = 30

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class InsightKind(Enum):
    SUGGESTION = "suggestion"
    PATTERN = "pattern"
    PREDICTION = "prediction"


@dataclass(frozen=True)
class Insight:
    """A human-readable observation about the user's habits."""

    id: str
    kind: InsightKind
    title: str
    message: str
    details: dict = field(default_factory=dict, compare=False)


def format_hour(hour: int) -> str:
    """Format an hour of day as '9 AM', '12 PM', '12 AM'."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def _most_common(values: list[str]) -> tuple[str, int] | None:
    """Most frequent value. On a tie the first value seen wins."""
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    best: tuple[str, int] | None = None
    for value, count in counts.items():
        if best is None or count > best[1]:
            best = (value, count)
    return best


def week_start(now: datetime, first_day: str = "sunday") -> datetime:
    """Midnight at the start of the week containing `now`."""
    offset = (now.weekday() - WEEKDAYS.index(first_day.lower())) % 7
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=offset)


def peak_productivity(completed: list[Task], now: datetime) -> Insight | None:
    """Hour of day with the most completions."""
    if len(completed) < 3:
        return None

    hour_counts: dict[int, int] = {}
    for t in completed:
        hour = to_local(t.completed_at, now).hour
        hour_counts[hour] = hour_counts.get(hour, 0) + 1

    peak_hour, peak_count = None, 0
    for hour, count in hour_counts.items():
        if count > peak_count:
            peak_hour, peak_count = hour, count

    is_peak_time = abs(now.hour - peak_hour) <= 1
    if is_peak_time:
        message = f"It's your peak time! You complete most tasks around {format_hour(peak_hour)}"
    else:
        message = f"You're most productive around {format_hour(peak_hour)}"

    return Insight(
        id="peak-hours",
        kind=InsightKind.PATTERN,
        title="Peak Productivity",
        message=message,
        details={"peak_hour": peak_hour, "completions": peak_count, "is_peak_time": is_peak_time},
    )


def morning_pattern(completed: list[Task], pending: list[Task], now: datetime) -> Insight | None:
    """Category the user usually finishes in the morning, shown only in the morning."""
    morning = [t for t in completed if MORNING_START <= to_local(t.completed_at, now).hour < MORNING_END]
    if len(morning) < 2 or not MORNING_START <= now.hour < MORNING_END:
        return None

    category, _ = _most_common([t.category for t in morning])
    waiting = sum(1 for t in pending if t.category == category)
    return Insight(
        id="morning-pattern",
        kind=InsightKind.SUGGESTION,
        title="Morning Pattern",
        message=f"You usually tackle {category} tasks in the morning. {waiting} waiting!",
        details={"category": category, "waiting": waiting},
    )


def duration_prediction(completed: list[Task], pending: list[Task]) -> Insight | None:
    """Average estimate of completed tasks sharing the first pending task's category."""
    if not pending or len(completed) < 2:
        return None

    category = pending[0].category
    similar = [t for t in completed if t.category == category]
    if len(similar) < 2:
        return None

    total = sum(t.estimated_minutes or DEFAULT_DURATION_MINUTES for t in similar)
    average = _round_half_up(total / len(similar))
    return Insight(
        id="duration-prediction",
        kind=InsightKind.PREDICTION,
        title="Time Prediction",
        message=f"Similar {category} tasks took you ~{average} minutes on average",
        details={"category": category, "average_minutes": average, "sample_size": len(similar)},
    )


def avoidance_pattern(pending: list[Task], now: datetime) -> Insight | None:
    """Category with the most untouched tasks at least three days old."""
    old = []
    for t in pending:
        if t.status is not TaskStatus.PENDING:
            continue
        ensure_comparable(t.created_at, now, "created_at")
        elapsed_minutes = int((now - t.created_at).total_seconds() / 60)
        if elapsed_minutes / 1440 >= AVOIDANCE_MIN_DAYS:
            old.append(t)

    if len(old) < 2:
        return None

    category, count = _most_common([t.category for t in old])
    if not category:
        return None

    return Insight(
        id="procrastination",
        kind=InsightKind.SUGGESTION,
        title="Avoidance Pattern",
        message=f"You might be avoiding {category} tasks. Try a 5-min micro-task to break the barrier!",
        details={"category": category, "count": count},
    )


def weekly_momentum(completed: list[Task], now: datetime, first_day: str = "sunday") -> Insight | None:
    """Average completions per day so far this week."""
    start = week_start(now, first_day)
    end = start + timedelta(days=7)
    this_week = [t for t in completed if start <= to_local(t.completed_at, now) < end]
    if not this_week:
        return None

    day_index = (now - start).days
    per_day = len(this_week) / max(1, day_index)
    if per_day < MOMENTUM_MIN_PER_DAY:
        return None

    return Insight(
        id="momentum",
        kind=InsightKind.PATTERN,
        title="Great Momentum!",
        message=f"You're averaging {per_day:.1f} tasks/day this week. Keep it up!",
        details={"completed_this_week": len(this_week), "per_day": round(per_day, 1)},
    )


def synthesize(tasks: list[Task], now: datetime, first_day: str = "sunday") -> list[Insight]:
    """
    Derive up to four insights from the task history.

    Insights are produced in a fixed order (peak hours, morning pattern,
    duration prediction, avoidance, momentum) and the list is truncated, so
    the later kinds are the first to be dropped.

    Pure function - no I/O.
    """
    completed = [t for t in tasks if t.is_completed and t.completed_at is not None]
    pending = [t for t in tasks if not t.is_completed]

    candidates = [
        peak_productivity(completed, now),
        morning_pattern(completed, pending, now),
        duration_prediction(completed, pending),
        avoidance_pattern(pending, now),
        weekly_momentum(completed, now, first_day),
    ]
    return [i for i in candidates if i is not None][:MAX_INSIGHTS]
