"""Task decay classification - pure logic, no I/O.

Unfinished tasks "age" as time passes. The level is a derived view that is
recomputed on every call; nothing here is cached or stored.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import total_ordering

from .tasks import Task, TaskValidationError, ensure_comparable

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


@total_ordering
class DecayLevel(Enum):
    """Decay severity, ordered fresh < aging < stale < critical < emergency."""

    FRESH = "fresh"
    AGING = "aging"
    STALE = "stale"
    CRITICAL = "critical"
    EMERGENCY = "emergency"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    def __lt__(self, other: "DecayLevel") -> bool:
        if not isinstance(other, DecayLevel):
            return NotImplemented
        return self.severity < other.severity


_SEVERITY = {level: i for i, level in enumerate(DecayLevel)}

_EMOJI = {
    DecayLevel.FRESH: "🌱",
    DecayLevel.AGING: "🍃",
    DecayLevel.STALE: "🍂",
    DecayLevel.CRITICAL: "🔥",
    DecayLevel.EMERGENCY: "💀",
}


@dataclass(frozen=True)
class DecayInfo:
    """Result of classifying one task."""

    level: DecayLevel
    hours_old: int
    days_old: int
    urgency_score: float
    message: str
    style: str


def _whole_units(seconds: float, unit: int) -> int:
    # Truncates toward zero, so a deadline 2h59m away counts as 2 hours
    return int(seconds / unit)


def classify(task: Task, now: datetime) -> DecayInfo:
    """
    Classify a task's urgency. First matching rule wins.

    1. Completed tasks never decay.
    2. A deadline within 24 hours (or already past) decides the level.
    3. Otherwise the task's age decides.

    Pure function - no I/O. Raises TaskValidationError if naive and aware
    datetimes are mixed, or if an open task was created after `now`.
    """
    ensure_comparable(task.created_at, now, "created_at")
    age_seconds = (now - task.created_at).total_seconds()
    if task.is_completed:
        age_seconds = max(0.0, age_seconds)
    elif age_seconds < 0:
        raise TaskValidationError(
            f"Task {task.id}: created_at {task.created_at.isoformat()} is after now {now.isoformat()}"
        )

    hours_old = _whole_units(age_seconds, SECONDS_PER_HOUR)
    days_old = _whole_units(age_seconds, SECONDS_PER_DAY)

    def info(level: DecayLevel, score: float, message: str) -> DecayInfo:
        return DecayInfo(
            level=level,
            hours_old=hours_old,
            days_old=days_old,
            urgency_score=score,
            message=message,
            style="opacity-60" if task.is_completed else f"decay-{level.value}",
        )

    if task.is_completed:
        return info(DecayLevel.FRESH, 0.0, "Completed")

    if task.deadline is not None:
        ensure_comparable(task.deadline, now, "deadline")
        if task.deadline < now:
            return info(DecayLevel.EMERGENCY, 1.0, "Overdue! This task needs immediate attention")

        hours_to_deadline = _whole_units((task.deadline - now).total_seconds(), SECONDS_PER_HOUR)
        if hours_to_deadline <= 2:
            return info(DecayLevel.EMERGENCY, 0.95, "Due very soon! Focus on this now")
        if hours_to_deadline <= 6:
            return info(DecayLevel.CRITICAL, 0.8, "Due in a few hours")
        if hours_to_deadline <= 24:
            return info(DecayLevel.STALE, 0.6, "Due today")

    if days_old >= 7:
        return info(DecayLevel.EMERGENCY, 0.9, f"{days_old} days old - this task is withering away!")
    if days_old >= 4:
        return info(DecayLevel.CRITICAL, 0.7, f"{days_old} days old - losing freshness")
    if days_old >= 2:
        return info(DecayLevel.STALE, 0.5, f"{days_old} days old - starting to age")
    if hours_old >= 24:
        return info(DecayLevel.AGING, 0.3, "Created yesterday")
    return info(DecayLevel.FRESH, 0.1, "Fresh task")


def classify_all(tasks: list[Task], now: datetime) -> list[tuple[Task, DecayInfo]]:
    """Classify every task, preserving input order."""
    return [(t, classify(t, now)) for t in tasks]


def most_urgent(tasks: list[Task], now: datetime) -> list[tuple[Task, DecayInfo]]:
    """
    Non-completed tasks ordered by urgency score, highest first.

    Ties keep input order.
    """
    pairs = [(t, classify(t, now)) for t in tasks if not t.is_completed]
    return sorted(pairs, key=lambda pair: -pair[1].urgency_score)
