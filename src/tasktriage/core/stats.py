"""Dashboard statistics - pure logic, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .tasks import DEFAULT_ESTIMATED_MINUTES, Task, TaskStatus, to_local

HIGH_PRIORITY_THRESHOLD = 0.7


@dataclass(frozen=True)
class TaskStats:
    """Headline numbers for the task list."""

    total: int
    completed: int
    in_progress: int
    pending: int
    completion_rate: int
    hours_remaining: float
    high_priority: int


def compute_stats(tasks: list[Task]) -> TaskStats:
    """Count tasks by status and summarize remaining work."""
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status is TaskStatus.COMPLETED)
    open_tasks = [t for t in tasks if not t.is_completed]
    remaining_minutes = sum(t.estimated_minutes or DEFAULT_ESTIMATED_MINUTES for t in open_tasks)

    return TaskStats(
        total=total,
        completed=completed,
        in_progress=sum(1 for t in tasks if t.status is TaskStatus.IN_PROGRESS),
        pending=sum(1 for t in tasks if t.status is TaskStatus.PENDING),
        completion_rate=int(completed / total * 100 + 0.5) if total else 0,
        hours_remaining=int(remaining_minutes / 60 * 10 + 0.5) / 10,
        high_priority=sum(1 for t in open_tasks if t.priority_score >= HIGH_PRIORITY_THRESHOLD),
    )


def daily_completions(tasks: list[Task], now: datetime, days: int = 7) -> list[tuple[date, int]]:
    """
    Completions per local day for the last `days` days, oldest first.

    Today is the last entry.
    """
    today = now.date()
    counts = {today - timedelta(days=offset): 0 for offset in range(days - 1, -1, -1)}
    for t in tasks:
        if t.completed_at is None:
            continue
        day = to_local(t.completed_at, now).date()
        if day in counts:
            counts[day] += 1
    return list(counts.items())


def category_distribution(tasks: list[Task]) -> dict[str, int]:
    """Number of tasks per category, in the order categories first appear."""
    distribution: dict[str, int] = {}
    for t in tasks:
        distribution[t.category] = distribution.get(t.category, 0) + 1
    return distribution
