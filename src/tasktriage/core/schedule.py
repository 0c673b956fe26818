"""Same-day schedule generation - pure logic, no I/O."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from .tasks import DEFAULT_ESTIMATED_MINUTES, Task, TaskValidationError


@dataclass(frozen=True)
class ScheduleSettings:
    """Policy constants for the simulated workday."""

    day_start: time = time(9, 0)
    day_end: time = time(18, 0)
    break_minutes: int = 15
    buffer_minutes: int = 5
    break_threshold_minutes: int = 60
    max_slots: int = 6


@dataclass(frozen=True)
class ScheduleSlot:
    """A block of the workday assigned to a task or a break."""

    start: datetime
    end: datetime
    task: Task | None = None

    @property
    def is_break(self) -> bool:
        return self.task is None

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    def format(self) -> str:
        label = "Break" if self.is_break else self.task.title
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')} {label}"


def generate(
    tasks: list[Task],
    now: datetime,
    settings: ScheduleSettings = ScheduleSettings(),
) -> list[ScheduleSlot]:
    """
    Greedily lay tasks out on today's workday, in the order given.

    Callers pass non-completed tasks already sorted by priority (see
    pending_by_priority); this function does not re-sort. Tasks that would
    run past the end of the day are clipped, never moved to another day.
    Only the first `settings.max_slots` slots are returned.

    Pure function - no I/O.
    """
    day = now.date()
    cursor = datetime.combine(day, settings.day_start, tzinfo=now.tzinfo)
    day_end = datetime.combine(day, settings.day_end, tzinfo=now.tzinfo)
    break_length = timedelta(minutes=settings.break_minutes)
    buffer = timedelta(minutes=settings.buffer_minutes)

    slots: list[ScheduleSlot] = []
    for task in tasks:
        if task.is_completed:
            raise TaskValidationError(f"Task {task.id} is completed and cannot be scheduled")
        minutes = task.estimated_minutes
        if minutes is None:
            minutes = DEFAULT_ESTIMATED_MINUTES
        elif minutes <= 0:
            raise TaskValidationError(
                f"Task {task.id}: estimated_minutes must be positive to be scheduled, got {minutes!r}"
            )

        if cursor >= day_end:
            break

        task_end = cursor + timedelta(minutes=minutes)
        slots.append(ScheduleSlot(start=cursor, end=min(task_end, day_end), task=task))
        cursor = task_end

        if minutes >= settings.break_threshold_minutes and task_end < day_end:
            break_end = task_end + break_length
            slots.append(ScheduleSlot(start=task_end, end=min(break_end, day_end)))
            cursor = break_end

        cursor += buffer

    return slots[: settings.max_slots]


def hidden_task_count(tasks: list[Task], settings: ScheduleSettings = ScheduleSettings()) -> int:
    """
    Approximate number of tasks not shown, for "+N more" footers.

    Counts tasks, not slots, so it is only an estimate when breaks were added.
    """
    return max(0, len(tasks) - settings.max_slots)


def scheduled_minutes(slots: list[ScheduleSlot]) -> int:
    """Total minutes of task (non-break) time in a schedule."""
    return sum(s.duration_minutes() for s in slots if not s.is_break)
