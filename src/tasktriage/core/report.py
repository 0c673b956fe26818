"""Pure plain-text formatting of triage results - no I/O."""

from datetime import date

from .decay import DecayInfo
from .insights import Insight
from .procrastination import MicroTask
from .schedule import ScheduleSlot
from .stats import TaskStats
from .tasks import Task, priority_label


def format_decay_line(task: Task, info: DecayInfo) -> str:
    """
    Format a single task with its decay level.

    Pure function - no I/O.
    """
    return f"{info.level.emoji} [{info.level.value:9}] {task.title} - {info.message}"


def format_slot_line(slot: ScheduleSlot) -> str:
    """
    Format a single schedule slot.

    Pure function - no I/O.
    """
    time_str = slot.start.strftime("%I:%M %p").lstrip("0")
    if slot.is_break:
        return f"{time_str:>8}  Break"
    task = slot.task
    label = priority_label(task.priority_score)
    return f"{time_str:>8}  {task.title} ({task.estimated_minutes} min, {task.category}, {label})"


def format_insight_line(insight: Insight) -> str:
    return f"- {insight.title} [{insight.kind.value}]: {insight.message}"


def format_micro_task_line(micro: MicroTask) -> str:
    return f"- {micro.title} ({micro.minutes} min)"


def format_schedule(slots: list[ScheduleSlot], hidden: int) -> str:
    """Format a whole schedule with a '+N more' footer."""
    if not slots:
        return "Add tasks to generate your schedule."
    lines = [format_slot_line(s) for s in slots]
    if hidden > 0:
        lines.append(f"+{hidden} more tasks scheduled")
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    """Format dashboard statistics."""
    return "\n".join(
        [
            f"Completion rate: {stats.completion_rate}% ({stats.completed} of {stats.total} tasks)",
            f"In progress:     {stats.in_progress} ({stats.pending} pending)",
            f"Time remaining:  {stats.hours_remaining}h estimated work",
            f"High priority:   {stats.high_priority} urgent tasks",
        ]
    )


def format_daily_completions(days: list[tuple[date, int]]) -> str:
    """One bar per day, e.g. 'Mon ###  3'."""
    return "\n".join(f"{d.strftime('%a')} {'#' * count:10} {count}" for d, count in days)
