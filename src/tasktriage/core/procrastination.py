"""Avoided-task detection and micro-task suggestions - pure logic, no I/O."""

from dataclasses import dataclass
from datetime import datetime

from .tasks import Task, TaskStatus, ensure_comparable

AVOIDED_MIN_DAYS = 2
MAX_AVOIDED = 3

# (title prefix, minutes)
MICRO_TASK_TEMPLATES = [
    ("Outline", 5),
    ("Research", 10),
    ("List 3 steps for", 5),
    ("Set up workspace for", 3),
    ("Define goal for", 5),
]


@dataclass(frozen=True)
class MicroTask:
    """A tiny starter task that breaks the barrier on an avoided task."""

    title: str
    minutes: int
    parent_id: str
    parent_title: str

    def to_create_input(self) -> dict:
        """Row for the persistence layer to create the micro-task."""
        return {
            "title": self.title,
            "description": f"Quick start task to break the barrier for: {self.parent_title}",
            "estimated_minutes": self.minutes,
            "category": "other",
        }


def _whole_days(task: Task, now: datetime) -> int:
    ensure_comparable(task.created_at, now, "created_at")
    return (now - task.created_at).days


def find_avoided_tasks(tasks: list[Task], now: datetime) -> list[Task]:
    """
    Pending tasks that have not been started for two or more days.

    Oldest first, at most three.
    """
    avoided = [
        t for t in tasks
        if t.status is TaskStatus.PENDING and _whole_days(t, now) >= AVOIDED_MIN_DAYS
    ]
    avoided.sort(key=lambda t: -_whole_days(t, now))
    return avoided[:MAX_AVOIDED]


def suggest_micro_tasks(avoided: list[Task]) -> list[MicroTask]:
    """One starter task per avoided task, rotating through the templates."""
    suggestions = []
    for i, task in enumerate(avoided):
        prefix, minutes = MICRO_TASK_TEMPLATES[i % len(MICRO_TASK_TEMPLATES)]
        suggestions.append(
            MicroTask(
                title=f"{prefix}: {task.title}",
                minutes=minutes,
                parent_id=task.id,
                parent_title=task.title,
            )
        )
    return suggestions
