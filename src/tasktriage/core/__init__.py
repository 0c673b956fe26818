"""Functional core - pure business logic with no I/O."""

from .tasks import (
    Task,
    TaskStatus,
    TaskValidationError,
    apply_priorities,
    pending_by_priority,
    priority_label,
)
from .decay import DecayInfo, DecayLevel, classify
from .schedule import ScheduleSettings, ScheduleSlot, generate, hidden_task_count
from .insights import Insight, InsightKind, synthesize
from .stats import TaskStats, compute_stats, daily_completions, category_distribution
from .procrastination import MicroTask, find_avoided_tasks, suggest_micro_tasks

__all__ = [
    # Tasks
    "Task",
    "TaskStatus",
    "TaskValidationError",
    "apply_priorities",
    "pending_by_priority",
    "priority_label",
    # Decay
    "DecayInfo",
    "DecayLevel",
    "classify",
    # Schedule
    "ScheduleSettings",
    "ScheduleSlot",
    "generate",
    "hidden_task_count",
    # Insights
    "Insight",
    "InsightKind",
    "synthesize",
    # Stats
    "TaskStats",
    "compute_stats",
    "daily_completions",
    "category_distribution",
    # Procrastination
    "MicroTask",
    "find_avoided_tasks",
    "suggest_micro_tasks",
]
