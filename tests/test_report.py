"""Tests for plain-text report formatting."""

from datetime import date, datetime, timedelta

from tasktriage.core.decay import classify
from tasktriage.core.insights import Insight, InsightKind
from tasktriage.core.report import (
    format_daily_completions,
    format_decay_line,
    format_insight_line,
    format_schedule,
    format_stats,
)
from tasktriage.core.schedule import generate
from tasktriage.core.stats import compute_stats
from tasktriage.core.tasks import Task

NOW = datetime(2025, 1, 15, 8, 0)


def make_task(task_id, minutes=30, priority=0.8):
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        created_at=NOW - timedelta(days=8),
        estimated_minutes=minutes,
        priority_score=priority,
    )


def test_format_decay_line():
    task = make_task("a")
    line = format_decay_line(task, classify(task, NOW))
    assert line == "💀 [emergency] Task a - 8 days old - this task is withering away!"


def test_format_schedule_with_break_and_footer():
    slots = generate([make_task("a", 90), make_task("b", 30, priority=0.5)], NOW)
    text = format_schedule(slots, hidden=2)
    assert text.splitlines() == [
        " 9:00 AM  Task a (90 min, work, high)",
        "10:30 AM  Break",
        "10:50 AM  Task b (30 min, work, medium)",
        "+2 more tasks scheduled",
    ]


def test_format_empty_schedule():
    assert format_schedule([], hidden=0) == "Add tasks to generate your schedule."


def test_format_insight_line():
    insight = Insight(id="x", kind=InsightKind.PREDICTION, title="Time Prediction", message="~30 minutes")
    assert format_insight_line(insight) == "- Time Prediction [prediction]: ~30 minutes"


def test_format_stats():
    text = format_stats(compute_stats([make_task("a"), make_task("b")]))
    assert "Completion rate: 0% (0 of 2 tasks)" in text
    assert "High priority:   2 urgent tasks" in text


def test_format_daily_completions():
    text = format_daily_completions([(date(2025, 1, 13), 2), (date(2025, 1, 14), 0)])
    assert text.splitlines() == ["Mon ##         2", "Tue            0"]
