"""Tests for the habit insight synthesizer."""

from datetime import datetime, timedelta

import pytest

from tasktriage.core.insights import (
    InsightKind,
    avoidance_pattern,
    duration_prediction,
    format_hour,
    morning_pattern,
    peak_productivity,
    synthesize,
    week_start,
    weekly_momentum,
)
from tasktriage.core.tasks import Task, TaskStatus


@pytest.fixture
def now():
    # Wednesday
    return datetime(2025, 1, 15, 10, 0)


_counter = iter(range(10_000))


def done(hour, category="work", day=14, minutes=30):
    task_id = f"done-{next(_counter)}"
    return Task(
        id=task_id,
        title=task_id,
        category=category,
        status=TaskStatus.COMPLETED,
        created_at=datetime(2025, 1, 1, 8, 0),
        completed_at=datetime(2025, 1, day, hour, 0),
        estimated_minutes=minutes,
    )


def open_task(category="work", age=timedelta(hours=1), status=TaskStatus.PENDING, now=datetime(2025, 1, 15, 10, 0)):
    task_id = f"open-{next(_counter)}"
    return Task(id=task_id, title=task_id, category=category, status=status, created_at=now - age)


class TestPeakProductivity:
    def test_reports_most_common_hour(self, now):
        insight = peak_productivity([done(9), done(9), done(14)], now)
        assert insight.id == "peak-hours"
        assert insight.kind is InsightKind.PATTERN
        assert insight.details["peak_hour"] == 9
        assert insight.message == "It's your peak time! You complete most tasks around 9 AM"

    def test_not_peak_time(self):
        late = datetime(2025, 1, 15, 16, 0)
        insight = peak_productivity([done(9), done(9), done(14)], late)
        assert insight.details["is_peak_time"] is False
        assert insight.message == "You're most productive around 9 AM"

    def test_tie_goes_to_first_hour_seen(self, now):
        insight = peak_productivity([done(14), done(9), done(14), done(9)], now)
        assert insight.details["peak_hour"] == 14
        assert insight.message == "You're most productive around 2 PM"

    def test_needs_three_completions(self, now):
        assert peak_productivity([done(9), done(9)], now) is None

    def test_synthesize_ignores_completions_without_timestamp(self, now):
        undated = Task(
            id="x",
            title="x",
            status=TaskStatus.COMPLETED,
            created_at=datetime(2025, 1, 1),
            completed_at=None,
        )
        ids = [i.id for i in synthesize([done(9), done(9), undated], now)]
        assert "peak-hours" not in ids


class TestMorningPattern:
    def test_top_morning_category(self, now):
        completed = [done(7, "study"), done(9, "study"), done(10, "work"), done(15, "work"), done(16, "work")]
        pending = [open_task("study"), open_task("study"), open_task("work")]
        insight = morning_pattern(completed, pending, now)
        assert insight.kind is InsightKind.SUGGESTION
        assert insight.message == "You usually tackle study tasks in the morning. 2 waiting!"

    def test_tie_goes_to_first_category_seen(self, now):
        completed = [done(8, "health"), done(9, "work")]
        assert morning_pattern(completed, [], now).details["category"] == "health"

    def test_only_in_the_morning(self):
        afternoon = datetime(2025, 1, 15, 12, 0)
        assert morning_pattern([done(7), done(8)], [], afternoon) is None

    def test_needs_two_morning_completions(self, now):
        assert morning_pattern([done(7), done(12), done(5)], [], now) is None


class TestDurationPrediction:
    def test_average_of_same_category(self):
        completed = [done(9, "study", minutes=30), done(10, "study", minutes=45), done(11, "work", minutes=120)]
        pending = [open_task("study"), open_task("work")]
        insight = duration_prediction(completed, pending)
        assert insight.kind is InsightKind.PREDICTION
        assert insight.details["average_minutes"] == 38
        assert insight.message == "Similar study tasks took you ~38 minutes on average"

    def test_missing_estimate_counts_as_thirty(self):
        no_estimate = Task(
            id="n",
            title="n",
            category="work",
            status=TaskStatus.COMPLETED,
            created_at=datetime(2025, 1, 1),
            completed_at=datetime(2025, 1, 14, 9),
            estimated_minutes=None,
        )
        insight = duration_prediction([no_estimate, done(9, minutes=60)], [open_task()])
        assert insight.details["average_minutes"] == 45

    def test_needs_two_similar(self):
        assert duration_prediction([done(9, "study"), done(9, "work")], [open_task("study")]) is None

    def test_needs_pending(self):
        assert duration_prediction([done(9), done(10)], []) is None


class TestAvoidancePattern:
    def test_most_avoided_category(self, now):
        pending = [
            open_task("personal", age=timedelta(days=4)),
            open_task("work", age=timedelta(days=3)),
            open_task("work", age=timedelta(days=5)),
        ]
        insight = avoidance_pattern(pending, now)
        assert insight.id == "procrastination"
        assert insight.details == {"category": "work", "count": 2}
        assert insight.message.startswith("You might be avoiding work tasks.")

    def test_tie_keeps_first_category(self, now):
        pending = [open_task("personal", age=timedelta(days=4)), open_task("work", age=timedelta(days=4))]
        assert avoidance_pattern(pending, now).details["category"] == "personal"

    def test_threshold_uses_fractional_days(self, now):
        almost = timedelta(days=2, hours=23, minutes=59)
        pending = [open_task(age=almost), open_task(age=almost), open_task(age=timedelta(days=3))]
        assert avoidance_pattern(pending, now) is None

    def test_in_progress_tasks_are_not_avoided(self, now):
        pending = [
            open_task(age=timedelta(days=6), status=TaskStatus.IN_PROGRESS),
            open_task(age=timedelta(days=6)),
        ]
        assert avoidance_pattern(pending, now) is None


class TestWeeklyMomentum:
    def test_week_starts_sunday_by_default(self, now):
        assert week_start(now) == datetime(2025, 1, 12)
        assert week_start(now, "Monday") == datetime(2025, 1, 13)

    def test_average_per_day(self, now):
        completed = [done(9, day=d) for d in (12, 13, 13, 14, 14, 14, 15, 15, 15)]
        insight = weekly_momentum(completed, now)
        assert insight.message == "You're averaging 3.0 tasks/day this week. Keep it up!"
        assert insight.details["completed_this_week"] == 9

    def test_below_threshold(self, now):
        completed = [done(9, day=d) for d in (12, 13, 13, 14, 14, 14, 15, 15)]
        assert weekly_momentum(completed, now) is None

    def test_sunday_divides_by_one(self):
        sunday = datetime(2025, 1, 12, 18, 0)
        completed = [done(9, day=12), done(10, day=12), done(11, day=12), done(9, day=11)]
        insight = weekly_momentum(completed, sunday)
        assert insight.details["per_day"] == 3.0

    def test_last_week_does_not_count(self, now):
        assert weekly_momentum([done(9, day=d) for d in (8, 9, 10, 11) for _ in range(3)], now) is None


class TestSynthesize:
    def test_empty(self, now):
        assert synthesize([], now) == []

    def test_at_most_four_in_fixed_order(self, now):
        completed = [done(9, day=d) for d in (12, 13, 13, 14, 14, 14, 15, 15, 15)]
        pending = [
            open_task("work"),
            open_task("work", age=timedelta(days=5)),
            open_task("work", age=timedelta(days=6)),
        ]
        assert weekly_momentum(completed, now) is not None

        insights = synthesize(completed + pending, now)
        assert [i.id for i in insights] == [
            "peak-hours",
            "morning-pattern",
            "duration-prediction",
            "procrastination",
        ]

    def test_skips_unmet_preconditions(self, now):
        insights = synthesize([done(9, day=d) for d in (12, 13, 13, 14, 14, 14, 15, 15, 15)], now)
        assert [i.id for i in insights] == ["peak-hours", "morning-pattern", "momentum"]

    def test_idempotent(self, now):
        tasks = [done(9), done(9), done(14), open_task(age=timedelta(days=4)), open_task(age=timedelta(days=4))]
        assert synthesize(tasks, now) == synthesize(tasks, now)


@pytest.mark.parametrize("hour,label", [(0, "12 AM"), (9, "9 AM"), (12, "12 PM"), (23, "11 PM")])
def test_format_hour(hour, label):
    assert format_hour(hour) == label
