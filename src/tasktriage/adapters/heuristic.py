"""Local heuristic prioritizer - scores tasks without any network access."""

from datetime import datetime

from tasktriage.core.decay import classify
from tasktriage.core.tasks import Task, TaskStatus, assume_timezone

URGENCY_WEIGHT = 0.4
CATEGORY_WEIGHT = 0.3
EFFORT_WEIGHT = 0.2
STATUS_WEIGHT = 0.1

# work > study > health > personal > other
CATEGORY_IMPORTANCE = {
    "work": 1.0,
    "study": 0.8,
    "health": 0.6,
    "personal": 0.4,
    "other": 0.2,
}


def effort_score(minutes: int | None) -> float:
    """Shorter tasks score higher so quick wins float up."""
    if minutes is None or minutes <= 30:
        return 1.0
    if minutes <= 60:
        return 0.7
    if minutes <= 120:
        return 0.4
    return 0.2


class HeuristicPrioritizer:
    """
    Weighted local scoring.

    Implements PriorityService protocol with the same weights the remote
    service is asked to use:

        score = urgency * 0.4 + category * 0.3 + effort * 0.2 + status * 0.1

    Urgency is the decay urgency score. Completed tasks are not scored.
    """

    def __init__(self, now: datetime | None = None):
        self.now = now

    def score(self, task: Task, now: datetime) -> float:
        urgency = classify(task, now).urgency_score
        category = CATEGORY_IMPORTANCE.get(task.category.lower(), CATEGORY_IMPORTANCE["other"])
        status = 1.0 if task.status is TaskStatus.IN_PROGRESS else 0.0
        total = (
            urgency * URGENCY_WEIGHT
            + category * CATEGORY_WEIGHT
            + effort_score(task.estimated_minutes) * EFFORT_WEIGHT
            + status * STATUS_WEIGHT
        )
        return round(min(1.0, max(0.0, total)), 2)

    def prioritize(self, tasks: list[Task]) -> dict[str, float]:
        now = self.now or datetime.now().astimezone()
        if now.tzinfo is not None:
            tasks = [assume_timezone(t, now.tzinfo) for t in tasks]
        return {t.id: self.score(t, now) for t in tasks if not t.is_completed}
