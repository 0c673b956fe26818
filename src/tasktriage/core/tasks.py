"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from enum import Enum

DEFAULT_ESTIMATED_MINUTES = 30
DEFAULT_PRIORITY_SCORE = 0.5
DEFAULT_CATEGORY = "work"


class TaskValidationError(ValueError):
    """Raised when a task snapshot or an instant cannot be used as given."""

    pass


class TaskStatus(Enum):
    """Task lifecycle. COMPLETED is terminal."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Task:
    """A read-only task snapshot supplied by the persistence layer."""

    id: str
    title: str
    created_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    category: str = DEFAULT_CATEGORY
    description: str | None = None
    deadline: datetime | None = None
    completed_at: datetime | None = None
    estimated_minutes: int | None = DEFAULT_ESTIMATED_MINUTES
    priority_score: float = DEFAULT_PRIORITY_SCORE

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def with_priority(self, score: float) -> "Task":
        """Copy of this snapshot with a new priority score."""
        return replace(self, priority_score=validate_priority(score, self.id))

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a stored row (ISO-8601 strings for instants)."""
        try:
            task_id = str(data["id"])
            title = data["title"]
            created_raw = data["created_at"]
        except KeyError as e:
            raise TaskValidationError(f"Task is missing required field {e}") from None

        try:
            status = TaskStatus(data.get("status") or TaskStatus.PENDING.value)
        except ValueError:
            raise TaskValidationError(f"Task {task_id}: unknown status {data.get('status')!r}") from None

        estimated = data.get("estimated_minutes")
        if estimated is None:
            estimated = DEFAULT_ESTIMATED_MINUTES
        elif isinstance(estimated, bool) or not isinstance(estimated, int) or estimated <= 0:
            raise TaskValidationError(
                f"Task {task_id}: estimated_minutes must be a positive integer, got {estimated!r}"
            )

        priority = data.get("priority_score")
        if priority is None:
            priority = DEFAULT_PRIORITY_SCORE

        return cls(
            id=task_id,
            title=title,
            description=data.get("description"),
            category=data.get("category") or DEFAULT_CATEGORY,
            status=status,
            created_at=parse_instant(created_raw, "created_at", task_id),
            completed_at=parse_instant(data.get("completed_at"), "completed_at", task_id),
            deadline=parse_instant(data.get("deadline"), "deadline", task_id),
            estimated_minutes=estimated,
            priority_score=validate_priority(priority, task_id),
        )

    def to_dict(self) -> dict:
        """Serialize to the stored row format."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "estimated_minutes": self.estimated_minutes,
            "priority_score": self.priority_score,
        }


def parse_instant(value, field_name: str, task_id: str) -> datetime | None:
    """Parse an ISO-8601 instant. None and empty strings mean "not set"."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise TaskValidationError(f"Task {task_id}: {field_name} must be an ISO-8601 string")
    # Python < 3.11 does not accept the trailing "Z" designator
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise TaskValidationError(f"Task {task_id}: cannot parse {field_name} {value!r}") from None


def validate_priority(score, task_id: str = "?") -> float:
    """Return score as float, rejecting anything outside [0, 1]."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise TaskValidationError(f"Task {task_id}: priority_score must be a number, got {score!r}")
    if not 0.0 <= score <= 1.0:
        raise TaskValidationError(f"Task {task_id}: priority_score {score} is outside [0, 1]")
    return float(score)


def ensure_comparable(instant: datetime, now: datetime, label: str = "instant") -> None:
    """Fail fast when naive and timezone-aware datetimes are mixed."""
    if (instant.tzinfo is None) != (now.tzinfo is None):
        raise TaskValidationError(f"{label} and now must both be naive or both be timezone-aware")


def to_local(instant: datetime, now: datetime) -> datetime:
    """Express an instant in the timezone of `now` (no-op for naive datetimes)."""
    ensure_comparable(instant, now)
    if now.tzinfo is None:
        return instant
    return instant.astimezone(now.tzinfo)


def assume_timezone(task: Task, tz: tzinfo) -> Task:
    """Copy of task with naive instants read as wall-clock time in tz."""

    def attach(instant: datetime | None) -> datetime | None:
        if instant is None or instant.tzinfo is not None:
            return instant
        return instant.replace(tzinfo=tz)

    return replace(
        task,
        created_at=attach(task.created_at),
        completed_at=attach(task.completed_at),
        deadline=attach(task.deadline),
    )


def priority_label(score: float) -> str:
    """Map a priority score to high / medium / low."""
    if score >= 0.7:
        return "high"
    if score >= 0.4:
        return "medium"
    return "low"


def pending_by_priority(tasks: list[Task]) -> list[Task]:
    """
    Non-completed tasks, highest priority first.

    Ties keep their input order (sorted() is stable).
    Pure function - no I/O.
    """
    return sorted(
        (t for t in tasks if not t.is_completed),
        key=lambda t: -t.priority_score,
    )


def apply_priorities(tasks: list[Task], scores: dict[str, float]) -> list[Task]:
    """
    Return copies of tasks with scores from the mapping applied.

    Tasks whose id is not in the mapping are returned unchanged.
    """
    return [t.with_priority(scores[t.id]) if t.id in scores else t for t in tasks]

