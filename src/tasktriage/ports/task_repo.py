"""Task repository interface."""

from typing import Protocol

from tasktriage.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for the persistence layer that owns task snapshots."""

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks."""
        ...

    def save_priorities(self, scores: dict[str, float]) -> None:
        """Persist new priority scores keyed by task id."""
        ...
