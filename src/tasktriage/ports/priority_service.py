"""Prioritization service interface."""

from typing import Protocol

from tasktriage.core.tasks import Task


class PriorityService(Protocol):
    """Interface for anything that scores tasks, local or remote."""

    def prioritize(self, tasks: list[Task]) -> dict[str, float]:
        """Return a mapping of task id to priority score in [0, 1].

        Implementations raise PrioritizationError when no scores can be produced.
        """
        ...
