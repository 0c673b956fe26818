"""Shared workflow layer between the CLI and other front ends.

Each function wires a repository or service to the pure core and returns
plain data; nothing here prints.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from .adapters.ai_gateway import AIGatewayPrioritizer, PrioritizationError
from .adapters.heuristic import HeuristicPrioritizer
from .adapters.json_store import JsonTaskStore
from .config import Config
from .core.schedule import ScheduleSlot, generate, hidden_task_count
from .core.tasks import Task, apply_priorities, pending_by_priority
from .ports import PriorityService, TaskRepository

logger = logging.getLogger(__name__)


@dataclass
class PrioritizationResult:
    """Outcome of a prioritization run."""

    tasks: list[Task]
    scores: dict[str, float]
    source: str

    @property
    def applied(self) -> bool:
        return bool(self.scores)


def get_store(config: Config) -> JsonTaskStore:
    """Resolve the task file from config."""
    return JsonTaskStore(config.tasks_file)


def get_prioritizer(config: Config, local: bool = False, now: datetime | None = None) -> PriorityService:
    """Pick the remote gateway or the local heuristic."""
    if local or config.prioritizer == "local":
        return HeuristicPrioritizer(now=now)
    return AIGatewayPrioritizer(config)


def refresh_priorities(tasks: list[Task], service: PriorityService) -> PrioritizationResult:
    """
    Score non-completed tasks and apply the scores to copies.

    When the service fails, the tasks are returned untouched and the
    failure is logged; existing priority scores stay authoritative.
    """
    candidates = [t for t in tasks if not t.is_completed]
    source = type(service).__name__
    if not candidates:
        return PrioritizationResult(tasks=list(tasks), scores={}, source=source)

    try:
        scores = service.prioritize(candidates)
    except PrioritizationError as e:
        logger.warning(f"Prioritization via {source} failed, keeping existing scores: {e}")
        return PrioritizationResult(tasks=list(tasks), scores={}, source=source)

    logger.info(f"{source} scored {len(scores)} of {len(candidates)} tasks")
    return PrioritizationResult(tasks=apply_priorities(tasks, scores), scores=scores, source=source)


def prioritize_and_save(
    repo: TaskRepository,
    service: PriorityService,
    dry_run: bool = False,
) -> PrioritizationResult:
    """Fetch tasks, refresh their scores and hand the scores back to the repository."""
    result = refresh_priorities(repo.fetch_all(), service)
    if result.applied and not dry_run:
        repo.save_priorities(result.scores)
    return result


def todays_schedule(tasks: list[Task], now: datetime, config: Config) -> tuple[list[ScheduleSlot], int]:
    """Schedule pending tasks by priority. Returns (slots, hidden task count)."""
    settings = config.schedule_settings()
    pending = pending_by_priority(tasks)
    return generate(pending, now, settings), hidden_task_count(pending, settings)
