"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .priority_service import PriorityService

__all__ = [
    "TaskRepository",
    "PriorityService",
]
