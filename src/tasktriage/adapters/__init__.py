"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore, StoreError
from .ai_gateway import (
    AIGatewayPrioritizer,
    PrioritizationError,
    QuotaExceededError,
    RateLimitError,
    TaskSuggestion,
)
from .heuristic import HeuristicPrioritizer

__all__ = [
    "JsonTaskStore",
    "StoreError",
    "AIGatewayPrioritizer",
    "PrioritizationError",
    "QuotaExceededError",
    "RateLimitError",
    "TaskSuggestion",
    "HeuristicPrioritizer",
]
