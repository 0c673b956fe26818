"""AI gateway adapter - HTTP client for remote task prioritization."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import requests

from tasktriage.config import Config, load_config
from tasktriage.core.tasks import Task

logger = logging.getLogger(__name__)

PRIORITIZE_SYSTEM_PROMPT = """You are an AI productivity assistant that helps prioritize tasks.
Analyze tasks based on:
1. Deadline urgency (40% weight) - closer deadlines = higher priority
2. Task importance based on category (30% weight) - work > study > health > personal > other
3. Estimated effort (20% weight) - balance workload
4. Current status (10% weight) - in_progress tasks get slight boost

Return a JSON object with task IDs mapped to priority scores (0.0 to 1.0).
Only return valid JSON, no explanations."""

SUGGEST_SYSTEM_PROMPT = (
    "You are an AI productivity assistant. Based on the user's current tasks and patterns, "
    "suggest 3-5 actionable tasks they might want to add. Be specific and practical."
)

PRIORITIES_TOOL = {
    "type": "function",
    "function": {
        "name": "set_task_priorities",
        "description": "Set priority scores for tasks",
        "parameters": {
            "type": "object",
            "properties": {
                "priorities": {
                    "type": "object",
                    "additionalProperties": {"type": "number", "minimum": 0, "maximum": 1},
                    "description": "Object mapping task IDs to priority scores (0.0 to 1.0)",
                }
            },
            "required": ["priorities"],
            "additionalProperties": False,
        },
    },
}

SUGGESTIONS_TOOL = {
    "type": "function",
    "function": {
        "name": "suggest_tasks",
        "description": "Return 3-5 actionable task suggestions",
        "parameters": {
            "type": "object",
            "properties": {
                "suggestions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "title": {"type": "string"},
                            "priority": {"type": "string", "enum": ["low", "medium", "high"]},
                            "category": {"type": "string"},
                        },
                        "required": ["title", "priority", "category"],
                        "additionalProperties": False,
                    },
                }
            },
            "required": ["suggestions"],
            "additionalProperties": False,
        },
    },
}


class PrioritizationError(RuntimeError):
    """Raised when the remote service cannot produce priority scores."""

    pass


class RateLimitError(PrioritizationError):
    """The gateway answered 429."""

    pass


class QuotaExceededError(PrioritizationError):
    """The gateway answered 402 (credits exhausted)."""

    pass


@dataclass(frozen=True)
class TaskSuggestion:
    """A task the service suggests adding."""

    title: str
    priority: str
    category: str


def task_summary(task: Task) -> dict:
    """The subset of a task sent to the remote service."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "deadline": task.deadline.isoformat() if task.deadline else None,
        "estimated_minutes": task.estimated_minutes,
        "category": task.category,
        "status": task.status.value,
        "created_at": task.created_at.isoformat(),
    }


class AIGatewayPrioritizer:
    """
    Chat-completions gateway adapter.

    Implements PriorityService protocol. Builds the request, forces a tool
    call and validates the reply. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _complete(self, system_prompt: str, user_prompt: str, tool: dict) -> dict:
        """POST a chat completion and return the parsed tool arguments."""
        if not self.config.ai_api_key:
            raise PrioritizationError("AI gateway API key is not configured")

        body = {
            "model": self.config.ai_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "tools": [tool],
            "tool_choice": {"type": "function", "function": {"name": tool["function"]["name"]}},
        }

        try:
            resp = self._session.post(
                self.config.ai_gateway_url,
                headers={
                    "Authorization": f"Bearer {self.config.ai_api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=self.config.ai_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"AI gateway request failed: {e}")
            raise PrioritizationError(f"AI gateway unreachable: {e}") from e

        if resp.status_code == 429:
            raise RateLimitError("Rate limit exceeded. Please try again later.")
        if resp.status_code == 402:
            raise QuotaExceededError("AI credits exhausted. Please add more credits.")
        if resp.status_code != 200:
            logger.error(f"AI gateway error: {resp.status_code} {resp.text}")
            raise PrioritizationError(f"AI gateway error: {resp.status_code}")

        try:
            return _extract_arguments(resp.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise PrioritizationError(f"Unexpected AI response format: {e}") from e

    def prioritize(self, tasks: list[Task]) -> dict[str, float]:
        """Ask the gateway for a score per task id."""
        if not tasks:
            return {}

        user_prompt = (
            "Analyze and prioritize these tasks:\n"
            f"{json.dumps([task_summary(t) for t in tasks], indent=2)}\n\n"
            f"Current time: {datetime.now(timezone.utc).isoformat()}\n\n"
            'Return format: {"task_id": priority_score, ...}'
        )
        logger.debug(f"Requesting priorities for {len(tasks)} tasks")
        args = self._complete(PRIORITIZE_SYSTEM_PROMPT, user_prompt, PRIORITIES_TOOL)
        priorities = args.get("priorities", args) if isinstance(args, dict) else args
        return validate_scores(priorities, {t.id for t in tasks})

    def suggest(self, tasks: list[Task]) -> list[TaskSuggestion]:
        """Ask the gateway for new tasks that complement the current ones."""
        summaries = [
            {"id": t.id, "title": t.title, "category": t.category, "status": t.status.value}
            for t in tasks
        ]
        user_prompt = (
            "Current tasks:\n"
            f"{json.dumps(summaries, indent=2)}\n\n"
            "Suggest new tasks that would complement their workload. Return as JSON array with "
            "objects containing: title, priority (low/medium/high), category "
            "(work/personal/study/health/other)."
        )
        args = self._complete(SUGGEST_SYSTEM_PROMPT, user_prompt, SUGGESTIONS_TOOL)
        items = args.get("suggestions", []) if isinstance(args, dict) else args
        if not isinstance(items, list):
            raise PrioritizationError("Suggestions must be a JSON array")

        suggestions = []
        for item in items:
            try:
                suggestions.append(
                    TaskSuggestion(
                        title=str(item["title"]),
                        priority=str(item.get("priority", "medium")),
                        category=str(item.get("category", "other")),
                    )
                )
            except (KeyError, TypeError, AttributeError):
                logger.warning(f"Skipping malformed suggestion: {item!r}")
        return suggestions


def _extract_arguments(payload: dict):
    """Pull the tool-call arguments, or fall back to JSON in the message content."""
    message = payload["choices"][0]["message"]
    tool_calls = message.get("tool_calls") or []
    if tool_calls and tool_calls[0].get("function", {}).get("arguments"):
        return json.loads(tool_calls[0]["function"]["arguments"])
    if message.get("content"):
        return json.loads(message["content"])
    raise ValueError("no tool call or content in response")


def validate_scores(priorities, known_ids: set[str]) -> dict[str, float]:
    """Check every score is a number in [0, 1] for a task we asked about."""
    if not isinstance(priorities, dict):
        raise PrioritizationError("Priorities must be a JSON object")

    scores: dict[str, float] = {}
    for task_id, score in priorities.items():
        if task_id not in known_ids:
            logger.warning(f"Ignoring score for unknown task {task_id}")
            continue
        if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 <= score <= 1:
            raise PrioritizationError(f"Invalid priority {score!r} for task {task_id}")
        scores[task_id] = float(score)
    return scores
