"""File-based task storage adapter."""

import json
import logging
from pathlib import Path

from tasktriage.core.tasks import Task, validate_priority

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the task file cannot be read or written."""

    pass


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskRepository protocol. The file holds a list of task rows
    (see Task.from_dict). This adapter is the only writer of priority scores.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read_rows(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            rows = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise StoreError(f"Task file {self.path} is not valid JSON: {e}") from e
        if not isinstance(rows, list):
            raise StoreError(f"Task file {self.path} must contain a JSON list")
        return rows

    def _write_rows(self, rows: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(rows, indent=2))

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks. A missing file means no tasks."""
        return [Task.from_dict(row) for row in self._read_rows()]

    def save_priorities(self, scores: dict[str, float]) -> None:
        """Write new priority scores for the given ids, leaving other fields alone."""
        rows = self._read_rows()
        updated = 0
        for row in rows:
            task_id = str(row.get("id"))
            if task_id in scores:
                row["priority_score"] = validate_priority(scores[task_id], task_id)
                updated += 1
        self._write_rows(rows)
        logger.info(f"Saved {updated} priority scores to {self.path}")

    def add(self, task: Task) -> None:
        """Append a task."""
        rows = self._read_rows()
        if any(str(row.get("id")) == task.id for row in rows):
            raise StoreError(f"Task {task.id} already exists")
        rows.append(task.to_dict())
        self._write_rows(rows)
