"""Parser helpers for persisted and imported task data."""

import json
from typing import Any

from smart_task_mcp.models.task import Task


def _parse_task(task_dict: dict[str, Any]) -> Task:
    """
    Parse a task dictionary into a Task.

    Args:
        task_dict: Dictionary in the persisted (camelCase) or attribute (snake_case) shape

    Returns:
        Task instance with validated data
    """
    return Task.model_validate(task_dict)


def _parse_tasks(tasks: list[dict[str, Any]]) -> list[Task]:
    """
    Parse a list of task dictionaries into Task instances.

    Raises:
        pydantic.ValidationError: if any record is invalid
    """
    return [Task.model_validate(t) for t in tasks]


def _serialize_task(task: Task) -> dict[str, Any]:
    """Convert a Task to its persisted record: camelCase keys, ISO timestamps."""
    return task.model_dump(mode="json", by_alias=True)


def dump_tasks_payload(tasks: list[Task]) -> str:
    """Encode a task collection as the stored JSON array."""
    return json.dumps([_serialize_task(t) for t in tasks], ensure_ascii=False)


def parse_tasks_payload(payload: str) -> list[Task]:
    """
    Decode the stored JSON array.

    Raises:
        ValueError: if the payload is not a JSON array of valid task records
            (``json.JSONDecodeError`` and ``pydantic.ValidationError`` are both
            ``ValueError`` subclasses)
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of tasks, got {type(data).__name__}")
    if not all(isinstance(t, dict) for t in data):
        raise ValueError("Every stored task must be a JSON object")
    return _parse_tasks(data)

