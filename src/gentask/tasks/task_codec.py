# src/gentask/tasks/task_codec.py

from __future__ import annotations

"""
JSON codec for the task forest.

Record shape (recursive):
    {"id", "title", "isCompleted", "deadline"?, "priority", "notes"?,
     "subtasks": [...], "creationDate"?}

Optional fields are omitted when absent. Timestamps are epoch seconds.
"""

import json
from collections.abc import Iterable
from typing import Any

from .task_models import Task, TaskPriority


class TaskDecodeError(ValueError):
    """Raised when stored data cannot be turned back into tasks."""


def task_to_record(task: Task) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "isCompleted": task.is_completed,
        "priority": task.priority.value,
        "subtasks": [task_to_record(sub) for sub in task.subtasks],
    }
    if task.deadline is not None:
        record["deadline"] = task.deadline
    if task.notes is not None:
        record["notes"] = task.notes
    if task.creation_date is not None:
        record["creationDate"] = task.creation_date
    return record


def _optional_ts(record: dict[str, Any], key: str) -> float | None:
    raw = record.get(key)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise TaskDecodeError(f"{key} must be a number, got {type(raw).__name__}")
    return float(raw)


def task_from_record(record: Any) -> Task:
    if not isinstance(record, dict):
        raise TaskDecodeError(f"task record must be an object, got {type(record).__name__}")

    for key in ("id", "title", "isCompleted"):
        if key not in record:
            raise TaskDecodeError(f"task record is missing {key!r}")

    task_id = record["id"]
    title = record["title"]
    is_completed = record["isCompleted"]
    if not isinstance(task_id, str) or not task_id:
        raise TaskDecodeError("id must be a non-empty string")
    if not isinstance(title, str):
        raise TaskDecodeError("title must be a string")
    if not isinstance(is_completed, bool):
        raise TaskDecodeError("isCompleted must be a boolean")

    raw_priority = record.get("priority", TaskPriority.MEDIUM.value)
    try:
        priority = TaskPriority(raw_priority)
    except ValueError as e:
        raise TaskDecodeError(f"unknown priority {raw_priority!r}") from e

    notes = record.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise TaskDecodeError("notes must be a string")

    raw_subtasks = record.get("subtasks", [])
    if not isinstance(raw_subtasks, list):
        raise TaskDecodeError("subtasks must be a list")

    return Task(
        id=task_id,
        title=title,
        is_completed=is_completed,
        deadline=_optional_ts(record, "deadline"),
        priority=priority,
        notes=notes,
        subtasks=[task_from_record(sub) for sub in raw_subtasks],
        creation_date=_optional_ts(record, "creationDate"),
    )


def encode_forest(tasks: Iterable[Task]) -> bytes:
    payload = [task_to_record(t) for t in tasks]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_forest(data: bytes) -> list[Task]:
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TaskDecodeError(f"not a JSON document: {e}") from e

    if not isinstance(payload, list):
        raise TaskDecodeError("forest must be a JSON array")
    return [task_from_record(r) for r in payload]
