# src/gentask/tasks/task_sort.py

from __future__ import annotations

"""
Display ordering of root tasks.

Pure functions: the input sequence is never mutated and subtasks are never
re-sorted (they always keep insertion order). Every mode ends with the
creation-date tiebreak, newest first, where a missing creation date counts
as the earliest possible.
"""

import functools
import math
from collections.abc import Iterable
from enum import StrEnum

from .task_models import Task

# Deadlines closer than this are treated as equal in smart mode.
SMART_DEADLINE_EPSILON_SECONDS = 1.0


class SortMode(StrEnum):
    SMART = "smart"
    DEADLINE = "deadline"
    PRIORITY = "priority"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, raw: str | None) -> SortMode:
        if not raw:
            return cls.SMART
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.SMART


def _created(task: Task) -> float:
    return task.creation_date if task.creation_date is not None else -math.inf


def _newest_first(a: Task, b: Task) -> int:
    ca, cb = _created(a), _created(b)
    if ca > cb:
        return -1
    if ca < cb:
        return 1
    return 0


def _compare_smart(a: Task, b: Task) -> int:
    if a.is_completed != b.is_completed:
        return 1 if a.is_completed else -1

    da, db = a.deadline, b.deadline
    if da is not None and db is not None:
        if abs(da - db) > SMART_DEADLINE_EPSILON_SECONDS:
            return -1 if da < db else 1
    elif da is not None:
        return -1
    elif db is not None:
        return 1

    return _newest_first(a, b)


def _compare_deadline(a: Task, b: Task) -> int:
    da, db = a.deadline, b.deadline
    if da is not None and db is not None:
        if da != db:
            return -1 if da < db else 1
        return _newest_first(a, b)
    if da is not None:
        return -1
    if db is not None:
        return 1
    return _newest_first(a, b)


def _compare_priority(a: Task, b: Task) -> int:
    ra, rb = a.priority.sort_order, b.priority.sort_order
    if ra != rb:
        return -1 if ra < rb else 1
    return _newest_first(a, b)


_COMPARATORS = {
    SortMode.SMART: _compare_smart,
    SortMode.DEADLINE: _compare_deadline,
    SortMode.PRIORITY: _compare_priority,
}


def sort_tasks(tasks: Iterable[Task], mode: SortMode = SortMode.SMART) -> list[Task]:
    """Return a new list of `tasks` in display order for `mode`."""
    return sorted(tasks, key=functools.cmp_to_key(_COMPARATORS[mode]))
