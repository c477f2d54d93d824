# src/gentask/tasks/task_tree.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from copy import deepcopy
from dataclasses import dataclass, replace
from enum import StrEnum

from ..core.state import SessionContext
from .persistence import PersistenceBridge
from .task_models import NEW_SUBTASK_TITLE, Task, TaskPriority
from .task_notifier import NotificationScheduler

logger = logging.getLogger(__name__)

TaskMutator = Callable[[Task], None]


class ChangeKind(StrEnum):
    ADDED = "added"
    MUTATED = "mutated"
    DELETED = "deleted"


@dataclass(slots=True, frozen=True)
class ForestChange:
    """Emitted to subscribers after every successful mutation."""

    kind: ChangeKind
    task_id: str
    forest: tuple[Task, ...]


ForestListener = Callable[[ForestChange], None]


class TaskTreeStore:
    """
    Owner and sole mutator of the task forest.

    Every successful mutation persists the whole forest, notifies subscribers
    with a ForestChange and re-evaluates reminders for the tasks it touched.
    Invalid requests (empty title, unknown id) are silent no-ops.

    Mutations never touch nodes that were already handed out: the path from
    the root to the changed node is copied and the forest is swapped in one
    assignment, so snapshots and emitted forests stay as they were.

    Single-threaded: call it from one thread only.
    """

    def __init__(
        self,
        session: SessionContext,
        *,
        persistence: PersistenceBridge | None = None,
        notifier: NotificationScheduler | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session = session
        self._persistence = persistence
        self._notifier = notifier
        self._clock = clock
        self._listeners: list[ForestListener] = []
        self._tasks: list[Task] = persistence.load() if persistence is not None else []
        logger.info("TaskTreeStore ready roots=%s", len(self._tasks))

    # ---- read access ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def editing_task_id(self) -> str | None:
        return self._session.editing_task_id

    def iter_tasks(self) -> Iterator[Task]:
        for root in self._tasks:
            yield from root.walk()

    def find(self, task_id: str) -> Task | None:
        return _find(self._tasks, task_id)

    # ---- change fan-out ----

    def subscribe(self, listener: ForestListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self, kind: ChangeKind, task_id: str) -> None:
        if self._persistence is not None:
            self._persistence.save(self._tasks)

        event = ForestChange(kind=kind, task_id=task_id, forest=self.tasks)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Forest listener failed kind=%s task_id=%s", kind.value, task_id)

    def _reevaluate(self, task: Task) -> None:
        if self._notifier is not None:
            self._notifier.reevaluate(task)

    # ---- editing marker ----

    def start_editing(self, task_id: str) -> bool:
        if self.find(task_id) is None:
            return False
        self._session.editing_task_id = task_id
        return True

    def end_editing(self) -> None:
        self._session.editing_task_id = None

    # ---- mutations ----

    def add_root_task(self, title: str) -> str | None:
        trimmed = (title or "").strip()
        if not trimmed:
            return None

        task = Task(title=trimmed, is_completed=False, creation_date=self._clock())
        self._tasks.append(task)
        self._session.editing_task_id = task.id
        logger.debug("Root task added id=%s", task.id)

        self._changed(ChangeKind.ADDED, task.id)
        self._reevaluate(task)
        return task.id

    def add_subtask(self, parent_id: str) -> str | None:
        copied = _copy_path(self._tasks, parent_id, deep=False)
        if copied is None:
            return None

        self._tasks, parent = copied
        subtask = Task(title=NEW_SUBTASK_TITLE, is_completed=False, creation_date=self._clock())
        parent.subtasks.append(subtask)
        self._session.editing_task_id = subtask.id
        logger.debug("Subtask added id=%s parent=%s", subtask.id, parent_id)

        self._changed(ChangeKind.ADDED, subtask.id)
        self._reevaluate(subtask)
        return subtask.id

    def find_and_mutate(self, task_id: str, mutator: TaskMutator) -> bool:
        """
        Apply `mutator` to a private copy of the first node with `task_id`.

        Search is depth-first pre-order over the whole forest. Nothing is
        persisted or emitted when the id is unknown.
        """
        copied = _copy_path(self._tasks, task_id, deep=True)
        if copied is None:
            return False

        forest, task = copied
        mutator(task)
        self._tasks = forest
        self._changed(ChangeKind.MUTATED, task_id)
        self._reevaluate(task)
        return True

    def toggle_completion(self, task_id: str, is_completed: bool) -> bool:
        def set_completion(task: Task) -> None:
            for node in task.walk():
                node.is_completed = is_completed

        found = self.find_and_mutate(task_id, set_completion)
        if found and self._notifier is not None:
            task = self.find(task_id)
            if task is not None:
                self._notifier.reevaluate_tree(task)
        return found

    def delete_task(self, task_id: str) -> bool:
        removed: list[Task] = []
        new_forest = _without(self._tasks, task_id, removed)
        if not removed:
            return False

        self._tasks = new_forest
        if self._session.editing_task_id is not None and _find(
            self._tasks, self._session.editing_task_id
        ) is None:
            self._session.editing_task_id = None
        logger.debug("Task deleted id=%s", task_id)

        self._changed(ChangeKind.DELETED, task_id)
        if self._notifier is not None:
            for task in removed:
                self._notifier.cancel_tree(task)
        return True

    # ---- field edits (all routed through find_and_mutate) ----

    def rename(self, task_id: str, title: str) -> bool:
        def apply(task: Task) -> None:
            task.title = title

        return self.find_and_mutate(task_id, apply)

    def set_deadline(self, task_id: str, deadline: float | None) -> bool:
        def apply(task: Task) -> None:
            task.deadline = None if deadline is None else float(deadline)

        return self.find_and_mutate(task_id, apply)

    def set_priority(self, task_id: str, priority: TaskPriority) -> bool:
        def apply(task: Task) -> None:
            task.priority = priority

        return self.find_and_mutate(task_id, apply)

    def set_notes(self, task_id: str, notes: str | None) -> bool:
        def apply(task: Task) -> None:
            task.notes = notes if notes else None

        return self.find_and_mutate(task_id, apply)


def _find(tasks: list[Task], task_id: str) -> Task | None:
    for task in tasks:
        if task.id == task_id:
            return task
        hit = _find(task.subtasks, task_id)
        if hit is not None:
            return hit
    return None


def _without(tasks: list[Task], task_id: str, removed: list[Task]) -> list[Task]:
    """Copy of `tasks` without any node whose id is `task_id`, at every depth."""
    kept: list[Task] = []
    for task in tasks:
        if task.id == task_id:
            removed.append(task)
            continue
        kept.append(replace(task, subtasks=_without(task.subtasks, task_id, removed)))
    return kept


def _copy_path(
    tasks: list[Task], task_id: str, *, deep: bool
) -> tuple[list[Task], Task] | None:
    """
    New forest where every node from the root down to the first pre-order
    match of `task_id` is a fresh copy. Returns it with the copied match, or
    None when the id is unknown.

    `deep` also copies the match's whole subtree; otherwise only its
    `subtasks` list is new.
    """
    for index, task in enumerate(tasks):
        if task.id == task_id:
            node = deepcopy(task) if deep else replace(task, subtasks=list(task.subtasks))
            copy = node
        else:
            hit = _copy_path(task.subtasks, task_id, deep=deep)
            if hit is None:
                continue
            subtasks, node = hit
            copy = replace(task, subtasks=subtasks)
        forest = list(tasks)
        forest[index] = copy
        return forest, node
    return None
