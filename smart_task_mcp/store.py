"""
The task store: single source of truth for task state.

Every mutation builds a new collection (the previous one is never modified),
writes the whole collection through the persistence adapter, then notifies
subscribers synchronously in registration order. Callers only ever receive
copies, so nothing outside the store can alter its state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from smart_task_mcp.enums import Category, Priority, TaskStatus
from smart_task_mcp.models.task import ImportedTask, Subtask, Task, TaskDraft, TaskPatch
from smart_task_mcp.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)

Listener = Callable[[list[Task]], None]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_tasks(now: datetime) -> list[Task]:
    """The two example tasks a fresh store starts with."""
    return [
        Task(
            id=1,
            title="Learn Angular",
            description="Master Angular fundamentals and advanced concepts",
            due_date=now + timedelta(days=7),
            created_date=now,
            priority=Priority.HIGH,
            status=TaskStatus.IN_PROGRESS,
            category=Category.LEARNING,
            tags=["learning", "frontend", "typescript"],
            estimated_hours=20,
            actual_hours=5,
            subtasks=[
                Subtask(id=1, title="Complete Angular tutorial", completed=True),
                Subtask(id=2, title="Build practice project", completed=False),
                Subtask(id=3, title="Study advanced patterns", completed=False),
            ],
        ),
        Task(
            id=2,
            title="Grocery Shopping",
            description="Buy weekly groceries and household items",
            due_date=now + timedelta(days=2),
            created_date=now,
            priority=Priority.MEDIUM,
            status=TaskStatus.PENDING,
            category=Category.PERSONAL,
            tags=["shopping", "weekly"],
            estimated_hours=2,
        ),
    ]


class Subscription:
    """Handle returned by :meth:`TaskStore.subscribe`."""

    def __init__(self, store: TaskStore, token: int) -> None:
        self._store = store
        self.token = token

    def unsubscribe(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        self._store.unsubscribe(self)


class TaskStore:
    """
    In-process task store backed by a persistence adapter.

    Args:
        persistence: where the collection is loaded from and written to
        clock: source of "now" for createdDate and the seed data
        seed: populate the example tasks when nothing usable is stored
    """

    def __init__(self, persistence: PersistenceAdapter, clock: Clock = utc_now, seed: bool = True) -> None:
        self._persistence = persistence
        self._clock = clock
        self._listeners: dict[int, Listener] = {}
        self._next_token = 1

        loaded = persistence.load()
        if loaded is None:
            self._tasks: tuple[Task, ...] = tuple(default_tasks(clock())) if seed else ()
            logger.info("Initialized task store with %d default task(s)", len(self._tasks))
            self._persist()
        else:
            self._tasks = tuple(loaded)
            logger.info("Task store ready total=%d", len(self._tasks))

        # Highest id handed out so far; ids are never reused while this store lives.
        self._last_id = max((t.id for t in self._tasks), default=0)

    # ---- low-level helpers ----

    def _copy(self) -> list[Task]:
        return [t.model_copy(deep=True) for t in self._tasks]

    def _index_of(self, task_id: int) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _allocate_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def _persist(self) -> None:
        if not self._persistence.save(list(self._tasks)):
            logger.error("Task collection was not persisted; in-memory state is ahead of storage")

    def _notify(self) -> None:
        for token, listener in list(self._listeners.items()):
            try:
                listener(self._copy())
            except Exception:
                logger.exception("Task listener %s raised", token)

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        self._persist()
        self._notify()

    # ---- public API ----

    def snapshot(self) -> list[Task]:
        """Return a copy of the current collection, in order."""
        return self._copy()

    def __len__(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: Listener) -> Subscription:
        """Register a listener called with the updated snapshot after every mutation."""
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        return Subscription(self, token)

    def unsubscribe(self, subscription: Subscription | int) -> bool:
        """Remove a listener by its subscription or token. False if it was already gone."""
        token = subscription.token if isinstance(subscription, Subscription) else subscription
        return self._listeners.pop(token, None) is not None

    def get_by_id(self, task_id: int) -> Task | None:
        index = self._index_of(task_id)
        if index is None:
            return None
        return self._tasks[index].model_copy(deep=True)

    def add(self, draft: TaskDraft | Mapping[str, Any]) -> Task:
        """Create a task from a draft; id and createdDate are assigned here."""
        if not isinstance(draft, TaskDraft):
            draft = TaskDraft.model_validate(draft)

        task = Task.model_validate({**draft.model_dump(), "id": self._allocate_id(), "created_date": self._clock()})
        self._commit((*self._tasks, task))
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        return task.model_copy(deep=True)

    def update(self, task_id: int, patch: TaskPatch | Mapping[str, Any]) -> bool:
        """
        Merge a partial update over a task. Each field present in the patch
        replaces the stored one; id and createdDate never change.

        Returns:
            False if no task has this id

        Raises:
            pydantic.ValidationError: if the patch or the merged record is invalid
        """
        if not isinstance(patch, TaskPatch):
            patch = TaskPatch.model_validate(patch)

        index = self._index_of(task_id)
        if index is None:
            return False

        current = self._tasks[index]
        updated = Task.model_validate({**current.model_dump(), **patch.changes(), "id": current.id})
        self._commit((*self._tasks[:index], updated, *self._tasks[index + 1 :]))
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(patch.changes()))
        return True

    def delete(self, task_id: int) -> bool:
        index = self._index_of(task_id)
        if index is None:
            return False
        self._commit((*self._tasks[:index], *self._tasks[index + 1 :]))
        logger.debug("Task deleted id=%s", task_id)
        return True

    def add_subtask(self, task_id: int, title: str) -> Subtask | None:
        """Append a subtask with the next free id in its task. None if the task is unknown."""
        task = self.get_by_id(task_id)
        if task is None:
            return None
        subtask = Subtask(id=task.next_subtask_id(), title=title)
        self.update(task_id, TaskPatch(subtasks=[*task.subtasks, subtask]))
        return subtask

    def toggle_subtask(self, task_id: int, subtask_id: int) -> bool:
        """Flip a subtask's completed flag. False if the task or subtask is unknown."""
        task = self.get_by_id(task_id)
        if task is None or not any(s.id == subtask_id for s in task.subtasks):
            return False
        subtasks = [
            s.model_copy(update={"completed": not s.completed}) if s.id == subtask_id else s for s in task.subtasks
        ]
        return self.update(task_id, TaskPatch(subtasks=subtasks))

    def import_tasks(self, records: Iterable[ImportedTask]) -> list[Task]:
        """
        Append imported records with fresh ids (merge is append, never overwrite).
        The batch is persisted and announced once.
        """
        imported = [Task.model_validate({**r.model_dump(), "id": self._allocate_id()}) for r in records]
        if not imported:
            return []
        self._commit((*self._tasks, *imported))
        logger.info("Imported %d task(s) ids=%s..%s", len(imported), imported[0].id, imported[-1].id)
        return [t.model_copy(deep=True) for t in imported]

    def clear(self) -> int:
        """Remove every task. Returns how many were removed."""
        removed = len(self._tasks)
        self._commit(())
        logger.info("Cleared %d task(s)", removed)
        return removed
