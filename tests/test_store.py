"""Tests for the task store."""

import logging
from datetime import timedelta

import pytest
from conftest import NOW
from pydantic import ValidationError

from smart_task_mcp.enums import Category, Priority, TaskStatus
from smart_task_mcp.models.task import ImportedTask, TaskDraft, TaskPatch
from smart_task_mcp.persistence import DEFAULT_STORAGE_KEY, MemoryPersistence
from smart_task_mcp.store import TaskStore
from smart_task_mcp.utils.parsers import dump_tasks_payload, parse_tasks_payload


ENUMS = {"priority": Priority.LOW, "status": TaskStatus.PENDING, "category": Category.WORK}


def _draft(title="Write report", **kwargs):
    return TaskDraft(title=title, due_date=NOW + timedelta(days=2), **kwargs)


# ============================================================================
# Initialization
# ============================================================================


class TestStoreInit:
    """Tests for loading and seeding."""

    def test_seeds_example_tasks_when_nothing_stored(self, clock):
        persistence = MemoryPersistence()
        store = TaskStore(persistence, clock=clock)

        tasks = store.snapshot()
        assert [t.id for t in tasks] == [1, 2]
        assert tasks[0].title == "Learn Angular"
        assert tasks[0].status == TaskStatus.IN_PROGRESS
        assert [s.completed for s in tasks[0].subtasks] == [True, False, False]
        assert tasks[1].title == "Grocery Shopping"
        assert tasks[1].due_date == NOW + timedelta(days=2)
        # The seed is written straight through
        assert len(parse_tasks_payload(persistence.data[DEFAULT_STORAGE_KEY])) == 2

    def test_no_seed_when_disabled(self, store):
        assert store.snapshot() == []
        assert len(store) == 0

    def test_stored_empty_list_is_not_reseeded(self, clock):
        persistence = MemoryPersistence(data={DEFAULT_STORAGE_KEY: "[]"})
        store = TaskStore(persistence, clock=clock)
        assert store.snapshot() == []

    def test_unreadable_storage_falls_back_to_seed(self, clock):
        persistence = MemoryPersistence(data={DEFAULT_STORAGE_KEY: "{not json"})
        store = TaskStore(persistence, clock=clock)
        assert len(store) == 2

    def test_loads_stored_tasks(self, clock, make_task):
        stored = [make_task(title="One"), make_task(title="Two")]
        persistence = MemoryPersistence(data={DEFAULT_STORAGE_KEY: dump_tasks_payload(stored)})
        store = TaskStore(persistence, clock=clock)
        assert [t.title for t in store.snapshot()] == ["One", "Two"]


# ============================================================================
# Id allocation
# ============================================================================


class TestIdAllocation:
    """Tests for task id assignment."""

    def test_first_id_is_one(self, store):
        assert store.add(_draft()).id == 1

    def test_next_id_follows_highest_existing(self, clock, make_task):
        stored = [make_task(id=1), make_task(id=3)]
        persistence = MemoryPersistence(data={DEFAULT_STORAGE_KEY: dump_tasks_payload(stored)})
        store = TaskStore(persistence, clock=clock)
        assert store.add(_draft()).id == 4

    def test_deleted_ids_are_never_reused(self, store):
        for _ in range(3):
            store.add(_draft())
        store.delete(3)
        assert store.add(_draft()).id == 4

    def test_ids_stay_unique_across_mixed_mutations(self, store):
        for i in range(5):
            store.add(_draft(f"Task {i}"))
        store.delete(2)
        store.update(4, {"title": "Renamed"})
        store.delete(5)
        store.add(_draft("Late"))
        ids = [t.id for t in store.snapshot()]
        assert len(ids) == len(set(ids))
        assert ids == [1, 3, 4, 6]

    def test_clear_keeps_id_sequence(self, store):
        store.add(_draft())
        store.add(_draft())
        assert store.clear() == 2
        assert store.add(_draft()).id == 3


# ============================================================================
# Mutations
# ============================================================================


class TestAdd:
    """Tests for TaskStore.add."""

    def test_add_assigns_created_date_from_clock(self, store, clock):
        clock.advance(hours=2)
        task = store.add(_draft())
        assert task.created_date == NOW + timedelta(hours=2)

    def test_add_accepts_mapping(self, store):
        task = store.add({"title": "From dict", "dueDate": "2025-03-20T09:00:00.000Z", "priority": "high"})
        assert task.priority == Priority.HIGH
        assert task.due_date.isoformat() == "2025-03-20T09:00:00+00:00"

    def test_add_invalid_raises(self, store):
        with pytest.raises(ValidationError):
            store.add({"title": "  ", "due_date": NOW})
        assert len(store) == 0

    def test_add_persists(self, store, persistence):
        store.add(_draft("Saved"))
        saved = parse_tasks_payload(persistence.data[DEFAULT_STORAGE_KEY])
        assert [t.title for t in saved] == ["Saved"]


class TestUpdate:
    """Tests for TaskStore.update."""

    def test_update_status_leaves_other_fields(self, store):
        task = store.add(_draft(tags=["a"], estimated_hours=3, category=Category.WORK))
        assert store.update(task.id, {"status": "completed"}) is True

        after = store.get_by_id(task.id)
        assert after.status == TaskStatus.COMPLETED
        assert after.model_dump(exclude={"status"}) == task.model_dump(exclude={"status"})

    def test_update_replaces_tags_wholesale(self, store):
        task = store.add(_draft(tags=["a", "b"]))
        store.update(task.id, TaskPatch(tags=["c"]))
        assert store.get_by_id(task.id).tags == ["c"]

    def test_update_cannot_change_id_or_created_date(self, store):
        task = store.add(_draft())
        store.update(task.id, {"title": "New"})
        after = store.get_by_id(task.id)
        assert after.id == task.id
        assert after.created_date == task.created_date

    def test_update_unknown_id_returns_false(self, store):
        store.add(_draft())
        notified = []
        store.subscribe(notified.append)
        assert store.update(99, {"title": "Nope"}) is False
        assert notified == []

    def test_update_invalid_patch_raises(self, store):
        task = store.add(_draft())
        with pytest.raises(ValidationError):
            store.update(task.id, {"title": ""})
        with pytest.raises(ValidationError):
            store.update(task.id, {"title": None})
        assert store.get_by_id(task.id).title == "Write report"


class TestDelete:
    """Tests for TaskStore.delete."""

    def test_delete_existing(self, store):
        task = store.add(_draft())
        assert store.delete(task.id) is True
        assert store.get_by_id(task.id) is None

    def test_delete_missing_leaves_state_untouched(self, store):
        store.add(_draft())
        before = store.snapshot()
        notified = []
        store.subscribe(notified.append)

        assert store.delete(42) is False
        assert store.snapshot() == before
        assert notified == []
        assert store.add(_draft()).id == 2


class TestSubtasks:
    """Tests for subtask operations."""

    def test_add_subtask_numbers_from_one(self, store):
        task = store.add(_draft())
        first = store.add_subtask(task.id, "Outline")
        second = store.add_subtask(task.id, "Draft")
        assert (first.id, second.id) == (1, 2)
        assert [s.title for s in store.get_by_id(task.id).subtasks] == ["Outline", "Draft"]

    def test_add_subtask_continues_after_highest(self, store):
        task = store.add(_draft(subtasks=[{"id": 5, "title": "Existing"}]))
        assert store.add_subtask(task.id, "Next").id == 6

    def test_add_subtask_unknown_task(self, store):
        assert store.add_subtask(7, "Orphan") is None

    def test_toggle_subtask_flips(self, store):
        task = store.add(_draft())
        store.add_subtask(task.id, "Step")
        assert store.toggle_subtask(task.id, 1) is True
        assert store.get_by_id(task.id).subtasks[0].completed is True
        assert store.toggle_subtask(task.id, 1) is True
        assert store.get_by_id(task.id).subtasks[0].completed is False

    def test_toggle_unknown_subtask(self, store):
        task = store.add(_draft())
        assert store.toggle_subtask(task.id, 1) is False
        assert store.toggle_subtask(99, 1) is False


class TestImportTasks:
    """Tests for TaskStore.import_tasks."""

    def test_import_appends_with_fresh_ids(self, store):
        store.add(_draft("Existing"))
        records = [
            ImportedTask(title="A", description="", due_date=NOW, created_date=NOW - timedelta(days=3), **ENUMS),
            ImportedTask(title="B", description="x", due_date=NOW, created_date=NOW - timedelta(days=2), **ENUMS),
        ]
        imported = store.import_tasks(records)
        assert [t.id for t in imported] == [2, 3]
        assert [t.title for t in store.snapshot()] == ["Existing", "A", "B"]
        # createdDate comes from the record, not the clock
        assert imported[0].created_date == NOW - timedelta(days=3)

    def test_import_notifies_once(self, store):
        notified = []
        store.subscribe(notified.append)
        records = [ImportedTask(title=f"T{i}", description="", due_date=NOW, created_date=NOW, **ENUMS) for i in range(3)]
        store.import_tasks(records)
        assert len(notified) == 1
        assert len(notified[0]) == 3

    def test_import_nothing(self, store):
        notified = []
        store.subscribe(notified.append)
        assert store.import_tasks([]) == []
        assert notified == []


# ============================================================================
# Snapshots and subscriptions
# ============================================================================


class TestSnapshots:
    """Tests for snapshot isolation."""

    def test_mutating_snapshot_does_not_leak(self, store):
        store.add(_draft("Original", tags=["x"]))
        snap = store.snapshot()
        snap[0].title = "Hacked"
        snap[0].tags.append("y")
        snap.append(snap[0])

        fresh = store.snapshot()
        assert len(fresh) == 1
        assert fresh[0].title == "Original"
        assert fresh[0].tags == ["x"]

    def test_get_by_id_returns_copy(self, store):
        task = store.add(_draft())
        got = store.get_by_id(task.id)
        got.title = "Changed"
        assert store.get_by_id(task.id).title == "Write report"


class TestSubscriptions:
    """Tests for change notifications."""

    def test_one_notification_per_mutation(self, store):
        sizes = []
        store.subscribe(lambda tasks: sizes.append(len(tasks)))

        task = store.add(_draft())
        store.add(_draft())
        store.update(task.id, {"priority": "urgent"})
        store.add_subtask(task.id, "Sub")
        store.toggle_subtask(task.id, 1)
        store.delete(task.id)
        store.clear()

        assert sizes == [1, 2, 2, 2, 2, 1, 0]

    def test_listeners_called_in_registration_order(self, store):
        calls = []
        store.subscribe(lambda _: calls.append("first"))
        store.subscribe(lambda _: calls.append("second"))
        store.add(_draft())
        assert calls == ["first", "second"]

    def test_listener_snapshot_is_isolated(self, store):
        received = []
        store.subscribe(received.append)
        store.add(_draft("Kept"))
        received[0][0].title = "Changed"
        assert store.snapshot()[0].title == "Kept"

    def test_unsubscribe(self, store):
        calls = []
        sub = store.subscribe(calls.append)
        store.add(_draft())
        sub.unsubscribe()
        sub.unsubscribe()
        store.add(_draft())
        assert len(calls) == 1

    def test_failing_listener_does_not_block_others(self, store):
        def boom(_):
            raise RuntimeError("listener failed")

        calls = []
        store.subscribe(boom)
        store.subscribe(calls.append)
        store.add(_draft())
        assert len(calls) == 1
        assert len(store) == 1

    def test_unsubscribe_by_token(self, store):
        calls = []
        sub = store.subscribe(calls.append)
        assert store.unsubscribe(sub.token) is True
        assert store.unsubscribe(sub.token) is False
        store.add(_draft())
        assert calls == []


# ============================================================================
# Save failures
# ============================================================================


class BrokenWritePersistence(MemoryPersistence):
    """Reads like memory storage but every write fails."""

    def _write(self, payload):
        raise OSError("disk full")


class TestSaveFailure:
    """Tests for mutations when storage cannot be written."""

    def test_save_returns_false(self, make_task):
        assert BrokenWritePersistence().save([make_task()]) is False

    def test_mutation_stands_when_save_fails(self, clock, caplog):
        store = TaskStore(BrokenWritePersistence(), clock=clock, seed=False)
        caplog.clear()

        with caplog.at_level(logging.ERROR, logger="smart_task_mcp"):
            task = store.add(_draft("Unsaved"))

        assert task.id == 1
        assert [t.title for t in store.snapshot()] == ["Unsaved"]
        assert any(
            r.levelno == logging.ERROR and r.name == "smart_task_mcp.store" for r in caplog.records
        )
