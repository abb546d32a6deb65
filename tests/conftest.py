"""Pytest configuration and fixtures for smart-task-mcp tests."""

from datetime import datetime, timedelta, timezone

import pytest

from smart_task_mcp.enums import Category, Priority, TaskStatus
from smart_task_mcp.models.task import Task
from smart_task_mcp.persistence import MemoryPersistence
from smart_task_mcp.server import set_store
from smart_task_mcp.store import TaskStore

# Wednesday 12 March 2025, 15:00 UTC
NOW = datetime(2025, 3, 12, 15, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def persistence():
    """Empty in-memory persistence."""
    return MemoryPersistence()


@pytest.fixture
def store(persistence, clock):
    """An empty store (no example tasks) on in-memory persistence."""
    return TaskStore(persistence, clock=clock, seed=False)


@pytest.fixture
def make_task():
    """
    Factory for Task instances with sensible defaults.

    Ids are assigned sequentially unless given; dates default to NOW + 1 day
    (due) and NOW - 1 day (created).
    """
    counter = {"id": 0}

    def _make(**overrides) -> Task:
        counter["id"] += 1
        data = {
            "id": counter["id"],
            "title": f"Task {counter['id']}",
            "description": "",
            "due_date": NOW + timedelta(days=1),
            "created_date": NOW - timedelta(days=1),
            "priority": Priority.MEDIUM,
            "status": TaskStatus.PENDING,
            "category": Category.OTHER,
        }
        data.update(overrides)
        return Task(**data)

    return _make


@pytest.fixture
def tool_store(store):
    """Install the test store as the server's process-wide store."""
    set_store(store)
    yield store
    set_store(None)
