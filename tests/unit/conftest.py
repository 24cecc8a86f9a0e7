"""Pytest configuration and fixtures for unit tests."""

from datetime import datetime, timedelta

import pytest

from tests.unit.mocks import InMemoryKVStore
from tree_of_growth.domain.task import Task, TaskCategory, TaskPriority


# Fixed local moment so streak tests do not depend on the wall clock
NOW = datetime(2026, 10, 18, 15, 30).astimezone()


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryKVStore for each test."""
    return InMemoryKVStore()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches tree_of_growth.core.db_client functions to use InMemoryKVStore."""
    monkeypatch.setattr("tree_of_growth.core.db_client.get_item", in_memory_db.get_item)
    monkeypatch.setattr("tree_of_growth.core.db_client.set_item", in_memory_db.set_item)
    monkeypatch.setattr("tree_of_growth.core.db_client.multi_get", in_memory_db.multi_get)
    monkeypatch.setattr("tree_of_growth.core.db_client.multi_set", in_memory_db.multi_set)
    return in_memory_db


@pytest.fixture
def now() -> datetime:
    """The moment of computation used across streak tests."""
    return NOW


@pytest.fixture
def task_factory():
    """Factory for building tasks with sensible defaults.

    Usage:
        task = task_factory(priority="high", completed_days_ago=1)
    """
    counter = {"value": 0}

    def _create_task(
        *,
        priority: str = "low",
        completed: bool | None = None,
        completed_days_ago: int | None = None,
        completed_at: str | None = None,
        **kwargs,
    ) -> Task:
        counter["value"] += 1
        if completed_days_ago is not None:
            completed_at = (NOW - timedelta(days=completed_days_ago)).isoformat()
        if completed is None:
            completed = completed_at is not None

        data = {
            "id": f"task-{counter['value']}",
            "title": f"Task {counter['value']}",
            "category": TaskCategory.DAILY,
            "priority": TaskPriority(priority),
            "completed": completed,
            "completed_at": completed_at,
            "created_at": (NOW - timedelta(days=30)).isoformat(),
        }
        data.update(kwargs)
        return Task(**data)

    return _create_task
