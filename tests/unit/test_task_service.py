"""Unit tests for task_service module."""

from datetime import timedelta

import pytest

import tree_of_growth.services.task_service as task_service
from tree_of_growth.core.config import constants
from tree_of_growth.domain.task import TaskCategory, TaskCreate, TaskPriority, TaskUpdate
from tree_of_growth.domain.tree import TreeStage


def _create(title: str = "Water plants", priority: str = "high", **kwargs) -> TaskCreate:
    return TaskCreate(title=title, category=TaskCategory.DAILY, priority=TaskPriority(priority), **kwargs)


@pytest.mark.unit
class TestAddTask:
    """Tests for add_task function."""

    async def test_add_task_success(self, patched_db, now):
        """Test adding a task assigns id and creation time and stores it."""
        task = await task_service.add_task(data=_create(description="Front porch"), now=now)

        assert task.id
        assert task.title == "Water plants"
        assert task.description == "Front porch"
        assert task.completed is False
        assert task.completed_at is None
        assert task.created_at.endswith("Z")

        stored = patched_db.peek(constants.STORAGE_KEY_TASKS)
        assert stored == [task.to_json_dict()]
        assert "createdAt" in stored[0]

    async def test_add_task_caches_tree_state(self, patched_db):
        """Test adding a task writes a recomputed tree state cache."""
        await task_service.add_task(data=_create())

        assert patched_db.peek(constants.STORAGE_KEY_TREE_STATE) == {
            "growthPoints": 0,
            "level": 1,
            "currentStage": "seed",
            "leaves": 0,
            "totalCompleted": 0,
            "streak": 0,
        }

    async def test_add_task_unique_ids(self, patched_db):
        """Test each task gets its own id."""
        first = await task_service.add_task(data=_create("One"))
        second = await task_service.add_task(data=_create("Two"))

        assert first.id != second.id
        assert [task.title for task in await task_service.list_tasks()] == ["One", "Two"]


@pytest.mark.unit
class TestToggleTask:
    """Tests for toggle_task function."""

    async def test_toggle_completes_and_stamps(self, patched_db, now):
        """Test toggling on sets completed_at and grows the tree."""
        task = await task_service.add_task(data=_create(priority="high"))

        toggled = await task_service.toggle_task(task_id=task.id, now=now)

        assert toggled.completed is True
        assert toggled.completed_at is not None
        tree = patched_db.peek(constants.STORAGE_KEY_TREE_STATE)
        assert tree["growthPoints"] == 3
        assert tree["totalCompleted"] == 1
        assert tree["lastCompletedDate"] == toggled.completed_at

    async def test_toggle_twice_clears_completion(self, patched_db, now):
        """Test toggling off clears completed_at and the tree regresses."""
        task = await task_service.add_task(data=_create(priority="medium"))
        await task_service.toggle_task(task_id=task.id, now=now)

        toggled = await task_service.toggle_task(task_id=task.id, now=now)

        assert toggled.completed is False
        assert toggled.completed_at is None
        assert "completedAt" not in patched_db.peek(constants.STORAGE_KEY_TASKS)[0]
        assert patched_db.peek(constants.STORAGE_KEY_TREE_STATE)["growthPoints"] == 0

    async def test_toggle_missing_task(self, patched_db):
        """Test toggling an unknown id raises KeyError."""
        with pytest.raises(KeyError, match="Task not found"):
            await task_service.toggle_task(task_id="nope")


@pytest.mark.unit
class TestUpdateTask:
    """Tests for update_task function."""

    async def test_update_fields(self, patched_db):
        """Test partial update changes only the given fields."""
        task = await task_service.add_task(data=_create(due_date="2026-10-20"))

        updated = await task_service.update_task(
            task_id=task.id,
            updates=TaskUpdate(title="Water all plants", priority=TaskPriority.LOW),
        )

        assert updated.title == "Water all plants"
        assert updated.priority == TaskPriority.LOW
        assert updated.due_date == "2026-10-20"
        assert updated.created_at == task.created_at

    async def test_update_accepts_camel_case_payload(self, patched_db):
        """Test update payloads can use the JSON field names."""
        task = await task_service.add_task(data=_create())

        updated = await task_service.update_task(
            task_id=task.id,
            updates=TaskUpdate.model_validate({"dueDate": "2026-11-01", "repeatPattern": "weekly"}),
        )

        assert updated.due_date == "2026-11-01"
        assert updated.repeat_pattern == "weekly"

    async def test_update_completed_keeps_timestamp_invariant(self, patched_db, now):
        """Test completing via update stamps completed_at and un-completing clears it."""
        task = await task_service.add_task(data=_create())

        done = await task_service.update_task(task_id=task.id, updates=TaskUpdate(completed=True), now=now)
        undone = await task_service.update_task(task_id=task.id, updates=TaskUpdate(completed=False), now=now)

        assert done.completed_at is not None
        assert undone.completed is False
        assert undone.completed_at is None

    async def test_update_missing_task(self, patched_db):
        """Test updating an unknown id raises KeyError."""
        with pytest.raises(KeyError, match="Task not found"):
            await task_service.update_task(task_id="missing", updates=TaskUpdate(title="x"))


@pytest.mark.unit
class TestDeleteTask:
    """Tests for delete_task function."""

    async def test_delete_task_shrinks_tree(self, patched_db, now):
        """Test deleting a completed task recomputes the tree downwards."""
        keep = await task_service.add_task(data=_create("Keep", priority="low"))
        drop = await task_service.add_task(data=_create("Drop", priority="high"))
        await task_service.toggle_task(task_id=keep.id, now=now)
        await task_service.toggle_task(task_id=drop.id, now=now)

        await task_service.delete_task(task_id=drop.id)

        assert [task.id for task in await task_service.list_tasks()] == [keep.id]
        assert patched_db.peek(constants.STORAGE_KEY_TREE_STATE)["growthPoints"] == 1

    async def test_delete_missing_task(self, patched_db):
        """Test deleting an unknown id raises KeyError."""
        with pytest.raises(KeyError, match="Task not found"):
            await task_service.delete_task(task_id="missing")


@pytest.mark.unit
class TestTreeState:
    """Tests for get_tree_state and get_tree_summary."""

    async def test_stale_cache_is_ignored(self, patched_db, task_factory, now):
        """Test a stored tree state that disagrees with tasks is not trusted."""
        patched_db.seed(constants.STORAGE_KEY_TASKS, [task_factory(priority="high", completed_days_ago=0).to_json_dict()])
        patched_db.seed(
            constants.STORAGE_KEY_TREE_STATE,
            {"growthPoints": 500, "level": 51, "currentStage": "blooming-tree", "leaves": 100,
             "totalCompleted": 300, "streak": 99},
        )

        state = await task_service.get_tree_state(now=now)

        assert state.growth_points == 3
        assert state.current_stage == TreeStage.SEED
        assert state.streak == 1

    async def test_summary_with_streak(self, patched_db, task_factory, now):
        """Test the summary bundles state, message and progress."""
        tasks = [task_factory(priority="high", completed_days_ago=days) for days in range(8)]
        patched_db.seed(constants.STORAGE_KEY_TASKS, [task.to_json_dict() for task in tasks])

        summary = await task_service.get_tree_summary(now=now)

        assert summary.tree_state.streak == 8
        assert summary.tree_state.level == 3
        assert summary.level_progress == 3
        assert "Amazing 8-day streak" in summary.message
        assert summary.has_task_due_today is False

    async def test_summary_with_task_due_today(self, patched_db, task_factory, now):
        """Test a task due today switches to the completion prompt."""
        patched_db.seed(constants.STORAGE_KEY_TASKS, [task_factory(due_date=now.date().isoformat()).to_json_dict()])

        summary = await task_service.get_tree_summary(now=now)

        assert summary.has_task_due_today is True
        assert "Complete your tasks" in summary.message

    async def test_tasks_due_on(self, patched_db, task_factory, now):
        """Test tasks are filtered by due day."""
        tomorrow = (now + timedelta(days=1)).date()
        due = task_factory(due_date=tomorrow.isoformat())
        patched_db.seed(constants.STORAGE_KEY_TASKS, [due.to_json_dict(), task_factory().to_json_dict()])

        assert [task.id for task in await task_service.get_tasks_due_on(day=tomorrow)] == [due.id]
