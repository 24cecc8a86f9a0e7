"""Task service for CRUD operations and completion toggling.

Tasks are the only ground truth. Every mutation writes the task list back and
re-caches the tree state recomputed from it, so the cached copy never drifts.
"""

import asyncio
import logging
import uuid
from datetime import UTC, date, datetime

from tree_of_growth.core import db_client
from tree_of_growth.core.config import constants
from tree_of_growth.core.logging import span
from tree_of_growth.domain.task import Task, TaskCreate, TaskUpdate
from tree_of_growth.domain.tree import TreeState
from tree_of_growth.models.service_models import TreeSummary
from tree_of_growth.services import progression


logger = logging.getLogger(__name__)

# Serializes read-modify-write of the task list within this process
_tasks_lock = asyncio.Lock()


def _timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def load_tasks() -> list[Task]:
    """Load the stored task list (empty when nothing has been saved yet)."""
    raw_tasks = await db_client.get_item(key=constants.STORAGE_KEY_TASKS)
    return [Task.model_validate(raw) for raw in raw_tasks or []]


async def save_tasks(tasks: list[Task]) -> TreeState:
    """Persist tasks and the tree state recomputed from them; return that state."""
    tree_state = progression.compute_tree_state(tasks)
    await db_client.multi_set(
        items={
            constants.STORAGE_KEY_TASKS: [task.to_json_dict() for task in tasks],
            constants.STORAGE_KEY_TREE_STATE: tree_state.to_json_dict(),
        }
    )
    return tree_state


def _find_index(tasks: list[Task], task_id: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    msg = f"Task not found: {task_id}"
    raise KeyError(msg)


async def list_tasks() -> list[Task]:
    """Return all tasks in insertion order."""
    return await load_tasks()


async def get_task(*, task_id: str) -> Task:
    """Return a single task, raising KeyError if it does not exist."""
    tasks = await load_tasks()
    return tasks[_find_index(tasks, task_id)]


async def add_task(*, data: TaskCreate, now: datetime | None = None) -> Task:
    """Create a new, not yet completed task."""
    with span("task_service.add_task"):
        task = Task(
            id=uuid.uuid4().hex,
            created_at=_timestamp(now),
            completed=False,
            **data.model_dump(exclude_none=True),
        )
        async with _tasks_lock:
            tasks = await load_tasks()
            tasks.append(task)
            await save_tasks(tasks)

        logger.info("Added task", extra={"task_id": task.id, "priority": task.priority})
        return task


async def update_task(*, task_id: str, updates: TaskUpdate, now: datetime | None = None) -> Task:
    """Apply a partial update to a task.

    Changing completed keeps completed_at consistent: it is stamped when the
    task becomes completed and cleared when it is un-completed.
    """
    with span("task_service.update_task"):
        changes = updates.model_dump(exclude_unset=True)

        async with _tasks_lock:
            tasks = await load_tasks()
            index = _find_index(tasks, task_id)
            current = tasks[index]

            if "completed" in changes:
                if changes["completed"] is None:
                    del changes["completed"]
                elif changes["completed"] and not current.completed:
                    changes["completed_at"] = _timestamp(now)
                elif not changes["completed"]:
                    changes["completed_at"] = None

            updated = current.model_copy(update=changes)
            tasks[index] = Task.model_validate(updated.model_dump())
            tree_state = await save_tasks(tasks)

        logger.info(
            "Updated task",
            extra={"task_id": task_id, "fields": sorted(changes), "level": tree_state.level},
        )
        return tasks[index]


async def delete_task(*, task_id: str) -> None:
    """Delete a task; the tree state may shrink as a result."""
    with span("task_service.delete_task"):
        async with _tasks_lock:
            tasks = await load_tasks()
            removed = tasks.pop(_find_index(tasks, task_id))
            tree_state = await save_tasks(tasks)

        logger.info(
            "Deleted task",
            extra={"task_id": task_id, "was_completed": removed.completed, "level": tree_state.level},
        )


async def toggle_task(*, task_id: str, now: datetime | None = None) -> Task:
    """Flip a task's completion, stamping or clearing completed_at."""
    with span("task_service.toggle_task"):
        async with _tasks_lock:
            tasks = await load_tasks()
            index = _find_index(tasks, task_id)
            current = tasks[index]
            is_completing = not current.completed

            tasks[index] = current.model_copy(
                update={
                    "completed": is_completing,
                    "completed_at": _timestamp(now) if is_completing else None,
                }
            )
            tree_state = await save_tasks(tasks)

        logger.info(
            "Toggled task",
            extra={
                "task_id": task_id,
                "completed": is_completing,
                "growth_points": tree_state.growth_points,
                "streak": tree_state.streak,
            },
        )
        return tasks[index]


async def get_tree_state(*, now: datetime | None = None) -> TreeState:
    """Recompute the tree state from stored tasks; the cached copy is ignored."""
    tasks = await load_tasks()
    return progression.compute_tree_state(tasks, now=now)


async def get_tasks_due_on(*, day: date) -> list[Task]:
    """Return tasks due on a calendar day."""
    tasks = await load_tasks()
    return progression.tasks_due_on(tasks, day)


async def get_tree_summary(*, now: datetime | None = None) -> TreeSummary:
    """Build the tree state plus the message and progress shown alongside it."""
    tasks = await load_tasks()
    tree_state = progression.compute_tree_state(tasks, now=now)
    today = now.date() if now is not None else None
    due_today = progression.has_task_due_today(tasks, today=today)

    return TreeSummary(
        tree_state=tree_state,
        message=progression.motivational_message(tree_state, due_today),
        has_task_due_today=due_today,
        level_progress=progression.level_progress(tree_state.level),
    )
