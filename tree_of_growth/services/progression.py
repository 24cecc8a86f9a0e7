"""Progression engine: derives the tree state from the task collection.

Key Concepts:
- Growth points: weighted count of completed tasks (low=1, medium=2, high=3).
- Level: every 10 growth points add one level; 0 points is level 1.
- Stage: step function of level (seed, sprout, small-tree, big-tree, blooming-tree).
- Streak: consecutive days with at least one completion, anchored at today,
  or at yesterday when nothing has been completed yet today.

Everything here is pure: no I/O, no stored state. The tree state is rebuilt
from tasks on every call, so un-completing or deleting tasks can lower the
level and stage.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from tree_of_growth.core.config import constants
from tree_of_growth.domain.task import Task, TaskPriority
from tree_of_growth.domain.tree import TreeStage, TreeState


_POINTS_BY_PRIORITY: dict[TaskPriority, int] = {
    TaskPriority.LOW: constants.POINTS_LOW,
    TaskPriority.MEDIUM: constants.POINTS_MEDIUM,
    TaskPriority.HIGH: constants.POINTS_HIGH,
}

# Highest threshold first; the first one reached wins
_STAGE_THRESHOLDS: tuple[tuple[int, TreeStage], ...] = (
    (constants.STAGE_BLOOMING_TREE_LEVEL, TreeStage.BLOOMING_TREE),
    (constants.STAGE_BIG_TREE_LEVEL, TreeStage.BIG_TREE),
    (constants.STAGE_SMALL_TREE_LEVEL, TreeStage.SMALL_TREE),
    (constants.STAGE_SPROUT_LEVEL, TreeStage.SPROUT),
)


def point_value(priority: TaskPriority) -> int:
    """Return the growth points a completed task of this priority is worth."""
    return _POINTS_BY_PRIORITY[TaskPriority(priority)]


def level_for_points(growth_points: int) -> int:
    """Return the level for a growth point total (always at least 1)."""
    return growth_points // constants.POINTS_PER_LEVEL + 1


def stage_for_level(level: int) -> TreeStage:
    """Return the tree stage for a level."""
    for min_level, stage in _STAGE_THRESHOLDS:
        if level >= min_level:
            return stage
    return TreeStage.SEED


def level_progress(level: int) -> int:
    """Return the "N / 10 to next level" indicator shown beside the tree."""
    return level % constants.LEVEL_PROGRESS_STEPS


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string, returning None for missing or malformed values."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def _local_day(moment: datetime, tz: tzinfo | None) -> date:
    """Return the calendar day of moment in tz, or in system local time when tz is None.

    Naive values are taken to already be wall-clock time in that zone. With tz
    None the local offset is looked up per instant, so DST changes are honored.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def compute_streak(completed_tasks: Iterable[Task], *, now: datetime | None = None) -> int:
    """Count consecutive completion days ending today or yesterday.

    Completion days are walked newest first. Each one that is the cursor day
    or the day before it extends the streak and moves the cursor to that day;
    the first larger gap (or a completion dated after the cursor) ends the walk.

    Several completions on the same day are not collapsed: each one adds to
    the streak.

    Args:
        completed_tasks: Tasks to consider; ones not completed or without a
            parseable completed_at are skipped
        now: Moment of computation (defaults to the current local time). An
            aware value sets the zone that days are counted in

    Returns:
        Streak length in completions, 0 when the chain is broken
    """
    current = now or datetime.now()
    tz = current.tzinfo

    task_days = []
    for task in completed_tasks:
        if not task.completed:
            continue
        parsed = _parse_timestamp(task.completed_at)
        if parsed is not None:
            task_days.append(_local_day(parsed, tz))

    if not task_days:
        return 0

    task_days.sort(reverse=True)

    cursor: date = current.date()
    if cursor not in task_days:
        # Nothing completed today yet; the streak may still be alive from yesterday
        cursor -= timedelta(days=1)

    streak = 0
    for task_day in task_days:
        days_diff = (cursor - task_day).days
        if days_diff not in (0, 1):
            break
        streak += 1
        cursor = task_day

    return streak


def _last_completed_date(completed_tasks: list[Task]) -> str | None:
    # ISO-8601 strings order lexicographically
    stamps = [task.completed_at for task in completed_tasks if _parse_timestamp(task.completed_at) is not None]
    return max(stamps) if stamps else None


def compute_tree_state(tasks: Iterable[Task], *, now: datetime | None = None) -> TreeState:
    """Derive the full tree state from the task collection.

    The result depends only on tasks (and the current day, for the streak);
    calling it twice on the same input gives the same output. It never raises.

    Args:
        tasks: Full task collection, in any order
        now: Moment of computation for the streak (defaults to current local time)

    Returns:
        Freshly computed TreeState
    """
    completed_tasks = [task for task in tasks if task.completed]
    total_completed = len(completed_tasks)

    growth_points = sum(point_value(task.priority) for task in completed_tasks)
    level = level_for_points(growth_points)

    return TreeState(
        growth_points=growth_points,
        level=level,
        current_stage=stage_for_level(level),
        leaves=min(total_completed, constants.MAX_VISIBLE_LEAVES),
        total_completed=total_completed,
        streak=compute_streak(completed_tasks, now=now),
        last_completed_date=_last_completed_date(completed_tasks),
    )


def _due_day(task: Task) -> date | None:
    parsed = _parse_timestamp(task.due_date)
    return _local_day(parsed, None) if parsed is not None else None


def tasks_due_on(tasks: Iterable[Task], day: date) -> list[Task]:
    """Return tasks whose due date falls on day; missing or malformed due dates never match."""
    return [task for task in tasks if _due_day(task) == day]


def has_task_due_today(tasks: Iterable[Task], *, today: date | None = None) -> bool:
    """Return True if any task is due on today's calendar day."""
    return bool(tasks_due_on(tasks, today or date.today()))


def motivational_message(tree_state: TreeState, has_task_due_today: bool) -> str:
    """Pick the encouragement line shown above the tree.

    Rules are checked in order and the first match wins, so a long streak
    outranks a high level.
    """
    streak = tree_state.streak
    level = tree_state.level

    if streak == 0 and not has_task_due_today:
        return "🌱 Plant the seed of your growth today!"

    if streak >= constants.STREAK_AMAZING_DAYS:
        return f"🔥 Amazing {streak}-day streak! Keep going!"

    if streak >= constants.STREAK_GREAT_DAYS:
        return f"✨ Great {streak}-day streak! Your tree is thriving!"

    if level >= constants.STAGE_BLOOMING_TREE_LEVEL:
        return "🌸 Your tree is in full bloom!"

    if level >= constants.STAGE_BIG_TREE_LEVEL:
        return "🌳 Your tree has grown so strong!"

    if level >= constants.STAGE_SMALL_TREE_LEVEL:
        return "🌿 Your tree is growing well!"

    if has_task_due_today:
        return "💚 Complete your tasks and help your tree grow!"

    return "🌱 Your tree needs some care today."
