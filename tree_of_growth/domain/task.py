"""Task domain models and enums."""

from enum import StrEnum

from pydantic import Field

from tree_of_growth.domain.base import CamelModel


class TaskCategory(StrEnum):
    """How a task fits into the user's routine."""

    DAILY = "daily"
    LONG_TERM = "long-term"
    HABIT = "habit"


class TaskPriority(StrEnum):
    """Task priority; drives growth points on completion."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RepeatPattern(StrEnum):
    """Optional repetition of a task."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Task(CamelModel):
    """Task data transfer object.

    completed_at is set only while completed is True.
    """

    id: str = Field(..., description="Unique task ID")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    category: TaskCategory = Field(..., description="daily, long-term or habit")
    priority: TaskPriority = Field(..., description="low, medium or high")
    due_date: str | None = Field(default=None, description="Due date (ISO date)")
    repeat_pattern: RepeatPattern | None = Field(default=None, description="daily, weekly or monthly")
    completed: bool = Field(default=False, description="Whether the task is done")
    completed_at: str | None = Field(default=None, description="Completion timestamp (ISO format)")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    image_uri: str | None = Field(default=None, description="Attached image URI")


class TaskCreate(CamelModel):
    """Payload for adding a task; id, createdAt and completed are assigned by the service."""

    title: str = Field(..., min_length=1, description="Task title")
    description: str | None = None
    category: TaskCategory
    priority: TaskPriority
    due_date: str | None = None
    repeat_pattern: RepeatPattern | None = None
    image_uri: str | None = None


class TaskUpdate(CamelModel):
    """Partial update payload; only fields that are explicitly set are applied."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: TaskCategory | None = None
    priority: TaskPriority | None = None
    due_date: str | None = None
    repeat_pattern: RepeatPattern | None = None
    completed: bool | None = None
    image_uri: str | None = None
