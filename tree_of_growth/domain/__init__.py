"""Domain models and DTOs."""

from tree_of_growth.domain.image import ImageType, UserImage
from tree_of_growth.domain.preferences import AppSettings, AppSettingsUpdate
from tree_of_growth.domain.task import RepeatPattern, Task, TaskCategory, TaskCreate, TaskPriority, TaskUpdate
from tree_of_growth.domain.tree import TreeStage, TreeState


__all__ = [
    "AppSettings",
    "AppSettingsUpdate",
    "ImageType",
    "RepeatPattern",
    "Task",
    "TaskCategory",
    "TaskCreate",
    "TaskPriority",
    "TaskUpdate",
    "TreeStage",
    "TreeState",
    "UserImage",
]
