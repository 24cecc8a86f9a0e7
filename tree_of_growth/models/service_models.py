"""Pydantic models for service layer return types.

These models provide type safety at service boundaries, converting stored
JSON documents into typed objects with validation.
"""

from pydantic import Field

from tree_of_growth.domain.base import CamelModel
from tree_of_growth.domain.image import UserImage
from tree_of_growth.domain.preferences import AppSettings
from tree_of_growth.domain.task import Task
from tree_of_growth.domain.tree import TreeState


class TreeSummary(CamelModel):
    """Everything the home screen needs to draw the tree."""

    tree_state: TreeState
    message: str
    has_task_due_today: bool
    level_progress: int


class AppSnapshot(CamelModel):
    """All user data loaded from storage, with the tree state freshly recomputed."""

    tasks: list[Task] = Field(default_factory=list)
    tree_state: TreeState = Field(default_factory=TreeState)
    user_images: list[UserImage] = Field(default_factory=list)
    settings: AppSettings = Field(default_factory=AppSettings)


class BackupBundle(CamelModel):
    """Export/import document.

    tree_state is carried for readers of the file but never trusted on import.
    """

    tasks: list[Task] = Field(default_factory=list)
    tree_state: TreeState | None = None
    user_images: list[UserImage] = Field(default_factory=list)
    settings: AppSettings = Field(default_factory=AppSettings)
