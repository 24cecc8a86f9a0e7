"""Tree state domain models."""

from enum import StrEnum

from pydantic import Field

from tree_of_growth.domain.base import CamelModel


class TreeStage(StrEnum):
    """Visual growth stage, ordered from smallest to largest."""

    SEED = "seed"
    SPROUT = "sprout"
    SMALL_TREE = "small-tree"
    BIG_TREE = "big-tree"
    BLOOMING_TREE = "blooming-tree"


class TreeState(CamelModel):
    """Progress derived from the task collection.

    Always recomputed from tasks; a stored copy is only a cache.
    """

    growth_points: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    current_stage: TreeStage = TreeStage.SEED
    leaves: int = Field(default=0, ge=0)
    total_completed: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    last_completed_date: str | None = None
