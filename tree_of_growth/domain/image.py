"""User image domain models."""

from enum import StrEnum

from pydantic import Field

from tree_of_growth.domain.base import CamelModel


class ImageType(StrEnum):
    """Where an imported image is used."""

    LEAF = "leaf"
    BACKGROUND = "background"
    REWARD = "reward"
    THEME = "theme"


class UserImage(CamelModel):
    """Image imported by the user into the app's asset directory."""

    id: str = Field(..., description="Unique image ID")
    uri: str = Field(..., description="Location of the image file")
    type: ImageType = Field(..., description="leaf, background, reward or theme")
    name: str = Field(..., description="Display name")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
