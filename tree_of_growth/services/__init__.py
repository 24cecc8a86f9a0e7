from tree_of_growth.services import (
    data_service,
    image_service,
    preferences_service,
    progression,
    task_service,
)


__all__ = [
    "data_service",
    "image_service",
    "preferences_service",
    "progression",
    "task_service",
]
