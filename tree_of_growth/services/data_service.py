"""Loading, exporting and importing the full user data set.

The exported document carries the tree state for readability, but it is
never trusted: load and import always recompute it from the tasks.
"""

import json
import logging

from pydantic import ValidationError

from tree_of_growth.core import db_client
from tree_of_growth.core.config import constants
from tree_of_growth.core.logging import span
from tree_of_growth.domain.image import UserImage
from tree_of_growth.domain.preferences import AppSettings
from tree_of_growth.domain.task import Task
from tree_of_growth.models.service_models import AppSnapshot, BackupBundle
from tree_of_growth.services import progression


logger = logging.getLogger(__name__)

_STORAGE_KEYS = [
    constants.STORAGE_KEY_TASKS,
    constants.STORAGE_KEY_TREE_STATE,
    constants.STORAGE_KEY_USER_IMAGES,
    constants.STORAGE_KEY_SETTINGS,
]


def _without_streak(raw_state: dict | None) -> dict | None:
    # Streak depends on the current day; only the remaining fields are compared
    if raw_state is None:
        return None
    return {key: value for key, value in raw_state.items() if key != "streak"}


async def load_data() -> AppSnapshot:
    """Load everything from storage and recompute the tree state from tasks."""
    with span("data_service.load_data"):
        stored = await db_client.multi_get(keys=_STORAGE_KEYS)

        tasks = [Task.model_validate(raw) for raw in stored[constants.STORAGE_KEY_TASKS] or []]
        user_images = [UserImage.model_validate(raw) for raw in stored[constants.STORAGE_KEY_USER_IMAGES] or []]
        app_settings = AppSettings.model_validate(stored[constants.STORAGE_KEY_SETTINGS] or {})
        tree_state = progression.compute_tree_state(tasks)

        if _without_streak(stored[constants.STORAGE_KEY_TREE_STATE]) != _without_streak(tree_state.to_json_dict()):
            logger.info("Cached tree state was stale; recomputed from tasks", extra={"task_count": len(tasks)})

        return AppSnapshot(
            tasks=tasks,
            tree_state=tree_state,
            user_images=user_images,
            settings=app_settings,
        )


async def export_data() -> str:
    """Serialize all user data to a pretty-printed JSON backup document."""
    with span("data_service.export_data"):
        snapshot = await load_data()
        bundle = BackupBundle(
            tasks=snapshot.tasks,
            tree_state=snapshot.tree_state,
            user_images=snapshot.user_images,
            settings=snapshot.settings,
        )
        logger.info(
            "Exported data",
            extra={"task_count": len(bundle.tasks), "image_count": len(bundle.user_images)},
        )
        return json.dumps(bundle.to_json_dict(), indent=2, ensure_ascii=False)


def parse_backup(data: str) -> BackupBundle:
    """Parse and validate a backup document.

    Missing or null sections fall back to their defaults.

    Raises:
        ValueError: If the document is not valid JSON or does not match the backup layout
    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        msg = f"Invalid backup data: {e}"
        raise ValueError(msg) from e

    if not isinstance(raw, dict):
        msg = f"Invalid backup data: expected a JSON object, got {type(raw).__name__}"
        raise ValueError(msg)

    try:
        return BackupBundle.model_validate({key: value for key, value in raw.items() if value is not None})
    except ValidationError as e:
        msg = f"Invalid backup data: {e.error_count()} validation error(s): {e}"
        raise ValueError(msg) from e


async def import_data(*, data: str) -> AppSnapshot:
    """Replace all stored data with the contents of a backup document.

    Nothing is written unless the whole document validates.

    Raises:
        ValueError: If the document is invalid
    """
    with span("data_service.import_data"):
        bundle = parse_backup(data)
        tree_state = progression.compute_tree_state(bundle.tasks)

        await db_client.multi_set(
            items={
                constants.STORAGE_KEY_TASKS: [task.to_json_dict() for task in bundle.tasks],
                constants.STORAGE_KEY_TREE_STATE: tree_state.to_json_dict(),
                constants.STORAGE_KEY_USER_IMAGES: [image.to_json_dict() for image in bundle.user_images],
                constants.STORAGE_KEY_SETTINGS: bundle.settings.to_json_dict(),
            }
        )

        logger.info(
            "Imported data",
            extra={"task_count": len(bundle.tasks), "level": tree_state.level, "streak": tree_state.streak},
        )
        return AppSnapshot(
            tasks=bundle.tasks,
            tree_state=tree_state,
            user_images=bundle.user_images,
            settings=bundle.settings,
        )
