"""Service for reading and updating user preferences."""

import logging

from tree_of_growth.core import db_client
from tree_of_growth.core.config import constants
from tree_of_growth.domain.preferences import AppSettings, AppSettingsUpdate


logger = logging.getLogger(__name__)

# Optional fields an explicit null resets to unset
_CLEARABLE_FIELDS = {"selected_theme", "selected_background"}


async def get_settings() -> AppSettings:
    """Return stored preferences merged over the defaults."""
    raw = await db_client.get_item(key=constants.STORAGE_KEY_SETTINGS)
    return AppSettings.model_validate(raw or {})


async def update_settings(*, updates: AppSettingsUpdate) -> AppSettings:
    """Apply the explicitly set fields of updates and persist the result."""
    current = await get_settings()
    changes = {
        key: value
        for key, value in updates.model_dump(exclude_unset=True).items()
        if value is not None or key in _CLEARABLE_FIELDS
    }
    updated = current.model_copy(update=changes)

    await db_client.set_item(key=constants.STORAGE_KEY_SETTINGS, value=updated.to_json_dict())
    logger.info("Updated settings", extra={"fields": sorted(changes)})
    return updated
