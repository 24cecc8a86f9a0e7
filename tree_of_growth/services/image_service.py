"""User image registry backed by the asset directory and key-value store."""

import asyncio
import logging
import shutil
import uuid
from pathlib import Path

from tree_of_growth.core import db_client
from tree_of_growth.core.config import constants, settings
from tree_of_growth.core.logging import span
from tree_of_growth.domain.image import UserImage


logger = logging.getLogger(__name__)

_DEFAULT_SUFFIX = ".jpg"

# Serializes read-modify-write of the image list
_images_lock = asyncio.Lock()


def get_assets_dir() -> Path:
    """Return the resolved directory that holds copied user images."""
    return Path(settings.user_assets_dir).resolve()


def _is_managed_file(path: Path) -> bool:
    return path.resolve().is_relative_to(get_assets_dir())


async def list_images() -> list[UserImage]:
    """Return all registered images."""
    raw_images = await db_client.get_item(key=constants.STORAGE_KEY_USER_IMAGES)
    return [UserImage.model_validate(raw) for raw in raw_images or []]


async def _save_images(images: list[UserImage]) -> None:
    await db_client.set_item(
        key=constants.STORAGE_KEY_USER_IMAGES,
        value=[image.to_json_dict() for image in images],
    )


async def add_image(*, image: UserImage) -> UserImage:
    """Copy the image file into the asset directory and register it.

    The copy gets a generated file name; the stored record points at the copy,
    not at the original location.

    Raises:
        FileNotFoundError: If the source file does not exist
    """
    with span("image_service.add_image"):
        source = Path(image.uri)
        assets_dir = get_assets_dir()
        assets_dir.mkdir(parents=True, exist_ok=True)
        target = assets_dir / f"{uuid.uuid4().hex}{source.suffix or _DEFAULT_SUFFIX}"

        await asyncio.to_thread(shutil.copyfile, source, target)

        stored = image.model_copy(update={"uri": str(target)})
        async with _images_lock:
            images = await list_images()
            images.append(stored)
            await _save_images(images)

        logger.info("Added image", extra={"image_id": image.id, "type": image.type, "uri": str(target)})
        return stored


async def delete_image(*, image_id: str) -> None:
    """Remove an image record and its file.

    Only files inside the asset directory are deleted. A file that cannot be
    deleted is logged and the record is removed anyway.

    Raises:
        KeyError: If no image has this id
    """
    with span("image_service.delete_image"):
        async with _images_lock:
            images = await list_images()
            image = next((img for img in images if img.id == image_id), None)
            if image is None:
                msg = f"Image not found: {image_id}"
                raise KeyError(msg)

            path = Path(image.uri)
            if _is_managed_file(path):
                try:
                    path.unlink(missing_ok=True)
                except OSError as e:
                    logger.error("delete_image_file_failed", extra={"image_id": image_id, "error": str(e)})
            else:
                logger.warning("Skipped deleting file outside asset directory", extra={"image_id": image_id})

            await _save_images([img for img in images if img.id != image_id])

        logger.info("Deleted image", extra={"image_id": image_id})
