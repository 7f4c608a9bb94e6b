"""
Manage Images Use Cases
=======================

Image galleries of regions and places: uploading files through the storage
service, removing an image and choosing the cover image.

Files are written to storage before the entity is updated. If the update
fails the freshly written files are removed again.
"""
import logging
import uuid
from typing import Generic, List, Optional, Tuple, TypeVar

from wayfarer.application.authorization import require_active_user
from wayfarer.application.context import Context
from wayfarer.application.dto.media_dto import ImageFile, UploadImagesRequest
from wayfarer.application.use_cases.permissions.place_access import can_edit_place
from wayfarer.domain.constants.limits import MediaLimits
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.place import Place
from wayfarer.domain.models.region import Region
from wayfarer.domain.models.user import User
from wayfarer.domain.result import ErrorCode, Ok, Result, err, not_found, permission_required, validation_error
from wayfarer.domain.services.storage_service import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T", Region, Place)

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def oversized_file_message(files: List[ImageFile]) -> Optional[str]:
    for image in files:
        if len(image.content) > MediaLimits.MAX_FILE_SIZE_BYTES:
            return f"File {image.filename} exceeds maximum size of 10MB"
    return None


async def store_files(context: Context, prefix: str, files: List[ImageFile]) -> Tuple[List[str], List[str]]:
    """
    Write ``files`` under ``prefix`` and return their storage keys and public URLs.

    Raises:
        StorageError: after removing whatever was already written
    """
    keys: List[str] = []
    urls: List[str] = []
    try:
        for image in files:
            key = f"{prefix}/{uuid.uuid4().hex}{EXTENSIONS.get(image.content_type, '')}"
            urls.append(await context.storage_service.upload(key, image.content, image.content_type))
            keys.append(key)
    except StorageError:
        await discard_files(context, keys)
        raise
    return keys, urls


async def discard_files(context: Context, keys: List[str]) -> None:
    """Best-effort removal of stored files; failures are only logged."""
    for key in keys:
        try:
            await context.storage_service.delete(key)
        except StorageError as exc:
            logger.warning(f"Could not remove stored file {key}: {exc}")


class ImageGalleryUseCase(Generic[T]):
    """Upload, removal and cover selection for one kind of content."""

    ENTITY = ""
    FOLDER = ""

    def __init__(self, context: Context):
        self._context = context

    def _repository(self, context: Context):
        raise NotImplementedError

    async def _can_manage(self, actor: User, entity: T) -> bool:
        raise NotImplementedError

    async def _load(self, user_id: str, entity_id: str, action: str) -> Result[T]:
        actor = await require_active_user(self._context, user_id)
        if actor.is_err():
            return actor

        entity = await self._repository(self._context).find_by_id(entity_id)
        if entity is None:
            return not_found(self.ENTITY, entity_id)
        if not await self._can_manage(actor.unwrap(), entity):
            return permission_required(f"Unauthorized to {action} this {self.ENTITY.lower()}")
        return Ok(entity)

    async def upload(self, user_id: str, entity_id: str, request: UploadImagesRequest) -> Result[T]:
        """
        Store new images and append their URLs to the gallery.

        Without a cover image the first upload becomes the cover;
        ``set_cover_image`` forces that.

        Returns:
            Ok(updated entity). VALIDATION_ERROR when a file is too large or
            the gallery would exceed its size limit.
        """
        loaded = await self._load(user_id, entity_id, "upload images to")
        if loaded.is_err():
            return loaded
        entity = loaded.unwrap()

        if entity.status == ContentStatus.ARCHIVED:
            return err(
                ErrorCode.INVALID_TRANSITION,
                f"Cannot upload images to an archived {self.ENTITY.lower()}",
            )
        message = self._count_message(len(entity.images), len(request.files))
        if message:
            return validation_error(message)
        message = oversized_file_message(request.files)
        if message:
            return validation_error(message)

        try:
            keys, urls = await store_files(self._context, f"{self.FOLDER}/{entity_id}", request.files)
        except StorageError as exc:
            logger.error(f"Image upload for {self.ENTITY.lower()} {entity_id} failed: {exc}")
            return err(ErrorCode.QUERY_FAILED, "Failed to upload images to storage", exc)

        async def attach(tx: Context) -> Result[T]:
            repository = self._repository(tx)
            stored = await repository.find_by_id(entity_id)
            if stored is None:
                return not_found(self.ENTITY, entity_id)
            message = self._count_message(len(stored.images), len(urls))
            if message:
                return validation_error(message)

            stored.images = list(stored.images) + urls
            if request.set_cover_image or not stored.cover_image:
                stored.cover_image = urls[0]
            return Ok(await repository.update(stored))

        result = await self._context.with_transaction(attach)
        if result.is_err():
            await discard_files(self._context, keys)
            return result
        logger.info(f"{len(urls)} images added to {self.ENTITY.lower()} {entity_id} by {user_id}")
        return result

    async def delete_image(self, user_id: str, entity_id: str, image_url: str) -> Result[T]:
        """Drop an image from the gallery and from storage. A removed cover falls back to the first image left."""
        loaded = await self._load(user_id, entity_id, "delete images from")
        if loaded.is_err():
            return loaded
        if image_url not in loaded.unwrap().images:
            return err(ErrorCode.NOT_FOUND, f"Image not found in {self.ENTITY.lower()}")

        async def detach(tx: Context) -> Result[T]:
            repository = self._repository(tx)
            stored = await repository.find_by_id(entity_id)
            if stored is None:
                return not_found(self.ENTITY, entity_id)
            if image_url not in stored.images:
                return err(ErrorCode.NOT_FOUND, f"Image not found in {self.ENTITY.lower()}")

            stored.images = [url for url in stored.images if url != image_url]
            if stored.cover_image == image_url:
                stored.cover_image = stored.images[0] if stored.images else None
            return Ok(await repository.update(stored))

        result = await self._context.with_transaction(detach)
        if result.is_err():
            return result

        key = self._context.storage_service.key_for_url(image_url)
        if key is not None:
            await discard_files(self._context, [key])
        return result

    async def set_cover_image(self, user_id: str, entity_id: str, image_url: str) -> Result[T]:
        loaded = await self._load(user_id, entity_id, "set the cover image of")
        if loaded.is_err():
            return loaded
        entity = loaded.unwrap()
        if image_url not in entity.images:
            return err(ErrorCode.NOT_FOUND, f"Image not found in {self.ENTITY.lower()}")

        entity.cover_image = image_url
        return Ok(await self._repository(self._context).update(entity))

    def _count_message(self, current: int, added: int) -> Optional[str]:
        limit = MediaLimits.MAX_IMAGES_PER_ENTITY
        if current + added <= limit:
            return None
        return (
            f"Cannot upload {added} images. Would exceed maximum of {limit} images "
            f"per {self.ENTITY.lower()}. Current count: {current}"
        )


class RegionImagesUseCase(ImageGalleryUseCase[Region]):
    """Region galleries are managed by the region owner or an admin."""

    ENTITY = "Region"
    FOLDER = "regions"

    def _repository(self, context: Context):
        return context.regions

    async def _can_manage(self, actor: User, entity: Region) -> bool:
        return entity.is_owned_by(actor.id) or actor.is_admin()


class PlaceImagesUseCase(ImageGalleryUseCase[Place]):
    """Place galleries are managed by anyone who may edit the place, or an admin."""

    ENTITY = "Place"
    FOLDER = "places"

    def _repository(self, context: Context):
        return context.places

    async def _can_manage(self, actor: User, entity: Place) -> bool:
        return actor.is_admin() or await can_edit_place(self._context, entity, actor.id)
