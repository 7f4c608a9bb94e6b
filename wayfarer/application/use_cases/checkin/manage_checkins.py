"""
Manage Check-ins Use Cases
==========================

Checking in at a place, editing and soft-deleting check-ins, and check-in
photos. The place's check-in counter and average rating are kept in step
with the check-ins inside one transaction.
"""
import logging
from datetime import timedelta
from typing import List, Optional

from wayfarer.application.authorization import require_active_user
from wayfarer.application.context import Context
from wayfarer.application.dto.checkin_dto import CheckinPhotoRequest, CreateCheckinRequest, UpdateCheckinRequest
from wayfarer.application.dto.media_dto import ImageFile
from wayfarer.application.use_cases.media.manage_images import discard_files, oversized_file_message, store_files
from wayfarer.domain.constants.limits import CheckinLimits
from wayfarer.domain.models.checkin import Checkin, CheckinPhoto
from wayfarer.domain.models.common import CheckinStatus
from wayfarer.domain.queries import CheckinFilter, CheckinQuery, Page, Pagination, SortSpec
from wayfarer.domain.result import ErrorCode, Ok, Result, conflict, err, not_found, permission_required, validation_error
from wayfarer.domain.search.engine import CHECKIN_SORT_FIELDS, sort_validation_message
from wayfarer.domain.services.storage_service import StorageError
from wayfarer.utils.datetime_utils import now

logger = logging.getLogger(__name__)


async def _refresh_rating(tx: Context, place_id: str) -> None:
    stats = await tx.checkins.get_place_rating_stats(place_id)
    average = round(stats.average, 2) if stats.average is not None else None
    await tx.places.update_rating(place_id, average)


def _photos(checkin_id: str, requests: List[CheckinPhotoRequest]) -> List[CheckinPhoto]:
    return [CheckinPhoto(checkin_id=checkin_id, url=photo.url, caption=photo.caption) for photo in requests]


class CreateCheckinUseCase:
    """
    Use case for checking in at a place.

    The user must be active, the place published, and the reported user
    location within the configured distance of the place. One check-in per
    user and place is accepted per day.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, request: CreateCheckinRequest) -> Result[Checkin]:
        """
        Execute the create check-in use case.

        Args:
            user_id: Acting user
            request: Validated check-in input

        Returns:
            Ok(created check-in)
        """
        user = await require_active_user(self._context, user_id)
        if user.is_err():
            return user

        place = await self._context.places.find_by_id(request.place_id)
        if place is None or not place.is_published():
            return not_found("Place", request.place_id)

        user_location = request.user_location.to_domain()
        max_distance = self._context.settings.checkin_max_distance_meters
        if not self._context.location_service.validate_user_location(
            user_location, place.coordinates, max_distance,
        ):
            return validation_error(f"You must be within {max_distance} meters of the place to check in")

        since = now() - timedelta(hours=CheckinLimits.DUPLICATE_CHECKIN_WINDOW_HOURS)
        if await self._context.checkins.has_recent_checkin(user_id, place.id, since):
            return conflict("You have already checked in at this place recently")

        checkin = Checkin(
            user_id=user_id,
            place_id=place.id,
            comment=request.comment,
            rating=request.rating,
            photos=[photo.url for photo in request.photos],
            user_location=user_location,
            is_private=request.is_private,
        )

        async def create(tx: Context) -> Result[Checkin]:
            created = await tx.checkins.create(checkin)
            if request.photos:
                await tx.checkin_photos.add(created.id, _photos(created.id, request.photos))
            await tx.places.adjust_checkin_count(place.id, 1)
            if created.rating is not None:
                await _refresh_rating(tx, place.id)
            return Ok(created)

        result = await self._context.with_transaction(create)
        if result.is_ok():
            logger.info(f"Check-in {checkin.id} at place {place.id} by {user_id}")
        return result


class UpdateCheckinUseCase:
    """Owner-only edit of comment, rating and privacy."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, checkin_id: str, request: UpdateCheckinRequest) -> Result[Checkin]:
        checkin = await self._context.checkins.find_by_id(checkin_id)
        if checkin is None or checkin.is_deleted():
            return not_found("Checkin", checkin_id)
        if not checkin.is_owned_by(user_id):
            return permission_required("Only the author can update this check-in")

        changes = request.model_dump(exclude_unset=True)
        rating_changed = "rating" in changes and request.rating != checkin.rating
        if "comment" in changes:
            checkin.comment = request.comment
        if "rating" in changes:
            checkin.rating = request.rating
        if request.is_private is not None:
            checkin.is_private = request.is_private
        checkin.updated_at = now()

        async def update(tx: Context) -> Result[Checkin]:
            updated = await tx.checkins.update(checkin)
            if rating_changed:
                await _refresh_rating(tx, checkin.place_id)
            return Ok(updated)

        return await self._context.with_transaction(update)


class DeleteCheckinUseCase:
    """Owner-only soft delete. The check-in stops counting towards the place."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, checkin_id: str) -> Result[bool]:
        checkin = await self._context.checkins.find_by_id(checkin_id)
        if checkin is None or checkin.is_deleted():
            return not_found("Checkin", checkin_id)
        if not checkin.is_owned_by(user_id):
            return permission_required("Only the author can delete this check-in")

        async def delete(tx: Context) -> Result[bool]:
            await tx.checkins.update_status(checkin_id, CheckinStatus.DELETED)
            if await tx.places.find_by_id(checkin.place_id) is not None:
                await tx.places.adjust_checkin_count(checkin.place_id, -1)
                await _refresh_rating(tx, checkin.place_id)
            return Ok(True)

        return await self._context.with_transaction(delete)


class ListUserCheckinsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        user_id: str,
        place_id: Optional[str] = None,
        status: Optional[CheckinStatus] = None,
        has_rating: Optional[bool] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
    ) -> Result[Page[Checkin]]:
        pagination = pagination or Pagination()
        message = pagination.validation_message() or sort_validation_message(sort, CHECKIN_SORT_FIELDS)
        if message:
            return validation_error(message)

        return Ok(await self._context.checkins.list(CheckinQuery(
            filter=CheckinFilter(user_id=user_id, place_id=place_id, status=status, has_rating=has_rating),
            sort=sort,
            pagination=pagination,
        )))


class CheckinPhotosUseCase:
    """Attach photos to a check-in and read them back in display order."""

    def __init__(self, context: Context):
        self._context = context

    async def _writable(self, user_id: str, checkin_id: str, count: int) -> Result[Checkin]:
        checkin = await self._context.checkins.find_by_id(checkin_id)
        if checkin is None or checkin.is_deleted():
            return not_found("Checkin", checkin_id)
        if not checkin.is_owned_by(user_id):
            return permission_required("Only the author can add photos to this check-in")
        if count == 0:
            return validation_error("At least one photo is required")

        existing = await self._context.checkin_photos.find_by_checkin(checkin_id)
        if len(existing) + count > CheckinLimits.MAX_PHOTOS_PER_CHECKIN:
            return validation_error(
                f"A check-in can have at most {CheckinLimits.MAX_PHOTOS_PER_CHECKIN} photos"
            )
        return Ok(checkin)

    async def add(self, user_id: str, checkin_id: str,
                  photos: List[CheckinPhotoRequest]) -> Result[List[CheckinPhoto]]:
        loaded = await self._writable(user_id, checkin_id, len(photos))
        if loaded.is_err():
            return loaded
        checkin = loaded.unwrap()

        checkin.photos = checkin.photos + [photo.url for photo in photos]
        checkin.updated_at = now()

        async def add(tx: Context) -> Result[List[CheckinPhoto]]:
            stored = await tx.checkin_photos.add(checkin_id, _photos(checkin_id, photos))
            await tx.checkins.update(checkin)
            return Ok(stored)

        return await self._context.with_transaction(add)

    async def upload(self, user_id: str, checkin_id: str, files: List[ImageFile]) -> Result[List[CheckinPhoto]]:
        """Store photo files and attach them. Stored files are removed again if attaching fails."""
        loaded = await self._writable(user_id, checkin_id, len(files))
        if loaded.is_err():
            return loaded
        message = oversized_file_message(files)
        if message:
            return validation_error(message)

        try:
            keys, urls = await store_files(self._context, f"checkins/{checkin_id}", files)
        except StorageError as exc:
            logger.error(f"Photo upload for check-in {checkin_id} failed: {exc}")
            return err(ErrorCode.QUERY_FAILED, "Failed to upload photos to storage", exc)

        result = await self.add(user_id, checkin_id, [CheckinPhotoRequest(url=url) for url in urls])
        if result.is_err():
            await discard_files(self._context, keys)
        return result

    async def list(self, checkin_id: str, user_id: Optional[str] = None) -> Result[List[CheckinPhoto]]:
        checkin = await self._context.checkins.find_by_id(checkin_id)
        if checkin is None or checkin.is_deleted():
            return not_found("Checkin", checkin_id)
        if checkin.is_private and not checkin.is_owned_by(user_id):
            return not_found("Checkin", checkin_id)
        return Ok(await self._context.checkin_photos.find_by_checkin(checkin_id))
