"""
Manage Place Use Cases
======================

Business use cases for creating, editing, moving, publishing, deleting and
reading places. Region place counters change in the same transaction as the
place itself.
"""
import logging
from typing import List, Optional

from wayfarer.application.authorization import Capability, authorize
from wayfarer.application.context import Context
from wayfarer.application.dto.place_dto import CreatePlaceRequest, UpdatePlaceRequest
from wayfarer.application.use_cases.permissions.place_access import (
    build_place_views,
    can_delete_place,
    can_edit_place,
)
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.place import MapLocation, Place, PlaceView
from wayfarer.domain.result import ErrorCode, Ok, Result, err, not_found, permission_required

logger = logging.getLogger(__name__)


class CreatePlaceUseCase:
    """
    Use case for creating a place inside a region.

    The author must be an active editor or admin and, unless admin, own the
    region.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, request: CreatePlaceRequest) -> Result[Place]:
        """
        Execute the create place use case.

        Args:
            user_id: Acting user
            request: Validated place input

        Returns:
            Ok(created draft place)
        """
        actor = await authorize(self._context, user_id, Capability.AUTHOR_CONTENT)
        if actor.is_err():
            return actor

        region = await self._context.regions.find_by_id(request.region_id)
        if region is None:
            return not_found("Region", request.region_id)
        if not region.is_owned_by(user_id) and not actor.unwrap().is_admin():
            return permission_required("Only the region owner can add places to it")

        place = Place(
            name=request.name.strip(),
            category=request.category,
            region_id=request.region_id,
            coordinates=request.coordinates.to_domain(),
            address=request.address,
            created_by=user_id,
            description=request.description,
            short_description=request.short_description,
            phone=request.phone,
            website=request.website,
            email=request.email,
            cover_image=request.cover_image,
            images=list(request.images),
            tags=list(request.tags),
            business_hours=[hours.to_domain() for hours in request.business_hours],
        )

        async def create(tx: Context) -> Result[Place]:
            created = await tx.places.create(place)
            await tx.regions.adjust_place_count(place.region_id, 1)
            return Ok(created)

        result = await self._context.with_transaction(create)
        if result.is_ok():
            logger.info(f"Place created: {place.id} in region {place.region_id} by {user_id}")
        return result


class UpdatePlaceUseCase:
    """
    Partial update by anyone holding edit permission.

    Changing ``region_id`` moves the place: the old region's counter is
    decremented and the new one's incremented together with the place write.
    The place and the target region are read again inside the transaction.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, place_id: str, request: UpdatePlaceRequest) -> Result[Place]:
        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        if not await can_edit_place(self._context, place, user_id):
            return permission_required("You do not have permission to edit this place")

        old_region_id = place.region_id
        moving = request.region_id is not None and request.region_id != old_region_id
        if moving and await self._context.regions.find_by_id(request.region_id) is None:
            return not_found("Region", request.region_id)

        self._apply_changes(place, request)
        place.touch()

        if not moving:
            return Ok(await self._context.places.update(place))

        async def move(tx: Context) -> Result[Place]:
            stored = await tx.places.find_by_id(place_id)
            if stored is None:
                return not_found("Place", place_id)
            if await tx.regions.find_by_id(place.region_id) is None:
                return not_found("Region", place.region_id)

            updated = await tx.places.update(place)
            await tx.regions.adjust_place_count(stored.region_id, -1)
            await tx.regions.adjust_place_count(place.region_id, 1)
            return Ok(updated)

        result = await self._context.with_transaction(move)
        if result.is_ok():
            logger.info(f"Place {place_id} moved from region {old_region_id} to {place.region_id}")
        return result

    @staticmethod
    def _apply_changes(place: Place, request: UpdatePlaceRequest) -> None:
        changes = request.model_dump(exclude_unset=True)
        if request.name is not None:
            place.name = request.name.strip()
        if request.category is not None:
            place.category = request.category
        if request.region_id is not None:
            place.region_id = request.region_id
        if request.coordinates is not None:
            place.coordinates = request.coordinates.to_domain()
        if request.address is not None:
            place.address = request.address
        for name in ("description", "short_description", "phone", "website", "email", "cover_image"):
            if name in changes:
                setattr(place, name, getattr(request, name))
        if request.images is not None:
            place.images = list(request.images)
        if request.tags is not None:
            place.tags = list(request.tags)
        if request.business_hours is not None:
            place.business_hours = [hours.to_domain() for hours in request.business_hours]


class DeletePlaceUseCase:
    """Hard delete by anyone holding delete permission. Editor permissions on the place go with it."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, place_id: str) -> Result[bool]:
        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        if not await can_delete_place(self._context, place, user_id):
            return permission_required("You do not have permission to delete this place")

        result = await self._context.with_transaction(lambda tx: remove_place(tx, place))
        if result.is_ok():
            logger.info(f"Place deleted: {place_id} by {user_id}")
        return result


async def remove_place(tx: Context, place: Place) -> Result[bool]:
    """Delete a place with its permissions and favorites and release its slot in the region counter."""
    stored = await tx.places.find_by_id(place.id)
    if stored is None:
        return not_found("Place", place.id)
    for permission in await tx.place_permissions.find_by_place(stored.id):
        await tx.place_permissions.remove(permission.id)
    await tx.place_favorites.delete_by_place(stored.id)
    await tx.places.delete(stored.id)
    await tx.regions.adjust_place_count(stored.region_id, -1)
    return Ok(True)


class GetPlaceUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, place_id: str, user_id: Optional[str] = None) -> Result[PlaceView]:
        place = await self._context.places.find_by_id(place_id)
        if place is None or not place.is_visible_to(user_id):
            return not_found("Place", place_id)

        views = await build_place_views(self._context, [place], user_id)
        return Ok(views[0])


class PublishPlaceUseCase:
    """Owner (or admin) publishes a draft place."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, place_id: str) -> Result[Place]:
        actor = await self._context.users.find_by_id(user_id)
        if actor is None:
            return not_found("User", user_id)
        if not actor.is_active():
            return permission_required("Account is not active")

        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        if not place.is_owned_by(user_id) and not actor.is_admin():
            return permission_required("Only the place owner or an admin can publish it")
        if place.status != ContentStatus.DRAFT:
            return err(
                ErrorCode.INVALID_TRANSITION,
                f"Cannot publish a place in status '{place.status.value}'",
            )

        return Ok(await self._context.places.update_status(place_id, ContentStatus.PUBLISHED))


class GetMapLocationsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, region_id: str) -> Result[List[MapLocation]]:
        if await self._context.regions.find_by_id(region_id) is None:
            return not_found("Region", region_id)
        return Ok(await self._context.places.get_map_locations(region_id))


class GetPlacesByRegionUseCase:
    """Places of one region that the caller may see, newest first."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, region_id: str, user_id: Optional[str] = None) -> Result[List[PlaceView]]:
        region = await self._context.regions.find_by_id(region_id)
        if region is None or not region.is_visible_to(user_id):
            return not_found("Region", region_id)

        places = [p for p in await self._context.places.get_by_region(region_id) if p.is_visible_to(user_id)]
        return Ok(await build_place_views(self._context, places, user_id))
