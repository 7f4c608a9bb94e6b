"""
Manage Region Use Cases
=======================

Business use cases for creating, editing, publishing, deleting and reading
regions.
"""
import logging
from typing import List, Optional

from wayfarer.application.authorization import Capability, authorize
from wayfarer.application.context import Context
from wayfarer.application.dto.region_dto import CreateRegionRequest, UpdateRegionRequest
from wayfarer.application.use_cases.region.region_views import build_region_views
from wayfarer.domain.constants.limits import SearchLimits
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import Region, RegionView
from wayfarer.domain.result import ErrorCode, Ok, Result, conflict, err, not_found, permission_required

logger = logging.getLogger(__name__)


class CreateRegionUseCase:
    """
    Use case for creating a region.

    Only active editors and admins author content. New regions start as drafts.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, request: CreateRegionRequest) -> Result[Region]:
        """
        Execute the create region use case.

        Args:
            user_id: Acting user
            request: Validated region input

        Returns:
            Ok(created region), or NOT_FOUND / PERMISSION_REQUIRED for the actor
        """
        actor = await authorize(self._context, user_id, Capability.AUTHOR_CONTENT)
        if actor.is_err():
            return actor

        region = Region(
            name=request.name.strip(),
            created_by=user_id,
            description=request.description,
            short_description=request.short_description,
            coordinates=request.coordinates.to_domain() if request.coordinates else None,
            address=request.address,
            cover_image=request.cover_image,
            images=list(request.images),
            tags=list(request.tags),
        )
        created = await self._context.regions.create(region)
        logger.info(f"Region created: {created.id} by {user_id}")
        return Ok(created)


class UpdateRegionUseCase:
    """Owner-only partial update."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str, request: UpdateRegionRequest) -> Result[Region]:
        region = await self._context.regions.find_by_id(region_id)
        if region is None:
            return not_found("Region", region_id)
        if not region.is_owned_by(user_id):
            return permission_required("Only the region owner can update it")

        changes = request.model_dump(exclude_unset=True)
        if "name" in changes and request.name is not None:
            region.name = request.name.strip()
        if "description" in changes:
            region.description = request.description
        if "short_description" in changes:
            region.short_description = request.short_description
        if "coordinates" in changes:
            region.coordinates = request.coordinates.to_domain() if request.coordinates else None
        if "address" in changes:
            region.address = request.address
        if "cover_image" in changes:
            region.cover_image = request.cover_image
        if request.images is not None:
            region.images = list(request.images)
        if request.tags is not None:
            region.tags = list(request.tags)
        region.touch()

        return Ok(await self._context.regions.update(region))


class DeleteRegionUseCase:
    """
    Owner-only hard delete.

    A region that still contains places cannot be deleted. Favorites and pins
    of the region are removed with it.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str) -> Result[bool]:
        region = await self._context.regions.find_by_id(region_id)
        if region is None:
            return not_found("Region", region_id)
        if not region.is_owned_by(user_id):
            return permission_required("Only the region owner can delete it")

        result = await self._context.with_transaction(lambda tx: remove_region(tx, region_id))
        if result.is_ok():
            logger.info(f"Region deleted: {region_id} by {user_id}")
        return result


async def remove_region(tx: Context, region_id: str) -> Result[bool]:
    """Delete an empty region together with every favorite and pin that points at it."""
    if await tx.regions.find_by_id(region_id) is None:
        return not_found("Region", region_id)
    if await tx.places.count_by_region(region_id) > 0:
        return conflict("Region still contains places")

    await tx.region_favorites.delete_by_region(region_id)
    await tx.region_pins.delete_by_region(region_id)
    await tx.regions.delete(region_id)
    return Ok(True)


class GetRegionUseCase:
    """Read one region, applying visibility and annotating the caller's favorite and pin state."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, region_id: str, user_id: Optional[str] = None) -> Result[RegionView]:
        region = await self._context.regions.find_by_id(region_id)
        if region is None or not region.is_visible_to(user_id):
            return not_found("Region", region_id)

        views = await build_region_views(self._context, [region], user_id)
        return Ok(views[0])


class PublishRegionUseCase:
    """
    Move a draft region to published.

    The owner may publish their own draft; admins may publish any draft.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str) -> Result[Region]:
        actor = await self._context.users.find_by_id(user_id)
        if actor is None:
            return not_found("User", user_id)
        if not actor.is_active():
            return permission_required("Account is not active")

        region = await self._context.regions.find_by_id(region_id)
        if region is None:
            return not_found("Region", region_id)
        if not region.is_owned_by(user_id) and not actor.is_admin():
            return permission_required("Only the region owner or an admin can publish it")
        if region.status != ContentStatus.DRAFT:
            return err(
                ErrorCode.INVALID_TRANSITION,
                f"Cannot publish a region in status '{region.status.value}'",
            )

        return Ok(await self._context.regions.update_status(region_id, ContentStatus.PUBLISHED))


class GetFeaturedRegionsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, limit: int = SearchLimits.DEFAULT_FEATURED_LIMIT) -> Result[List[Region]]:
        if limit < 1:
            return Ok([])
        return Ok(await self._context.regions.get_featured(limit))


class GetRegionsByCreatorUseCase:
    """
    Regions authored by a user.

    Other viewers only see the creator's published regions.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, creator_id: str, user_id: Optional[str] = None,
                      status: Optional[ContentStatus] = None) -> Result[List[Region]]:
        regions = await self._context.regions.get_by_creator(creator_id, status)
        return Ok([region for region in regions if region.is_visible_to(user_id)])
