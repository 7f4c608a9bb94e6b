"""
Moderate Content Use Cases
==========================

Admin side channel over region and place status, deletion, unfiltered
listings and content statistics.

Content status machine::

    draft -> published -> archived
    draft | published -> rejected

``archived`` and ``rejected`` are terminal.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from wayfarer.application.authorization import Capability, authorize
from wayfarer.application.context import Context
from wayfarer.application.use_cases.place.manage_place import remove_place
from wayfarer.application.use_cases.region.manage_region import remove_region
from wayfarer.domain.models.common import ContentStatus, can_transition_content
from wayfarer.domain.models.place import Place
from wayfarer.domain.models.region import Region
from wayfarer.domain.queries import (
    Page,
    Pagination,
    PlaceFilter,
    PlaceQuery,
    RegionFilter,
    RegionQuery,
    SortSpec,
    UserQuery,
)
from wayfarer.domain.result import ErrorCode, Ok, Result, err, not_found, validation_error
from wayfarer.domain.search.engine import PLACE_SORT_FIELDS, REGION_SORT_FIELDS, sort_validation_message

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    REGION = "region"
    PLACE = "place"


@dataclass
class ContentStatistics:
    total_regions: int = 0
    published_regions: int = 0
    draft_regions: int = 0
    reported_regions: int = 0
    total_places: int = 0
    published_places: int = 0
    draft_places: int = 0
    reported_places: int = 0
    total_users: int = 0


def _invalid_transition(kind: str, current: ContentStatus, target: ContentStatus):
    return err(
        ErrorCode.INVALID_TRANSITION,
        f"Cannot move {kind} from '{current.value}' to '{target.value}'",
    )


class UpdateContentStatusUseCase:
    """Admin status change for regions and places."""

    def __init__(self, context: Context):
        self._context = context

    async def update_region_status(self, admin_id: str, region_id: str,
                                   status: ContentStatus) -> Result[Region]:
        actor = await authorize(self._context, admin_id, Capability.MODERATE_CONTENT)
        if actor.is_err():
            return actor

        region = await self._context.regions.find_by_id(region_id)
        if region is None:
            return not_found("Region", region_id)
        if not can_transition_content(region.status, status):
            return _invalid_transition("region", region.status, status)

        updated = await self._context.regions.update_status(region_id, status)
        logger.info(f"Region {region_id} moved to {status.value} by admin {admin_id}")
        return Ok(updated)

    async def update_place_status(self, admin_id: str, place_id: str,
                                  status: ContentStatus) -> Result[Place]:
        actor = await authorize(self._context, admin_id, Capability.MODERATE_CONTENT)
        if actor.is_err():
            return actor

        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        if not can_transition_content(place.status, status):
            return _invalid_transition("place", place.status, status)

        updated = await self._context.places.update_status(place_id, status)
        logger.info(f"Place {place_id} moved to {status.value} by admin {admin_id}")
        return Ok(updated)


class AdminDeleteContentUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def delete_region(self, admin_id: str, region_id: str) -> Result[bool]:
        """Delete any region. Regions that still contain places are refused."""
        actor = await authorize(self._context, admin_id, Capability.MODERATE_CONTENT)
        if actor.is_err():
            return actor

        result = await self._context.with_transaction(lambda tx: remove_region(tx, region_id))
        if result.is_ok():
            logger.info(f"Region {region_id} deleted by admin {admin_id}")
        return result

    async def delete_place(self, admin_id: str, place_id: str) -> Result[bool]:
        actor = await authorize(self._context, admin_id, Capability.MODERATE_CONTENT)
        if actor.is_err():
            return actor

        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)

        result = await self._context.with_transaction(lambda tx: remove_place(tx, place))
        if result.is_ok():
            logger.info(f"Place {place_id} deleted by admin {admin_id}")
        return result


class AdminListContentUseCase:
    """Listing for moderation. Visibility rules do not apply."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        admin_id: str,
        kind: ContentKind,
        status: Optional[ContentStatus] = None,
        keyword: Optional[str] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
    ) -> Result[Page[Union[Region, Place]]]:
        actor = await authorize(self._context, admin_id, Capability.MODERATE_CONTENT)
        if actor.is_err():
            return actor

        pagination = pagination or Pagination()
        allowed = REGION_SORT_FIELDS if kind == ContentKind.REGION else PLACE_SORT_FIELDS
        message = pagination.validation_message() or sort_validation_message(sort, allowed)
        if message:
            return validation_error(message)

        if kind == ContentKind.REGION:
            return Ok(await self._context.regions.list(RegionQuery(
                filter=RegionFilter(status=status, keyword=keyword),
                sort=sort,
                pagination=pagination,
                enforce_visibility=False,
            )))
        return Ok(await self._context.places.list(PlaceQuery(
            filter=PlaceFilter(status=status, keyword=keyword),
            sort=sort,
            pagination=pagination,
            enforce_visibility=False,
        )))


class GetContentStatisticsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, admin_id: str) -> Result[ContentStatistics]:
        actor = await authorize(self._context, admin_id, Capability.VIEW_STATISTICS)
        if actor.is_err():
            return actor

        window = Pagination(page=1, limit=1)

        async def count_regions(status: Optional[ContentStatus] = None) -> int:
            page = await self._context.regions.list(RegionQuery(
                filter=RegionFilter(status=status), pagination=window, enforce_visibility=False,
            ))
            return page.total_count

        async def count_places(status: Optional[ContentStatus] = None) -> int:
            page = await self._context.places.list(PlaceQuery(
                filter=PlaceFilter(status=status), pagination=window, enforce_visibility=False,
            ))
            return page.total_count

        total_regions = await count_regions()
        total_places = await count_places()
        users = await self._context.users.list(UserQuery(pagination=window))

        return Ok(ContentStatistics(
            total_regions=total_regions,
            published_regions=await count_regions(ContentStatus.PUBLISHED),
            draft_regions=await count_regions(ContentStatus.DRAFT),
            reported_regions=await self._count_reported_regions(total_regions),
            total_places=total_places,
            published_places=await count_places(ContentStatus.PUBLISHED),
            draft_places=await count_places(ContentStatus.DRAFT),
            reported_places=await self._count_reported_places(total_places),
            total_users=users.total_count,
        ))

    async def _count_reported_regions(self, total: int) -> int:
        count = 0
        for page_number in range(1, total // 100 + 2):
            page = await self._context.regions.list(RegionQuery(
                pagination=Pagination(page=page_number, limit=100), enforce_visibility=False,
            ))
            count += sum(1 for region in page.items if region.is_reported)
        return count

    async def _count_reported_places(self, total: int) -> int:
        count = 0
        for page_number in range(1, total // 100 + 2):
            page = await self._context.places.list(PlaceQuery(
                pagination=Pagination(page=page_number, limit=100), enforce_visibility=False,
            ))
            count += sum(1 for place in page.items if place.is_reported)
        return count
