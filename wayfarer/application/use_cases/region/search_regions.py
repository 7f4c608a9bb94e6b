"""
Search Regions Use Cases
========================

Strict keyword search, multi-criteria advanced search, filtered listing and
name suggestions over regions.
"""
from typing import List, Optional

from wayfarer.application.context import Context
from wayfarer.application.use_cases.region.region_views import record_region_visits
from wayfarer.domain.constants.limits import LocationLimits, PaginationLimits, SearchLimits
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import Region
from wayfarer.domain.queries import (
    LocationFilter,
    Page,
    Pagination,
    RegionFilter,
    RegionQuery,
    SortSpec,
)
from wayfarer.domain.result import Ok, Result, validation_error
from wayfarer.domain.search.engine import (
    REGION_SORT_FIELDS,
    is_strict_keyword,
    radius_validation_message,
    sort_validation_message,
    unique_names,
)


def _validate_window(pagination: Pagination, sort: Optional[SortSpec],
                     location: Optional[LocationFilter]) -> Optional[str]:
    return (
        pagination.validation_message()
        or sort_validation_message(sort, REGION_SORT_FIELDS)
        or radius_validation_message(location, LocationLimits.MAX_REGION_SEARCH_RADIUS_KM)
    )


class SearchRegionsUseCase:
    """
    Strict keyword search.

    A blank keyword or the bare wildcard is rejected; use advanced search to
    browse without a keyword.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        keyword: str,
        location: Optional[LocationFilter] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
        user_id: Optional[str] = None,
    ) -> Result[Page[Region]]:
        if not is_strict_keyword(keyword):
            return validation_error("Search keyword is required")

        pagination = pagination or Pagination()
        message = _validate_window(pagination, sort, location)
        if message:
            return validation_error(message)

        page = await self._context.regions.search(RegionQuery(
            filter=RegionFilter(keyword=keyword.strip(), location=location),
            sort=sort,
            pagination=pagination,
            viewer_id=user_id,
        ))
        await record_region_visits(self._context, page.items)
        return Ok(page)


class AdvancedSearchRegionsUseCase:
    """
    Multi-criteria search.

    At least one of keyword, tags or location is required. An empty keyword
    means no keyword filter; the wildcard keyword is an explicit "match
    everything" criterion.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        keyword: Optional[str] = None,
        tags: Optional[List[str]] = None,
        location: Optional[LocationFilter] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
        user_id: Optional[str] = None,
    ) -> Result[Page[Region]]:
        keyword = (keyword or "").strip()
        tags = [tag for tag in (tags or []) if tag.strip()]
        if not keyword and not tags and location is None:
            return validation_error("At least one search criteria must be provided")

        pagination = pagination or Pagination()
        message = _validate_window(pagination, sort, location)
        if message:
            return validation_error(message)

        page = await self._context.regions.search(RegionQuery(
            filter=RegionFilter(keyword=keyword or None, tags=tags, location=location),
            sort=sort,
            pagination=pagination,
            viewer_id=user_id,
        ))
        await record_region_visits(self._context, page.items)
        return Ok(page)


class ListRegionsUseCase:
    """Filtered, sorted, paginated listing with the visibility rule applied."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        region_filter: Optional[RegionFilter] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
        user_id: Optional[str] = None,
    ) -> Result[Page[Region]]:
        region_filter = region_filter or RegionFilter()
        pagination = pagination or Pagination()
        message = _validate_window(pagination, sort, region_filter.location)
        if message:
            return validation_error(message)

        page = await self._context.regions.list(RegionQuery(
            filter=region_filter,
            sort=sort,
            pagination=pagination,
            viewer_id=user_id,
        ))
        return Ok(page)


class GetRegionSuggestionsUseCase:
    """Distinct region names matching a partial keyword of at least two characters."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, partial_keyword: Optional[str],
                      limit: int = SearchLimits.DEFAULT_SUGGESTION_LIMIT) -> Result[List[str]]:
        keyword = (partial_keyword or "").strip()
        if len(keyword) < SearchLimits.MIN_SUGGESTION_QUERY_LENGTH or keyword == SearchLimits.WILDCARD:
            return Ok([])
        if limit < 1:
            return Ok([])

        page = await self._context.regions.search(RegionQuery(
            filter=RegionFilter(keyword=keyword, status=ContentStatus.PUBLISHED),
            pagination=Pagination(page=1, limit=PaginationLimits.MAX_PAGE_SIZE),
        ))
        needle = keyword.lower()
        return Ok(unique_names((r for r in page.items if needle in r.name.lower()), limit))
