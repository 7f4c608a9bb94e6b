"""
Search Places Use Cases
=======================

Strict keyword search, advanced search, listing, category browsing and
name suggestions over places.
"""
import logging
from typing import List, Optional

from wayfarer.application.context import Context
from wayfarer.domain.constants.limits import LocationLimits, PaginationLimits, SearchLimits
from wayfarer.domain.models.common import ContentStatus, PlaceCategory
from wayfarer.domain.models.place import Place
from wayfarer.domain.queries import LocationFilter, Page, Pagination, PlaceFilter, PlaceQuery, SortSpec
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import Ok, Result, not_found, validation_error
from wayfarer.domain.search.engine import (
    PLACE_SORT_FIELDS,
    is_strict_keyword,
    radius_validation_message,
    sort_validation_message,
    unique_names,
)

logger = logging.getLogger(__name__)


def _validate_window(pagination: Pagination, sort: Optional[SortSpec],
                     location: Optional[LocationFilter]) -> Optional[str]:
    return (
        pagination.validation_message()
        or sort_validation_message(sort, PLACE_SORT_FIELDS)
        or radius_validation_message(location, LocationLimits.MAX_PLACE_SEARCH_RADIUS_KM)
    )


async def _record_visits(context: Context, places: List[Place]) -> None:
    for place in places:
        try:
            await context.places.increment_visit_count(place.id)
        except RepositoryError as exc:
            logger.warning(f"Could not record visit for place {place.id}: {exc.message}")


class SearchPlacesUseCase:
    """Strict keyword search. Blank keywords and the wildcard are rejected."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        keyword: str,
        region_id: Optional[str] = None,
        category: Optional[PlaceCategory] = None,
        location: Optional[LocationFilter] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
        user_id: Optional[str] = None,
    ) -> Result[Page[Place]]:
        if not is_strict_keyword(keyword):
            return validation_error("Search keyword is required")

        pagination = pagination or Pagination()
        message = _validate_window(pagination, sort, location)
        if message:
            return validation_error(message)

        page = await self._context.places.search(PlaceQuery(
            filter=PlaceFilter(
                keyword=keyword.strip(),
                region_id=region_id,
                category=category,
                location=location,
            ),
            sort=sort,
            pagination=pagination,
            viewer_id=user_id,
        ))
        await _record_visits(self._context, page.items)
        return Ok(page)


class AdvancedSearchPlacesUseCase:
    """
    Multi-criteria search.

    At least one criterion is required. An empty keyword means no keyword
    filter; the wildcard keyword counts as an explicit "match everything"
    criterion.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        keyword: Optional[str] = None,
        region_id: Optional[str] = None,
        category: Optional[PlaceCategory] = None,
        tags: Optional[List[str]] = None,
        location: Optional[LocationFilter] = None,
        has_rating: Optional[bool] = None,
        min_rating: Optional[float] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
        user_id: Optional[str] = None,
    ) -> Result[Page[Place]]:
        keyword = (keyword or "").strip()
        tags = [tag for tag in (tags or []) if tag.strip()]
        criteria = (keyword, region_id, category, tags, location, has_rating, min_rating)
        if not any(value not in (None, "", []) for value in criteria):
            return validation_error("At least one search criteria must be provided")

        pagination = pagination or Pagination()
        message = _validate_window(pagination, sort, location)
        if message:
            return validation_error(message)

        page = await self._context.places.search(PlaceQuery(
            filter=PlaceFilter(
                keyword=keyword or None,
                region_id=region_id,
                category=category,
                tags=tags,
                location=location,
                has_rating=has_rating,
                min_rating=min_rating,
            ),
            sort=sort,
            pagination=pagination,
            viewer_id=user_id,
        ))
        await _record_visits(self._context, page.items)
        return Ok(page)


class ListPlacesUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        place_filter: Optional[PlaceFilter] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
        user_id: Optional[str] = None,
    ) -> Result[Page[Place]]:
        place_filter = place_filter or PlaceFilter()
        pagination = pagination or Pagination()
        message = _validate_window(pagination, sort, place_filter.location)
        if message:
            return validation_error(message)

        return Ok(await self._context.places.list(PlaceQuery(
            filter=place_filter,
            sort=sort,
            pagination=pagination,
            viewer_id=user_id,
        )))


class SearchPlacesByCategoryUseCase:
    """Published places of one category inside a region."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, region_id: str, category: PlaceCategory,
                      pagination: Optional[Pagination] = None,
                      user_id: Optional[str] = None) -> Result[Page[Place]]:
        pagination = pagination or Pagination()
        message = pagination.validation_message()
        if message:
            return validation_error(message)
        if await self._context.regions.find_by_id(region_id) is None:
            return not_found("Region", region_id)

        return Ok(await self._context.places.list(PlaceQuery(
            filter=PlaceFilter(region_id=region_id, category=category),
            pagination=pagination,
            viewer_id=user_id,
        )))


class GetPlaceSuggestionsUseCase:
    """Distinct published place names matching a partial keyword, optionally within one region."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, partial_keyword: Optional[str], region_id: Optional[str] = None,
                      limit: int = SearchLimits.DEFAULT_SUGGESTION_LIMIT) -> Result[List[str]]:
        keyword = (partial_keyword or "").strip()
        if len(keyword) < SearchLimits.MIN_SUGGESTION_QUERY_LENGTH or keyword == SearchLimits.WILDCARD:
            return Ok([])
        if limit < 1:
            return Ok([])

        page = await self._context.places.search(PlaceQuery(
            filter=PlaceFilter(keyword=keyword, region_id=region_id, status=ContentStatus.PUBLISHED),
            pagination=Pagination(page=1, limit=PaginationLimits.MAX_PAGE_SIZE),
        ))
        needle = keyword.lower()
        return Ok(unique_names((p for p in page.items if needle in p.name.lower()), limit))
