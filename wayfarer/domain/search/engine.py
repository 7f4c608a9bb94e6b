"""
Search Engine
=============

Pure filtering, visibility, sorting and pagination over in-process lists of
regions and places. The in-memory repositories delegate to these functions and
the MongoDB repositories reproduce the same rules as database queries.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from wayfarer.domain.constants.limits import LocationLimits, SearchLimits
from wayfarer.domain.models.common import Coordinates, SortDirection
from wayfarer.domain.models.place import Place
from wayfarer.domain.models.region import Region
from wayfarer.domain.queries import (
    LocationFilter,
    Page,
    Pagination,
    PlaceFilter,
    PlaceQuery,
    RegionFilter,
    RegionQuery,
    SortSpec,
)
from wayfarer.domain.search.geo import haversine_km

T = TypeVar("T")
Content = Union[Region, Place]

# Public sort names (camelCase, as exposed by the API) and their snake_case
# aliases, mapped to model attributes.
REGION_SORT_FIELDS: Dict[str, str] = {
    "name": "name",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "visitCount": "visit_count",
    "visit_count": "visit_count",
    "favoriteCount": "favorite_count",
    "favorite_count": "favorite_count",
}

PLACE_SORT_FIELDS: Dict[str, str] = {
    **REGION_SORT_FIELDS,
    "checkinCount": "checkin_count",
    "checkin_count": "checkin_count",
}

CHECKIN_SORT_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "rating": "rating",
}

REPORT_SORT_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "status": "status",
}

USER_SORT_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "name": "name",
    "email": "email",
    "lastLoginAt": "last_login_at",
    "last_login_at": "last_login_at",
}

DEFAULT_SORT = SortSpec(field="created_at", direction=SortDirection.DESC)


def normalize_keyword(keyword: Optional[str]) -> Optional[str]:
    """
    Trim a keyword; empty input and the wildcard token both mean "no keyword filter".
    """
    if keyword is None:
        return None
    trimmed = keyword.strip()
    if not trimmed or trimmed == SearchLimits.WILDCARD:
        return None
    return trimmed


def is_strict_keyword(keyword: Optional[str]) -> bool:
    """Strict search accepts only a real keyword: not blank and not the wildcard."""
    return normalize_keyword(keyword) is not None


def matches_keyword(values: Iterable[Optional[str]], keyword: Optional[str]) -> bool:
    needle = normalize_keyword(keyword)
    if needle is None:
        return True
    needle = needle.lower()
    return any(value and needle in value.lower() for value in values)


def matches_tags(entity_tags: Sequence[str], requested: Sequence[str]) -> bool:
    """True when any requested tag is a case-insensitive substring of any entity tag."""
    if not requested:
        return True
    lowered = [tag.lower() for tag in entity_tags]
    return any(want.lower() in tag for want in requested for tag in lowered)


def within_radius(coordinates: Optional[Coordinates], location: Optional[LocationFilter]) -> bool:
    if location is None:
        return True
    if coordinates is None:
        return False
    return haversine_km(coordinates, location.coordinates) <= location.radius_km


def radius_validation_message(location: Optional[LocationFilter], max_radius_km: float) -> Optional[str]:
    if location is None:
        return None
    if not LocationLimits.MIN_SEARCH_RADIUS_KM <= location.radius_km <= max_radius_km:
        return (
            f"Search radius must be between {LocationLimits.MIN_SEARCH_RADIUS_KM} "
            f"and {max_radius_km} km"
        )
    return None


def is_visible(entity: Content, viewer_id: Optional[str], enforce: bool = True) -> bool:
    if not enforce:
        return True
    return entity.is_visible_to(viewer_id)


def region_search_text(region: Region) -> List[Optional[str]]:
    return [region.name, region.description, region.short_description, *region.tags]


def place_search_text(place: Place) -> List[Optional[str]]:
    return [place.name, place.description, place.short_description, place.category.value, *place.tags]


def region_matches(region: Region, flt: RegionFilter) -> bool:
    if flt.status is not None and region.status != flt.status:
        return False
    if flt.created_by is not None and region.created_by != flt.created_by:
        return False
    if not matches_keyword(region_search_text(region), flt.keyword):
        return False
    if not matches_tags(region.tags, flt.tags):
        return False
    return within_radius(region.coordinates, flt.location)


def place_matches(place: Place, flt: PlaceFilter) -> bool:
    if flt.region_id is not None and place.region_id != flt.region_id:
        return False
    if flt.category is not None and place.category != flt.category:
        return False
    if flt.status is not None and place.status != flt.status:
        return False
    if flt.created_by is not None and place.created_by != flt.created_by:
        return False
    if flt.has_rating is not None and (place.average_rating is not None) != flt.has_rating:
        return False
    if flt.min_rating is not None and (place.average_rating is None or place.average_rating < flt.min_rating):
        return False
    if not matches_keyword(place_search_text(place), flt.keyword):
        return False
    if not matches_tags(place.tags, flt.tags):
        return False
    return within_radius(place.coordinates, flt.location)


def sort_validation_message(sort: Optional[SortSpec], allowed: Dict[str, str]) -> Optional[str]:
    if sort is None or sort.field in allowed:
        return None
    public = sorted(name for name in allowed if "_" not in name)
    return f"Unsupported sort field '{sort.field}'. Allowed: {', '.join(public)}"


def _sort_value(item: Any, attribute: str) -> Any:
    value = getattr(item, attribute)
    if isinstance(value, str):
        return value.lower()
    if hasattr(value, "value"):
        return value.value
    return value


def sort_items(items: List[T], sort: Optional[SortSpec], allowed: Dict[str, str]) -> List[T]:
    """
    Stable sort by an allowed field. Missing values always sort last.
    Callers validate the field with ``sort_validation_message`` first.
    """
    spec = sort or DEFAULT_SORT
    attribute = allowed.get(spec.field, spec.field)
    reverse = spec.direction == SortDirection.DESC

    present = [item for item in items if getattr(item, attribute) is not None]
    missing = [item for item in items if getattr(item, attribute) is None]
    present.sort(key=lambda item: _sort_value(item, attribute), reverse=reverse)
    return present + missing


def paginate(items: List[T], pagination: Pagination) -> Page[T]:
    """Slice a filtered list. Out-of-range pages yield an empty slice."""
    start = pagination.offset
    return Page(
        items=items[start:start + pagination.limit],
        total_count=len(items),
        page=pagination.page,
        limit=pagination.limit,
    )


def apply_region_query(regions: Iterable[Region], query: RegionQuery) -> Page[Region]:
    matched = [
        region for region in regions
        if is_visible(region, query.viewer_id, query.enforce_visibility)
        and region_matches(region, query.filter)
    ]
    return paginate(sort_items(matched, query.sort, REGION_SORT_FIELDS), query.pagination)


def apply_place_query(places: Iterable[Place], query: PlaceQuery) -> Page[Place]:
    matched = [
        place for place in places
        if is_visible(place, query.viewer_id, query.enforce_visibility)
        and place_matches(place, query.filter)
    ]
    return paginate(sort_items(matched, query.sort, PLACE_SORT_FIELDS), query.pagination)


def unique_names(items: Iterable[Content], limit: int) -> List[str]:
    """First ``limit`` distinct names, in input order."""
    seen: List[str] = []
    for item in items:
        if item.name not in seen:
            seen.append(item.name)
        if len(seen) >= limit:
            break
    return seen


def in_date_range(value: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True
