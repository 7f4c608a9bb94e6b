"""
Content Query Filters
=====================

Builds MongoDB filter documents for region and place queries. The rules match
``wayfarer.domain.search.engine``: keywords are case-insensitive substrings,
the wildcard means "no keyword", tags match any-of by substring and the
visibility rule hides drafts from everyone but their creator.
"""
import re
from typing import Any, Dict, List, Optional, Sequence

from wayfarer.domain.constants.fields import ContentFields, PlaceFields, RegionFields
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.queries import PlaceFilter, PlaceQuery, RegionFilter, RegionQuery
from wayfarer.domain.search.engine import normalize_keyword


def _contains(value: str) -> Dict[str, Any]:
    return {"$regex": re.escape(value), "$options": "i"}


def keyword_clause(keyword: Optional[str], fields: Sequence[str]) -> Optional[Dict[str, Any]]:
    needle = normalize_keyword(keyword)
    if needle is None:
        return None
    return {"$or": [{field: _contains(needle)} for field in fields]}


def tags_clause(tags: Sequence[str]) -> Optional[Dict[str, Any]]:
    if not tags:
        return None
    return {"$or": [{ContentFields.TAGS: _contains(tag)} for tag in tags]}


def visibility_clause(viewer_id: Optional[str]) -> Dict[str, Any]:
    visible: List[Dict[str, Any]] = [{ContentFields.STATUS: ContentStatus.PUBLISHED.value}]
    if viewer_id is not None:
        visible.append({ContentFields.STATUS: ContentStatus.DRAFT.value, ContentFields.CREATED_BY: viewer_id})
    return {"$or": visible}


def _combine(clauses: List[Optional[Dict[str, Any]]]) -> Dict[str, Any]:
    present = [clause for clause in clauses if clause]
    if not present:
        return {}
    if len(present) == 1:
        return present[0]
    return {"$and": present}


REGION_KEYWORD_FIELDS = (
    RegionFields.NAME,
    RegionFields.DESCRIPTION,
    RegionFields.SHORT_DESCRIPTION,
    RegionFields.TAGS,
)

PLACE_KEYWORD_FIELDS = (
    PlaceFields.NAME,
    PlaceFields.DESCRIPTION,
    PlaceFields.SHORT_DESCRIPTION,
    PlaceFields.CATEGORY,
    PlaceFields.TAGS,
)


def region_filter_document(query: RegionQuery) -> Dict[str, Any]:
    """Filter for everything in a region query except the location radius."""
    flt: RegionFilter = query.filter
    exact: Dict[str, Any] = {}
    if flt.status is not None:
        exact[RegionFields.STATUS] = flt.status.value
    if flt.created_by is not None:
        exact[RegionFields.CREATED_BY] = flt.created_by

    return _combine([
        exact,
        visibility_clause(query.viewer_id) if query.enforce_visibility else None,
        keyword_clause(flt.keyword, REGION_KEYWORD_FIELDS),
        tags_clause(flt.tags),
    ])


def place_filter_document(query: PlaceQuery) -> Dict[str, Any]:
    """Filter for everything in a place query except the location radius."""
    flt: PlaceFilter = query.filter
    exact: Dict[str, Any] = {}
    if flt.region_id is not None:
        exact[PlaceFields.REGION_ID] = flt.region_id
    if flt.category is not None:
        exact[PlaceFields.CATEGORY] = flt.category.value
    if flt.status is not None:
        exact[PlaceFields.STATUS] = flt.status.value
    if flt.created_by is not None:
        exact[PlaceFields.CREATED_BY] = flt.created_by

    rating: Dict[str, Any] = {}
    if flt.has_rating is True:
        rating["$ne"] = None
    elif flt.has_rating is False:
        rating["$eq"] = None
    if flt.min_rating is not None:
        rating["$gte"] = flt.min_rating
    if rating:
        exact[PlaceFields.AVERAGE_RATING] = rating

    return _combine([
        exact,
        visibility_clause(query.viewer_id) if query.enforce_visibility else None,
        keyword_clause(flt.keyword, PLACE_KEYWORD_FIELDS),
        tags_clause(flt.tags),
    ])
