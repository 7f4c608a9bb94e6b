from datetime import datetime, timezone

from pymongo import ASCENDING, DESCENDING

from wayfarer.domain.models.common import CheckinStatus, ContentStatus, PlaceCategory, SortDirection
from wayfarer.domain.models.report import ReportStatus
from wayfarer.domain.queries import (
    CheckinFilter,
    PlaceFilter,
    PlaceQuery,
    RegionFilter,
    RegionQuery,
    ReportFilter,
    SortSpec,
)
from wayfarer.domain.search.engine import REGION_SORT_FIELDS
from wayfarer.infrastructure.db.base import clamped_increment, mongo_sort
from wayfarer.infrastructure.db.content_filters import (
    keyword_clause,
    place_filter_document,
    region_filter_document,
    visibility_clause,
)
from wayfarer.infrastructure.db.mongo_checkin_repository import checkin_filter_document
from wayfarer.infrastructure.db.mongo_report_repository import report_filter_document

PUBLISHED_ONLY = {"$or": [{"status": "published"}]}


def test_visibility_clause_adds_own_drafts_for_a_viewer():
    assert visibility_clause(None) == PUBLISHED_ONLY
    assert visibility_clause("alice") == {"$or": [
        {"status": "published"},
        {"status": "draft", "created_by": "alice"},
    ]}


def test_keyword_clause_escapes_and_ignores_wildcard():
    assert keyword_clause("*", ["name"]) is None
    assert keyword_clause("  ", ["name"]) is None
    assert keyword_clause(" a.b ", ["name", "tags"]) == {"$or": [
        {"name": {"$regex": r"a\.b", "$options": "i"}},
        {"tags": {"$regex": r"a\.b", "$options": "i"}},
    ]}


def test_anonymous_region_listing_is_just_visibility():
    assert region_filter_document(RegionQuery()) == PUBLISHED_ONLY


def test_moderation_listing_without_filters_matches_everything():
    assert region_filter_document(RegionQuery(enforce_visibility=False)) == {}


def test_region_filter_combines_clauses():
    query = RegionQuery(
        filter=RegionFilter(status=ContentStatus.PUBLISHED, keyword="old", tags=["hist"]),
        viewer_id="alice",
    )

    document = region_filter_document(query)

    clauses = document["$and"]
    assert clauses[0] == {"status": "published"}
    assert clauses[1] == visibility_clause("alice")
    assert {"name": {"$regex": "old", "$options": "i"}} in clauses[2]["$or"]
    assert clauses[3] == {"$or": [{"tags": {"$regex": "hist", "$options": "i"}}]}


def test_place_filter_rating_and_exact_fields():
    query = PlaceQuery(
        filter=PlaceFilter(region_id="r1", category=PlaceCategory.CAFE, has_rating=True, min_rating=4.0),
        enforce_visibility=False,
    )

    assert place_filter_document(query) == {
        "region_id": "r1",
        "category": "cafe",
        "average_rating": {"$ne": None, "$gte": 4.0},
    }


def test_place_filter_unrated():
    query = PlaceQuery(filter=PlaceFilter(has_rating=False), enforce_visibility=False)

    assert place_filter_document(query) == {"average_rating": {"$eq": None}}


def test_checkin_filter_hides_deleted_by_default():
    assert checkin_filter_document(CheckinFilter(user_id="u1")) == {
        "user_id": "u1",
        "status": {"$ne": "deleted"},
    }
    assert checkin_filter_document(CheckinFilter(include_deleted=True)) == {}
    assert checkin_filter_document(CheckinFilter(status=CheckinStatus.DELETED)) == {"status": "deleted"}


def test_checkin_filter_rating_presence():
    rated = checkin_filter_document(CheckinFilter(has_rating=True, include_deleted=True))
    unrated = checkin_filter_document(CheckinFilter(has_rating=False, include_deleted=True))

    assert rated == {"rating": {"$ne": None}}
    assert unrated == {"rating": None}


def test_report_filter_date_range():
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    end = datetime(2026, 2, 1, tzinfo=timezone.utc)

    document = report_filter_document(ReportFilter(
        status=ReportStatus.PENDING, entity_id="p1", created_from=start, created_to=end,
    ))

    assert document == {
        "status": "pending",
        "entity_id": "p1",
        "created_at": {"$gte": start, "$lte": end},
    }


def test_mongo_sort_maps_public_names_and_breaks_ties_on_id():
    assert mongo_sort(SortSpec("visitCount", SortDirection.ASC), REGION_SORT_FIELDS) == [
        ("visit_count", ASCENDING), ("_id", ASCENDING),
    ]
    assert mongo_sort(None, REGION_SORT_FIELDS) == [("created_at", DESCENDING), ("_id", DESCENDING)]


def test_clamped_increment_pipeline():
    assert clamped_increment("place_count", -1) == [
        {"$set": {"place_count": {"$max": [0, {"$add": [{"$ifNull": ["$place_count", 0]}, -1]}]}}},
    ]
