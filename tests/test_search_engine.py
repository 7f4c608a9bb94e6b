import pytest

from wayfarer.domain.models.common import ContentStatus, Coordinates, PlaceCategory, SortDirection
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
from wayfarer.domain.search.engine import (
    REGION_SORT_FIELDS,
    apply_place_query,
    apply_region_query,
    is_strict_keyword,
    matches_tags,
    normalize_keyword,
    paginate,
    radius_validation_message,
    sort_items,
    sort_validation_message,
    unique_names,
)
from wayfarer.domain.search.geo import haversine_km, haversine_m

HELSINKI = Coordinates(60.1699, 24.9384)
TALLINN = Coordinates(59.4370, 24.7536)


def _region(name, status=ContentStatus.PUBLISHED, created_by="owner", **fields):
    return Region(name=name, created_by=created_by, status=status, **fields)


def test_haversine_one_degree_on_equator():
    assert haversine_km(Coordinates(0, 0), Coordinates(0, 1)) == pytest.approx(111.195, abs=0.01)


def test_haversine_helsinki_to_tallinn():
    distance = haversine_km(HELSINKI, TALLINN)

    assert 80 < distance < 84
    assert haversine_m(HELSINKI, TALLINN) == pytest.approx(distance * 1000)
    assert haversine_km(HELSINKI, HELSINKI) == 0


def test_coordinates_reject_out_of_range_values():
    with pytest.raises(ValueError):
        Coordinates(91, 0)
    with pytest.raises(ValueError):
        Coordinates(0, -181)


@pytest.mark.parametrize("keyword, expected", [
    (None, None),
    ("", None),
    ("   ", None),
    ("*", None),
    (" * ", None),
    (" old town ", "old town"),
])
def test_normalize_keyword(keyword, expected):
    assert normalize_keyword(keyword) == expected
    assert is_strict_keyword(keyword) is (expected is not None)


def test_matches_tags_is_any_of_substring_and_case_insensitive():
    assert matches_tags(["Street-Food", "night"], ["food"])
    assert matches_tags(["history"], ["museum", "HIST"])
    assert not matches_tags(["history"], ["beach"])
    assert matches_tags([], [])


def test_visibility_hides_drafts_from_everyone_but_their_creator():
    published = _region("Published")
    draft = _region("Draft", status=ContentStatus.DRAFT, created_by="alice")
    archived = _region("Archived", status=ContentStatus.ARCHIVED, created_by="alice")
    regions = [published, draft, archived]

    anonymous = apply_region_query(regions, RegionQuery())
    as_alice = apply_region_query(regions, RegionQuery(viewer_id="alice"))
    as_bob = apply_region_query(regions, RegionQuery(viewer_id="bob"))
    moderation = apply_region_query(regions, RegionQuery(enforce_visibility=False))

    assert [r.name for r in anonymous.items] == ["Published"]
    assert {r.name for r in as_alice.items} == {"Published", "Draft"}
    assert [r.name for r in as_bob.items] == ["Published"]
    assert moderation.total_count == 3


def test_region_keyword_matches_name_description_and_tags():
    regions = [
        _region("Harbour", description="Fish market by the sea"),
        _region("Old Town", tags=["medieval"]),
        _region("Suburbs"),
    ]

    by_description = apply_region_query(regions, RegionQuery(filter=RegionFilter(keyword="MARKET")))
    by_tag = apply_region_query(regions, RegionQuery(filter=RegionFilter(keyword="mediev")))
    wildcard = apply_region_query(regions, RegionQuery(filter=RegionFilter(keyword="*")))

    assert [r.name for r in by_description.items] == ["Harbour"]
    assert [r.name for r in by_tag.items] == ["Old Town"]
    assert wildcard.total_count == 3


def test_location_filter_excludes_regions_without_coordinates():
    near = _region("Near", coordinates=HELSINKI)
    far = _region("Far", coordinates=TALLINN)
    nowhere = _region("Nowhere")
    query = RegionQuery(filter=RegionFilter(location=LocationFilter(HELSINKI, radius_km=10)))

    page = apply_region_query([near, far, nowhere], query)

    assert [r.name for r in page.items] == ["Near"]


def test_sort_is_case_insensitive_and_puts_missing_values_last():
    regions = [_region("beta"), _region("Alpha"), _region("gamma")]

    ascending = sort_items(regions, SortSpec("name", SortDirection.ASC), REGION_SORT_FIELDS)

    assert [r.name for r in ascending] == ["Alpha", "beta", "gamma"]

    places = [
        Place(name=name, category=PlaceCategory.CAFE, region_id="r", coordinates=HELSINKI,
              address="a", created_by="o", average_rating=rating)
        for name, rating in (("none", None), ("low", 2.0), ("high", 4.5))
    ]
    for direction in (SortDirection.ASC, SortDirection.DESC):
        ordered = sort_items(places, SortSpec("average_rating", direction), {"average_rating": "average_rating"})
        assert ordered[-1].name == "none"


def test_sort_validation_lists_public_names():
    assert sort_validation_message(SortSpec("visitCount"), REGION_SORT_FIELDS) is None
    assert sort_validation_message(None, REGION_SORT_FIELDS) is None

    message = sort_validation_message(SortSpec("password"), REGION_SORT_FIELDS)

    assert message.startswith("Unsupported sort field 'password'")
    assert "visitCount" in message
    assert "visit_count" not in message


def test_radius_validation_bounds():
    assert radius_validation_message(None, 50) is None
    assert radius_validation_message(LocationFilter(HELSINKI, 0.1), 50) is None
    assert radius_validation_message(LocationFilter(HELSINKI, 50), 50) is None
    assert radius_validation_message(LocationFilter(HELSINKI, 0.05), 50) is not None
    assert radius_validation_message(LocationFilter(HELSINKI, 51), 50) is not None


def test_paginate_reports_total_before_slicing():
    page = paginate(list(range(45)), Pagination(page=3, limit=20))

    assert page.items == list(range(40, 45))
    assert page.total_count == 45
    assert page.total_pages == 3
    assert not page.has_next_page

    beyond = paginate(list(range(5)), Pagination(page=4, limit=20))
    assert beyond.items == []
    assert beyond.total_count == 5


def test_pagination_validation():
    assert Pagination().validation_message() is None
    assert Pagination(page=0).validation_message() == "Page must be at least 1"
    assert Pagination(limit=0).validation_message() is not None
    assert Pagination(limit=101).validation_message() is not None
    assert Page(items=[], total_count=0).total_pages == 0


def test_place_query_filters_rating_and_category():
    def place(name, category, rating):
        return Place(name=name, category=category, region_id="r1", coordinates=HELSINKI,
                     address="a", created_by="o", status=ContentStatus.PUBLISHED, average_rating=rating)

    places = [
        place("Cafe A", PlaceCategory.CAFE, 4.5),
        place("Cafe B", PlaceCategory.CAFE, None),
        place("Museum", PlaceCategory.CULTURE, 3.0),
    ]

    rated = apply_place_query(places, PlaceQuery(filter=PlaceFilter(has_rating=True)))
    unrated = apply_place_query(places, PlaceQuery(filter=PlaceFilter(has_rating=False)))
    good_cafes = apply_place_query(places, PlaceQuery(
        filter=PlaceFilter(category=PlaceCategory.CAFE, min_rating=4.0),
    ))
    by_category_keyword = apply_place_query(places, PlaceQuery(filter=PlaceFilter(keyword="culture")))

    assert {p.name for p in rated.items} == {"Cafe A", "Museum"}
    assert [p.name for p in unrated.items] == ["Cafe B"]
    assert [p.name for p in good_cafes.items] == ["Cafe A"]
    assert [p.name for p in by_category_keyword.items] == ["Museum"]


def test_unique_names_keeps_first_occurrences_up_to_limit():
    regions = [_region("A"), _region("B"), _region("A"), _region("C")]

    assert unique_names(regions, 10) == ["A", "B", "C"]
    assert unique_names(regions, 2) == ["A", "B"]


@pytest.mark.parametrize("a, b", [
    (HELSINKI, TALLINN),
    (Coordinates(0, 179.5), Coordinates(0, -179.5)),
    (Coordinates(-33.8688, 151.2093), Coordinates(51.5074, -0.1278)),
    (Coordinates(89.9, 0), Coordinates(-89.9, 180)),
])
def test_haversine_is_symmetric(a, b):
    assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))


def test_smaller_radius_or_extra_keyword_never_adds_results():
    regions = [
        _region("Old Town", coordinates=HELSINKI, tags=["harbour"]),
        _region("Espoo Bay", coordinates=Coordinates(60.2055, 24.6559)),
        _region("Turku Harbour", coordinates=Coordinates(60.4518, 22.2666)),
        _region("Tallinn Old Town", coordinates=TALLINN),
        _region("Tampere", coordinates=Coordinates(61.4978, 23.7610)),
        _region("Nowhere"),
    ]
    radii = [500, 200, 100, 50, 10, 1]

    def count(keyword=None, radius=None):
        location = LocationFilter(HELSINKI, radius_km=radius) if radius is not None else None
        query = RegionQuery(filter=RegionFilter(keyword=keyword, location=location))
        return apply_region_query(regions, query).total_count

    for keyword in (None, "old", "harbour"):
        counts = [count(keyword, radius) for radius in radii]
        assert counts == sorted(counts, reverse=True)
        for radius in [None] + radii:
            assert count(keyword, radius) <= count(None, radius)
