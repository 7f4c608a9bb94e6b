from wayfarer.domain.models.common import ContentStatus, PlaceCategory
from wayfarer.domain.result import ErrorCode

OLD_TOWN = {"latitude": 60.1675, "longitude": 24.9525}


def _place_data(region_id, **fields):
    return {
        "name": "Corner Cafe",
        "category": "cafe",
        "region_id": region_id,
        "coordinates": OLD_TOWN,
        "address": "Senaatintori 1, Helsinki",
        **fields,
    }


async def test_create_place_counts_it_in_region(place_service, context, make_region, editor):
    region = await make_region(editor)

    place = (await place_service.create_place(editor.id, _place_data(region.id))).unwrap()

    assert place.status == ContentStatus.DRAFT
    assert place.category == PlaceCategory.CAFE
    assert (await context.regions.find_by_id(region.id)).place_count == 1


async def test_create_place_requires_author_and_region_owner(place_service, make_region, editor,
                                                             other_editor, visitor, admin):
    region = await make_region(editor)

    as_visitor = await place_service.create_place(visitor.id, _place_data(region.id))
    as_stranger = await place_service.create_place(other_editor.id, _place_data(region.id))
    as_admin = await place_service.create_place(admin.id, _place_data(region.id))
    no_region = await place_service.create_place(editor.id, _place_data("missing"))

    assert as_visitor.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert as_stranger.unwrap_err().message == "Only the region owner can add places to it"
    assert as_admin.is_ok()
    assert no_region.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_create_place_validates_input(place_service, make_region, editor):
    region = await make_region(editor)

    result = await place_service.create_place(editor.id, _place_data(region.id, category="spaceport"))

    assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR


async def test_moving_place_updates_both_region_counters(place_service, context, make_region,
                                                         make_place, editor):
    source = await make_region(editor, name="Source")
    target = await make_region(editor, name="Target")
    place = await make_place(editor, source)

    moved = await place_service.update_place(editor.id, place.id, {"region_id": target.id})

    assert moved.unwrap().region_id == target.id
    assert (await context.regions.find_by_id(source.id)).place_count == 0
    assert (await context.regions.find_by_id(target.id)).place_count == 1


async def test_moving_place_to_unknown_region_changes_nothing(place_service, context, make_region,
                                                              make_place, editor):
    region = await make_region(editor)
    place = await make_place(editor, region)

    result = await place_service.update_place(editor.id, place.id, {"region_id": "missing", "name": "Moved"})

    assert result.unwrap_err().code == ErrorCode.NOT_FOUND
    stored = await context.places.find_by_id(place.id)
    assert stored.name == "Corner Cafe"
    assert stored.region_id == region.id


async def test_update_place_requires_edit_permission(place_service, make_region, make_place,
                                                     editor, other_editor):
    place = await make_place(editor, await make_region(editor))

    denied = await place_service.update_place(other_editor.id, place.id, {"name": "Hijacked"})
    renamed = await place_service.update_place(editor.id, place.id, {"name": "  Corner Bistro "})

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert renamed.unwrap().name == "Corner Bistro"


async def test_delete_place_removes_permissions_and_counter(place_service, permission_service, context,
                                                            make_region, make_place, editor, other_editor):
    region = await make_region(editor)
    place = await make_place(editor, region)
    await permission_service.invite_editor(editor.id, place.id, {"email": other_editor.email})

    denied = await place_service.delete_place(other_editor.id, place.id)
    deleted = await place_service.delete_place(editor.id, place.id)

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert deleted.unwrap() is True
    assert await context.places.find_by_id(place.id) is None
    assert await context.place_permissions.find_by_place(place.id) == []
    assert (await context.regions.find_by_id(region.id)).place_count == 0


async def test_get_place_visibility_and_view(place_service, make_region, make_place, editor, visitor):
    region = await make_region(editor)
    draft = await make_place(editor, region, name="Secret", publish=False)
    public = await make_place(editor, region, name="Public")

    hidden = await place_service.get_place(draft.id, visitor.id)
    owner_view = (await place_service.get_place(draft.id, editor.id)).unwrap()
    visitor_view = (await place_service.get_place(public.id, visitor.id)).unwrap()

    assert hidden.unwrap_err().code == ErrorCode.NOT_FOUND
    assert owner_view.has_edit_permission and owner_view.has_delete_permission
    assert not visitor_view.has_edit_permission


async def test_publish_place_twice_is_invalid(place_service, make_region, make_place, editor, other_editor):
    place = await make_place(editor, await make_region(editor), publish=False)

    denied = await place_service.publish_place(other_editor.id, place.id)
    published = await place_service.publish_place(editor.id, place.id)
    again = await place_service.publish_place(editor.id, place.id)

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert published.unwrap().status == ContentStatus.PUBLISHED
    assert again.unwrap_err().code == ErrorCode.INVALID_TRANSITION


async def test_map_locations_only_published(place_service, make_region, make_place, editor):
    region = await make_region(editor)
    public = await make_place(editor, region, name="Public")
    await make_place(editor, region, name="Draft", publish=False)

    locations = (await place_service.get_map_locations(region.id)).unwrap()
    missing = await place_service.get_map_locations("missing")

    assert [location.id for location in locations] == [public.id]
    assert locations[0].coordinates.latitude == OLD_TOWN["latitude"]
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_search_places_by_keyword_and_radius(place_service, context, make_region, make_place, editor):
    region = await make_region(editor)
    cafe = await make_place(editor, region, name="Corner Cafe")
    await make_place(editor, region, name="Museum", category="culture")

    page = (await place_service.search_places({"keyword": "corner"})).unwrap()
    wildcard = await place_service.search_places({"keyword": "*"})
    too_wide = await place_service.search_places({
        "keyword": "corner", "location": {**OLD_TOWN, "radius_km": 60},
    })

    assert [p.id for p in page.items] == [cafe.id]
    assert (await context.places.find_by_id(cafe.id)).visit_count == 1
    assert wildcard.unwrap_err().message == "Search keyword is required"
    assert too_wide.unwrap_err().code == ErrorCode.VALIDATION_ERROR


async def test_advanced_place_search(place_service, make_region, make_place, editor):
    region = await make_region(editor)
    await make_place(editor, region, name="Corner Cafe")
    await make_place(editor, region, name="Museum", category="culture")

    empty = await place_service.advanced_search_places({})
    by_region = (await place_service.advanced_search_places({"region_id": region.id})).unwrap()
    by_category = (await place_service.advanced_search_places({"category": "culture"})).unwrap()
    unrated = (await place_service.advanced_search_places({"has_rating": False})).unwrap()

    assert empty.unwrap_err().message == "At least one search criteria must be provided"
    assert by_region.total_count == 2
    assert [p.name for p in by_category.items] == ["Museum"]
    assert unrated.total_count == 2


async def test_places_by_category(place_service, make_region, make_place, editor):
    region = await make_region(editor)
    await make_place(editor, region, name="Corner Cafe")
    await make_place(editor, region, name="Museum", category="culture")

    cafes = (await place_service.search_places_by_category(region.id, "cafe")).unwrap()
    invalid = await place_service.search_places_by_category(region.id, "spaceport")
    missing = await place_service.search_places_by_category("missing", PlaceCategory.CAFE)

    assert [p.name for p in cafes.items] == ["Corner Cafe"]
    assert invalid.unwrap_err().message == "Invalid category 'spaceport'"
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_place_suggestions_scoped_to_region(place_service, make_region, make_place, editor):
    first = await make_region(editor, name="First")
    second = await make_region(editor, name="Second")
    await make_place(editor, first, name="Corner Cafe")
    await make_place(editor, second, name="Corner Bakery")

    everywhere = (await place_service.get_place_suggestions("corner")).unwrap()
    in_first = (await place_service.get_place_suggestions("corner", first.id)).unwrap()

    assert sorted(everywhere) == ["Corner Bakery", "Corner Cafe"]
    assert in_first == ["Corner Cafe"]
    assert (await place_service.get_place_suggestions("c")).unwrap() == []


async def test_list_places_sort_validation(place_service, make_region, make_place, editor):
    region = await make_region(editor)
    await make_place(editor, region, name="b")
    await make_place(editor, region, name="A")

    ordered = await place_service.list_places({
        "region_id": region.id, "sort": {"field": "name", "direction": "asc"},
    })
    bad = await place_service.list_places({"sort": {"field": "rating"}})

    assert [p.name for p in ordered.unwrap().items] == ["A", "b"]
    assert bad.unwrap_err().code == ErrorCode.VALIDATION_ERROR


async def test_place_search_applies_and_validates_sort(place_service, make_region, make_place, editor):
    region = await make_region(editor)
    for name in ("Cafe Bravo", "Cafe Alpha", "Cafe Charlie"):
        await make_place(editor, region, name=name)

    ordered = (await place_service.search_places({
        "keyword": "cafe", "sort": {"field": "name", "direction": "asc"},
    })).unwrap()
    bogus = await place_service.search_places({"keyword": "cafe", "sort": {"field": "bogus"}})
    bogus_advanced = await place_service.advanced_search_places({"keyword": "cafe", "sort": {"field": "bogus"}})

    assert [p.name for p in ordered.items] == ["Cafe Alpha", "Cafe Bravo", "Cafe Charlie"]
    for result in (bogus, bogus_advanced):
        assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
        assert result.unwrap_err().message.startswith("Unsupported sort field 'bogus'")


async def test_places_by_region_hides_drafts_from_others(place_service, make_region, make_place, editor,
                                                          visitor):
    region = await make_region(editor)
    await make_place(editor, region, name="Open Cafe")
    await make_place(editor, region, name="Secret Cafe", publish=False)

    public = (await place_service.get_places_by_region(region.id, visitor.id)).unwrap()
    own = (await place_service.get_places_by_region(region.id, editor.id)).unwrap()
    missing = await place_service.get_places_by_region("missing")

    assert [view.place.name for view in public] == ["Open Cafe"]
    assert sorted(view.place.name for view in own) == ["Open Cafe", "Secret Cafe"]
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND
