from wayfarer.domain.models.common import ContentStatus, UserRole, UserStatus
from wayfarer.domain.result import ErrorCode


async def test_editor_creates_draft_region(region_service, editor):
    result = await region_service.create_region(editor.id, {
        "name": "  Old Town  ",
        "tags": ["history", "walking"],
        "coordinates": {"latitude": 60.1675, "longitude": 24.9525},
    })

    region = result.unwrap()
    assert region.name == "Old Town"
    assert region.status == ContentStatus.DRAFT
    assert region.created_by == editor.id
    assert region.place_count == 0


async def test_visitor_cannot_create_region(region_service, visitor):
    result = await region_service.create_region(visitor.id, {"name": "Nope"})

    error = result.unwrap_err()
    assert error.code == ErrorCode.PERMISSION_REQUIRED
    assert error.message == "Editor or admin role required"


async def test_unknown_or_inactive_actor_cannot_create_region(region_service, make_user):
    suspended = await make_user(UserRole.EDITOR, status=UserStatus.SUSPENDED)

    missing = await region_service.create_region("ghost", {"name": "Nope"})
    inactive = await region_service.create_region(suspended.id, {"name": "Nope"})

    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND
    assert missing.unwrap_err().message == "Acting user not found"
    assert inactive.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED


async def test_invalid_region_input_is_validation_error(region_service, editor):
    result = await region_service.create_region(editor.id, {"name": ""})

    error = result.unwrap_err()
    assert error.code == ErrorCode.VALIDATION_ERROR
    assert error.message.startswith("name:")


async def test_only_owner_updates_region(region_service, make_region, editor, other_editor):
    region = await make_region(editor)

    denied = await region_service.update_region(other_editor.id, region.id, {"name": "Mine now"})
    updated = await region_service.update_region(editor.id, region.id, {"description": "Cobbled streets"})

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert updated.unwrap().description == "Cobbled streets"
    assert updated.unwrap().name == "Old Town"


async def test_draft_is_visible_to_creator_only(region_service, make_region, editor, visitor):
    draft = await make_region(editor, publish=False)

    as_owner = await region_service.get_region(draft.id, editor.id)
    as_visitor = await region_service.get_region(draft.id, visitor.id)
    anonymous = await region_service.get_region(draft.id)

    assert as_owner.unwrap().region.id == draft.id
    assert as_visitor.unwrap_err().code == ErrorCode.NOT_FOUND
    assert anonymous.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_get_region_annotates_favorite_and_pin(region_service, favorite_service, pin_service,
                                                     make_region, editor, visitor):
    region = await make_region(editor)
    await favorite_service.add_region_favorite(visitor.id, region.id)
    await pin_service.pin_region(visitor.id, region.id)

    view = (await region_service.get_region(region.id, visitor.id)).unwrap()
    anonymous = (await region_service.get_region(region.id)).unwrap()

    assert view.is_favorited and view.is_pinned
    assert view.pin_display_order == 0
    assert not anonymous.is_favorited and not anonymous.is_pinned


async def test_publish_rules(region_service, make_region, editor, other_editor, admin):
    own = await make_region(editor, publish=False)
    other = await make_region(editor, name="Harbour", publish=False)

    denied = await region_service.publish_region(other_editor.id, own.id)
    published = await region_service.publish_region(editor.id, own.id)
    again = await region_service.publish_region(editor.id, own.id)
    by_admin = await region_service.publish_region(admin.id, other.id)

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert published.unwrap().status == ContentStatus.PUBLISHED
    assert again.unwrap_err().code == ErrorCode.INVALID_TRANSITION
    assert by_admin.unwrap().status == ContentStatus.PUBLISHED


async def test_delete_region_requires_owner_and_no_places(region_service, place_service, make_region,
                                                          make_place, editor, other_editor):
    region = await make_region(editor)
    place = await make_place(editor, region)

    denied = await region_service.delete_region(other_editor.id, region.id)
    blocked = await region_service.delete_region(editor.id, region.id)
    await place_service.delete_place(editor.id, place.id)
    deleted = await region_service.delete_region(editor.id, region.id)
    missing = await region_service.delete_region(editor.id, region.id)

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert blocked.unwrap_err().code == ErrorCode.CONFLICT
    assert blocked.unwrap_err().message == "Region still contains places"
    assert deleted.unwrap() is True
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_strict_search_rejects_blank_and_wildcard(region_service):
    for keyword in ("", "   ", "*"):
        result = await region_service.search_regions({"keyword": keyword})
        assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
        assert result.unwrap_err().message == "Search keyword is required"


async def test_search_returns_matches_and_records_visits(region_service, context, make_region, editor):
    old_town = await make_region(editor, name="Old Town", description="Medieval lanes")
    await make_region(editor, name="Harbour")
    await make_region(editor, name="Old Draft", publish=False)

    page = (await region_service.search_regions({"keyword": "old"})).unwrap()

    assert [r.name for r in page.items] == ["Old Town"]
    assert page.items[0].visit_count == 0
    assert (await context.regions.find_by_id(old_town.id)).visit_count == 1


async def test_search_with_radius_limits(region_service, make_region, editor):
    await make_region(editor, name="Old Town")

    too_wide = await region_service.search_regions({
        "keyword": "old", "location": {"latitude": 60.17, "longitude": 24.95, "radius_km": 150},
    })
    nearby = await region_service.search_regions({
        "keyword": "old", "location": {"latitude": 60.17, "longitude": 24.95, "radius_km": 5},
    })

    assert too_wide.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert nearby.unwrap().total_count == 1


async def test_advanced_search_needs_a_criterion(region_service, make_region, editor):
    await make_region(editor, name="Old Town", tags=["history"])
    await make_region(editor, name="Beach", tags=["sea"])

    empty = await region_service.advanced_search_regions({})
    by_tag = await region_service.advanced_search_regions({"tags": ["HIST"]})
    everything = await region_service.advanced_search_regions({"keyword": "*"})

    assert empty.unwrap_err().message == "At least one search criteria must be provided"
    assert [r.name for r in by_tag.unwrap().items] == ["Old Town"]
    assert everything.unwrap().total_count == 2


async def test_list_regions_filters_sorts_and_validates(region_service, make_region, editor, other_editor):
    await make_region(editor, name="beta")
    await make_region(editor, name="Alpha")
    await make_region(other_editor, name="Gamma")

    mine = await region_service.list_regions({
        "created_by": editor.id,
        "sort": {"field": "name", "direction": "asc"},
    })
    bad_sort = await region_service.list_regions({"sort": {"field": "secret"}})
    bad_page = await region_service.list_regions({"pagination": {"page": 0}})

    assert [r.name for r in mine.unwrap().items] == ["Alpha", "beta"]
    assert bad_sort.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert bad_page.unwrap_err().code == ErrorCode.VALIDATION_ERROR


async def test_suggestions(region_service, make_region, editor):
    await make_region(editor, name="Old Town")
    await make_region(editor, name="Old Harbour")
    await make_region(editor, name="Old Town")
    await make_region(editor, name="Old Mill", publish=False)

    short = await region_service.get_region_suggestions("o")
    wildcard = await region_service.get_region_suggestions("*")
    names = (await region_service.get_region_suggestions("old")).unwrap()

    assert short.unwrap() == []
    assert wildcard.unwrap() == []
    assert sorted(names) == ["Old Harbour", "Old Town"]


async def test_featured_regions(region_service, context, make_region, editor):
    quiet = await make_region(editor, name="Quiet")
    busy = await make_region(editor, name="Busy")
    await make_region(editor, name="Hidden", publish=False)
    for _ in range(3):
        await context.regions.increment_visit_count(busy.id)

    featured = (await region_service.get_featured_regions(5)).unwrap()

    assert [r.id for r in featured] == [busy.id, quiet.id]
    assert (await region_service.get_featured_regions(0)).unwrap() == []


async def test_regions_by_creator_respect_visibility(region_service, make_region, editor, visitor):
    await make_region(editor, name="Public")
    await make_region(editor, name="Private draft", publish=False)

    own = (await region_service.get_regions_by_creator(editor.id, editor.id)).unwrap()
    others = (await region_service.get_regions_by_creator(editor.id, visitor.id)).unwrap()

    assert {r.name for r in own} == {"Public", "Private draft"}
    assert [r.name for r in others] == ["Public"]


async def test_search_applies_and_validates_sort(region_service, make_region, editor):
    await make_region(editor, name="Old Harbour")
    await make_region(editor, name="Old Town")
    await make_region(editor, name="Old Mill")

    by_name = (await region_service.search_regions({
        "keyword": "old", "sort": {"field": "name", "direction": "asc"},
    })).unwrap()
    advanced = (await region_service.advanced_search_regions({
        "keyword": "old", "sort": {"field": "name", "direction": "desc"},
    })).unwrap()
    bogus = await region_service.search_regions({"keyword": "old", "sort": {"field": "bogus"}})
    bogus_advanced = await region_service.advanced_search_regions({"keyword": "old", "sort": {"field": "bogus"}})

    assert [r.name for r in by_name.items] == ["Old Harbour", "Old Mill", "Old Town"]
    assert [r.name for r in advanced.items] == ["Old Town", "Old Mill", "Old Harbour"]
    for result in (bogus, bogus_advanced):
        assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
        assert result.unwrap_err().message.startswith("Unsupported sort field 'bogus'")
