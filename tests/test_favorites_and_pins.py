from wayfarer.domain.result import ErrorCode


async def test_favorite_region_updates_counter(favorite_service, context, make_region, editor, visitor):
    region = await make_region(editor)

    added = await favorite_service.add_region_favorite(visitor.id, region.id)
    duplicate = await favorite_service.add_region_favorite(visitor.id, region.id)

    assert added.unwrap().region_id == region.id
    assert duplicate.unwrap_err().code == ErrorCode.CONFLICT
    assert duplicate.unwrap_err().message == "Region is already in favorites"
    assert (await context.regions.find_by_id(region.id)).favorite_count == 1

    removed = await favorite_service.remove_region_favorite(visitor.id, region.id)
    again = await favorite_service.remove_region_favorite(visitor.id, region.id)

    assert removed.unwrap() is True
    assert again.unwrap_err().code == ErrorCode.NOT_FOUND
    assert again.unwrap_err().message == f"Region favorite '{region.id}' not found"
    assert (await context.regions.find_by_id(region.id)).favorite_count == 0


async def test_favorite_unknown_entities(favorite_service, visitor):
    region = await favorite_service.add_region_favorite(visitor.id, "missing")
    place = await favorite_service.add_place_favorite(visitor.id, "missing")

    assert region.unwrap_err().code == ErrorCode.NOT_FOUND
    assert place.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_favorite_place_updates_counter(favorite_service, context, make_region, make_place,
                                              editor, visitor):
    place = await make_place(editor, await make_region(editor))

    await favorite_service.add_place_favorite(visitor.id, place.id)
    duplicate = await favorite_service.add_place_favorite(visitor.id, place.id)

    assert duplicate.unwrap_err().message == "Place is already in favorites"
    assert (await context.places.find_by_id(place.id)).favorite_count == 1

    await favorite_service.remove_place_favorite(visitor.id, place.id)
    assert (await context.places.find_by_id(place.id)).favorite_count == 0


async def test_list_favorite_regions_limits(favorite_service, make_region, editor, visitor):
    first = await make_region(editor, name="First")
    second = await make_region(editor, name="Second")
    await favorite_service.add_region_favorite(visitor.id, first.id)
    await favorite_service.add_region_favorite(visitor.id, second.id)

    everything = (await favorite_service.list_favorite_regions(visitor.id)).unwrap()
    one = (await favorite_service.list_favorite_regions(visitor.id, 1)).unwrap()
    none = (await favorite_service.list_favorite_regions(visitor.id, 0)).unwrap()

    assert {view.region.id for view in everything} == {first.id, second.id}
    assert all(view.is_favorited for view in everything)
    assert len(one) == 1
    assert none == []


async def test_list_favorite_places(favorite_service, make_region, make_place, editor, visitor):
    place = await make_place(editor, await make_region(editor))
    await favorite_service.add_place_favorite(visitor.id, place.id)

    views = (await favorite_service.list_favorite_places(visitor.id)).unwrap()

    assert [view.place.id for view in views] == [place.id]
    assert views[0].is_favorited


async def test_pins_append_and_insert(pin_service, make_region, editor, visitor):
    a = await make_region(editor, name="A")
    b = await make_region(editor, name="B")
    c = await make_region(editor, name="C")

    await pin_service.pin_region(visitor.id, a.id)
    await pin_service.pin_region(visitor.id, b.id)
    inserted = await pin_service.pin_region(visitor.id, c.id, {"display_order": 0})

    assert inserted.unwrap().display_order == 0
    views = (await pin_service.list_pinned_regions(visitor.id)).unwrap()
    assert [view.region.name for view in views] == ["C", "A", "B"]
    assert [view.pin_display_order for view in views] == [0, 1, 2]


async def test_pin_position_is_clamped(pin_service, make_region, editor, visitor):
    a = await make_region(editor, name="A")
    b = await make_region(editor, name="B")

    await pin_service.pin_region(visitor.id, a.id)
    pin = (await pin_service.pin_region(visitor.id, b.id, {"display_order": 99})).unwrap()

    assert pin.display_order == 1


async def test_pin_errors(pin_service, make_region, editor, visitor):
    region = await make_region(editor)
    await pin_service.pin_region(visitor.id, region.id)

    negative = await pin_service.pin_region(visitor.id, region.id, {"display_order": -1})
    duplicate = await pin_service.pin_region(visitor.id, region.id)
    missing = await pin_service.pin_region(visitor.id, "missing")

    assert negative.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert duplicate.unwrap_err().code == ErrorCode.CONFLICT
    assert duplicate.unwrap_err().message == "Region is already pinned"
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_unpin_renumbers(pin_service, make_region, editor, visitor):
    regions = [await make_region(editor, name=name) for name in ("A", "B", "C")]
    for region in regions:
        await pin_service.pin_region(visitor.id, region.id)

    removed = await pin_service.unpin_region(visitor.id, regions[0].id)
    missing = await pin_service.unpin_region(visitor.id, regions[0].id)

    assert removed.unwrap() is True
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND
    views = (await pin_service.list_pinned_regions(visitor.id)).unwrap()
    assert [(view.region.name, view.pin_display_order) for view in views] == [("B", 0), ("C", 1)]


async def test_reorder_puts_listed_pins_first(pin_service, make_region, editor, visitor):
    a, b, c = [await make_region(editor, name=name) for name in ("A", "B", "C")]
    for region in (a, b, c):
        await pin_service.pin_region(visitor.id, region.id)

    pins = (await pin_service.reorder_pinned_regions(visitor.id, {"region_ids": [c.id]})).unwrap()

    assert [pin.region_id for pin in pins] == [c.id, a.id, b.id]
    assert [pin.display_order for pin in pins] == [0, 1, 2]


async def test_reorder_rejects_duplicates_and_unpinned(pin_service, make_region, editor, visitor):
    a = await make_region(editor, name="A")
    b = await make_region(editor, name="B")
    await pin_service.pin_region(visitor.id, a.id)

    duplicates = await pin_service.reorder_pinned_regions(visitor.id, {"region_ids": [a.id, a.id]})
    unpinned = await pin_service.reorder_pinned_regions(visitor.id, {"region_ids": [a.id, b.id]})

    assert duplicates.unwrap_err().message == "Region ids must not contain duplicates"
    assert unpinned.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_deleting_a_region_unpins_and_renumbers(pin_service, favorite_service, region_service, context,
                                                       make_region, editor, visitor):
    a = await make_region(editor, name="A")
    b = await make_region(editor, name="B")
    c = await make_region(editor, name="C")
    for region in (a, b, c):
        await pin_service.pin_region(visitor.id, region.id)
    await favorite_service.add_region_favorite(visitor.id, b.id)

    deleted = await region_service.delete_region(editor.id, b.id)

    assert deleted.unwrap() is True
    views = (await pin_service.list_pinned_regions(visitor.id)).unwrap()
    assert [view.region.name for view in views] == ["A", "C"]
    assert [view.pin_display_order for view in views] == [0, 1]
    assert await context.region_favorites.find_by_user_and_region(visitor.id, b.id) is None
    assert (await favorite_service.list_favorite_regions(visitor.id)).unwrap() == []


async def test_admin_region_delete_removes_favorites_and_pins(admin_service, favorite_service, pin_service,
                                                              context, make_region, editor, visitor, admin):
    region = await make_region(editor)
    await favorite_service.add_region_favorite(visitor.id, region.id)
    await pin_service.pin_region(visitor.id, region.id)

    (await admin_service.admin_delete_region(admin.id, region.id)).unwrap()

    assert await context.region_favorites.find_by_user_and_region(visitor.id, region.id) is None
    assert await context.region_pins.find_by_user(visitor.id) == []


async def test_deleting_a_place_removes_its_favorites(place_service, favorite_service, context, make_region,
                                                      make_place, editor, visitor):
    place = await make_place(editor, await make_region(editor))
    await favorite_service.add_place_favorite(visitor.id, place.id)

    (await place_service.delete_place(editor.id, place.id)).unwrap()

    assert await context.place_favorites.find_by_user_and_place(visitor.id, place.id) is None
    assert (await favorite_service.list_favorite_places(visitor.id)).unwrap() == []


async def test_appended_pin_follows_the_highest_position(pin_service, context, make_region, editor, visitor):
    a = await make_region(editor, name="A")
    b = await make_region(editor, name="B")
    c = await make_region(editor, name="C")
    await pin_service.pin_region(visitor.id, a.id)
    await pin_service.pin_region(visitor.id, b.id)
    await pin_service.reorder_pinned_regions(visitor.id, {"region_ids": [b.id, a.id]})

    appended = (await pin_service.pin_region(visitor.id, c.id)).unwrap()

    assert appended.display_order == 2
    assert await context.region_pins.get_max_display_order(visitor.id) == 2
