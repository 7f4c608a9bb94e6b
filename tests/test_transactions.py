import asyncio

from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import Region
from wayfarer.domain.result import ErrorCode, Ok, conflict


async def test_commit_on_ok(context):
    async def work(tx):
        return Ok(await tx.regions.create(Region(name="Committed", created_by="u1")))

    region = (await context.with_transaction(work)).unwrap()

    assert (await context.regions.find_by_id(region.id)).name == "Committed"


async def test_rollback_on_err(context):
    created = []

    async def work(tx):
        created.append(await tx.regions.create(Region(name="Rolled back", created_by="u1")))
        return conflict("changed my mind")

    result = await context.with_transaction(work)

    assert result.unwrap_err().code == ErrorCode.CONFLICT
    assert await context.regions.find_by_id(created[0].id) is None


async def test_exception_becomes_transaction_failed(context):
    created = []

    async def work(tx):
        created.append(await tx.regions.create(Region(name="Doomed", created_by="u1")))
        raise RuntimeError("disk on fire")

    result = await context.with_transaction(work)

    error = result.unwrap_err()
    assert error.code == ErrorCode.TRANSACTION_FAILED
    assert error.message == "Transaction failed"
    assert isinstance(error.cause, RuntimeError)
    assert await context.regions.find_by_id(created[0].id) is None


async def test_nested_transaction_rolls_back_with_outer(context):
    created = []

    async def inner(tx):
        created.append(await tx.regions.create(Region(name="Inner", created_by="u1")))
        return Ok(True)

    async def outer(tx):
        await tx.with_transaction(inner)
        return conflict("outer gives up")

    await context.with_transaction(outer)

    assert await context.regions.find_by_id(created[0].id) is None


async def test_failed_favorite_leaves_counter_untouched(favorite_service, context, make_region, editor, visitor):
    region = await make_region(editor)
    await favorite_service.add_region_favorite(visitor.id, region.id)

    await favorite_service.add_region_favorite(visitor.id, region.id)

    assert (await context.regions.find_by_id(region.id)).favorite_count == 1


async def _queued(store, *calls):
    """
    Start each call while the store is locked, one after the other.

    Every call does its reads before any of them writes; the writes then run
    in the order the calls were given.
    """
    tasks = []
    async with store.lock:
        for call in calls:
            tasks.append(asyncio.create_task(call()))
            for _ in range(5):
                await asyncio.sleep(0)
    return await asyncio.gather(*tasks)


async def test_place_edit_does_not_undo_a_concurrent_rejection(place_service, admin_service, context, store,
                                                               make_region, make_place, editor, admin):
    source = await make_region(editor, name="Source")
    target = await make_region(editor, name="Target")
    place = await make_place(editor, source)

    rejected, moved = await _queued(
        store,
        lambda: admin_service.admin_update_place_status(admin.id, place.id, {"status": "rejected"}),
        lambda: place_service.update_place(editor.id, place.id, {"region_id": target.id, "name": "Moved Cafe"}),
    )

    assert rejected.is_ok() and moved.is_ok()
    stored = await context.places.find_by_id(place.id)
    assert stored.status == ContentStatus.REJECTED
    assert stored.name == "Moved Cafe"
    assert stored.region_id == target.id


async def test_place_move_keeps_a_concurrent_favorite_count(place_service, favorite_service, context, store,
                                                            make_region, make_place, editor, visitor):
    source = await make_region(editor, name="Source")
    target = await make_region(editor, name="Target")
    place = await make_place(editor, source)

    await _queued(
        store,
        lambda: favorite_service.add_place_favorite(visitor.id, place.id),
        lambda: place_service.update_place(editor.id, place.id, {"region_id": target.id}),
    )

    stored = await context.places.find_by_id(place.id)
    assert stored.favorite_count == 1
    assert stored.region_id == target.id


async def test_region_edit_keeps_a_concurrent_favorite_count(region_service, favorite_service, context, store,
                                                             make_region, editor, visitor):
    region = await make_region(editor)

    await _queued(
        store,
        lambda: favorite_service.add_region_favorite(visitor.id, region.id),
        lambda: region_service.update_region(editor.id, region.id, {"name": "New Town"}),
    )

    stored = await context.regions.find_by_id(region.id)
    assert stored.favorite_count == 1
    assert stored.name == "New Town"
    assert stored.status == ContentStatus.PUBLISHED


async def test_move_into_a_region_deleted_meanwhile_is_not_found(place_service, region_service, context, store,
                                                                 make_region, make_place, editor):
    source = await make_region(editor, name="Source")
    target = await make_region(editor, name="Target")
    place = await make_place(editor, source)

    deleted, moved = await _queued(
        store,
        lambda: region_service.delete_region(editor.id, target.id),
        lambda: place_service.update_place(editor.id, place.id, {"region_id": target.id}),
    )

    assert deleted.unwrap() is True
    assert moved.unwrap_err().code == ErrorCode.NOT_FOUND
    assert moved.unwrap_err().message == f"Region '{target.id}' not found"
    assert (await context.places.find_by_id(place.id)).region_id == source.id
    assert (await context.regions.find_by_id(source.id)).place_count == 1


async def test_concurrent_favorites_keep_one_row(favorite_service, context, make_region, make_place,
                                                 editor, visitor):
    region = await make_region(editor)
    place = await make_place(editor, region)

    region_results = await asyncio.gather(
        favorite_service.add_region_favorite(visitor.id, region.id),
        favorite_service.add_region_favorite(visitor.id, region.id),
    )
    place_results = await asyncio.gather(
        favorite_service.add_place_favorite(visitor.id, place.id),
        favorite_service.add_place_favorite(visitor.id, place.id),
    )

    for results in (region_results, place_results):
        assert sum(result.is_ok() for result in results) == 1
        assert [result.unwrap_err().code for result in results if result.is_err()] == [ErrorCode.CONFLICT]
    assert (await context.regions.find_by_id(region.id)).favorite_count == 1
    assert (await context.places.find_by_id(place.id)).favorite_count == 1
