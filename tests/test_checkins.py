import pytest

from wayfarer.domain.models.common import CheckinStatus, UserStatus
from wayfarer.domain.result import ErrorCode

AT_THE_PLACE = {"latitude": 60.1675, "longitude": 24.9525}
ACROSS_TOWN = {"latitude": 60.1800, "longitude": 24.9525}


@pytest.fixture
async def place(make_region, make_place, editor):
    return await make_place(editor, await make_region(editor))


def _checkin(place_id, **fields):
    return {"place_id": place_id, "user_location": AT_THE_PLACE, **fields}


async def test_checkin_updates_place_counters(checkin_service, context, place, visitor):
    checkin = (await checkin_service.create_checkin(visitor.id, _checkin(
        place.id, comment="Lovely", rating=4, photos=[{"url": "http://files.test/a.jpg"}],
    ))).unwrap()

    stored = await context.places.find_by_id(place.id)
    assert checkin.status == CheckinStatus.ACTIVE
    assert checkin.photos == ["http://files.test/a.jpg"]
    assert stored.checkin_count == 1
    assert stored.average_rating == 4
    photos = (await checkin_service.get_checkin_photos(checkin.id)).unwrap()
    assert [photo.display_order for photo in photos] == [0]


async def test_checkin_requires_proximity(checkin_service, context, place, visitor):
    result = await checkin_service.create_checkin(visitor.id, {
        "place_id": place.id, "user_location": ACROSS_TOWN,
    })

    assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert result.unwrap_err().message.startswith("You must be within 500 meters")
    assert (await context.places.find_by_id(place.id)).checkin_count == 0


async def test_checkin_requires_published_place_and_active_user(checkin_service, make_region, make_place,
                                                                make_user, editor, visitor):
    draft = await make_place(editor, await make_region(editor, name="Other"), publish=False)
    suspended = await make_user(status=UserStatus.SUSPENDED)

    at_draft = await checkin_service.create_checkin(visitor.id, _checkin(draft.id))
    by_suspended = await checkin_service.create_checkin(suspended.id, _checkin(draft.id))
    missing = await checkin_service.create_checkin(visitor.id, _checkin("missing"))

    assert at_draft.unwrap_err().code == ErrorCode.NOT_FOUND
    assert by_suspended.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_second_checkin_within_a_day_conflicts(checkin_service, place, visitor):
    await checkin_service.create_checkin(visitor.id, _checkin(place.id))

    again = await checkin_service.create_checkin(visitor.id, _checkin(place.id))

    assert again.unwrap_err().code == ErrorCode.CONFLICT


async def test_average_rating_is_rounded(checkin_service, context, place, make_user):
    for rating in (5, 4, 4):
        user = await make_user()
        await checkin_service.create_checkin(user.id, _checkin(place.id, rating=rating))

    assert (await context.places.find_by_id(place.id)).average_rating == 4.33


async def test_update_checkin_refreshes_rating(checkin_service, context, place, visitor, make_user):
    checkin = (await checkin_service.create_checkin(visitor.id, _checkin(place.id, rating=2))).unwrap()

    denied = await checkin_service.update_checkin((await make_user()).id, checkin.id, {"rating": 5})
    updated = await checkin_service.update_checkin(visitor.id, checkin.id, {"rating": 5, "comment": "Better"})

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert updated.unwrap().comment == "Better"
    assert (await context.places.find_by_id(place.id)).average_rating == 5


async def test_delete_checkin_is_soft(checkin_service, context, place, visitor, make_user):
    other = await make_user()
    mine = (await checkin_service.create_checkin(visitor.id, _checkin(place.id, rating=1))).unwrap()
    await checkin_service.create_checkin(other.id, _checkin(place.id, rating=5))

    denied = await checkin_service.delete_checkin(other.id, mine.id)
    deleted = await checkin_service.delete_checkin(visitor.id, mine.id)
    again = await checkin_service.delete_checkin(visitor.id, mine.id)

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert deleted.unwrap() is True
    assert again.unwrap_err().code == ErrorCode.NOT_FOUND
    stored = await context.places.find_by_id(place.id)
    assert stored.checkin_count == 1
    assert stored.average_rating == 5
    assert (await context.checkins.find_by_id(mine.id)).status == CheckinStatus.DELETED


async def test_deleted_checkin_frees_the_daily_slot(checkin_service, place, visitor):
    first = (await checkin_service.create_checkin(visitor.id, _checkin(place.id))).unwrap()
    await checkin_service.delete_checkin(visitor.id, first.id)

    second = await checkin_service.create_checkin(visitor.id, _checkin(place.id))

    assert second.is_ok()


async def test_list_user_checkins_hides_deleted(checkin_service, make_region, make_place, editor, visitor):
    region = await make_region(editor)
    kept_place = await make_place(editor, region, name="Kept")
    gone_place = await make_place(editor, region, name="Gone")
    kept = (await checkin_service.create_checkin(visitor.id, _checkin(kept_place.id, rating=3))).unwrap()
    gone = (await checkin_service.create_checkin(visitor.id, _checkin(gone_place.id))).unwrap()
    await checkin_service.delete_checkin(visitor.id, gone.id)

    page = (await checkin_service.list_user_checkins(visitor.id)).unwrap()
    rated = (await checkin_service.list_user_checkins(visitor.id, {"has_rating": True})).unwrap()
    deleted = (await checkin_service.list_user_checkins(visitor.id, {"status": "deleted"})).unwrap()

    assert [c.id for c in page.items] == [kept.id]
    assert [c.id for c in rated.items] == [kept.id]
    assert [c.id for c in deleted.items] == [gone.id]


async def test_photos_continue_order_and_respect_limit(checkin_service, place, visitor):
    checkin = (await checkin_service.create_checkin(visitor.id, _checkin(
        place.id, photos=[{"url": f"http://files.test/{n}.jpg"} for n in range(3)],
    ))).unwrap()

    added = (await checkin_service.add_checkin_photos(visitor.id, checkin.id, {
        "photos": [{"url": "http://files.test/extra.jpg", "caption": "Terrace"}],
    })).unwrap()
    too_many = await checkin_service.add_checkin_photos(visitor.id, checkin.id, {
        "photos": [{"url": f"http://files.test/more{n}.jpg"} for n in range(7)],
    })

    assert [photo.display_order for photo in added] == [3]
    assert too_many.unwrap_err().message == "A check-in can have at most 10 photos"
    photos = (await checkin_service.get_checkin_photos(checkin.id)).unwrap()
    assert [photo.display_order for photo in photos] == [0, 1, 2, 3]
    assert photos[-1].caption == "Terrace"


async def test_private_checkin_photos_are_hidden_from_others(checkin_service, place, visitor, editor):
    checkin = (await checkin_service.create_checkin(visitor.id, _checkin(
        place.id, is_private=True, photos=[{"url": "http://files.test/secret.jpg"}],
    ))).unwrap()

    as_owner = await checkin_service.get_checkin_photos(checkin.id, visitor.id)
    as_other = await checkin_service.get_checkin_photos(checkin.id, editor.id)
    anonymous = await checkin_service.get_checkin_photos(checkin.id)

    assert len(as_owner.unwrap()) == 1
    assert as_other.unwrap_err().code == ErrorCode.NOT_FOUND
    assert anonymous.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_only_author_adds_photos(checkin_service, place, visitor, editor):
    checkin = (await checkin_service.create_checkin(visitor.id, _checkin(place.id))).unwrap()

    result = await checkin_service.add_checkin_photos(editor.id, checkin.id, {
        "photos": [{"url": "http://files.test/x.jpg"}],
    })

    assert result.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
