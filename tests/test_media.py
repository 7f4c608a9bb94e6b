from wayfarer.domain.constants.limits import MediaLimits
from wayfarer.domain.result import ErrorCode

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _files(count, content=PNG):
    return [
        {"content": content, "filename": f"photo-{index}.png", "content_type": "image/png"}
        for index in range(count)
    ]


def _stored(tmp_path, url):
    return tmp_path / url.removeprefix("http://files.test/")


async def test_upload_region_images_sets_cover_and_stores_files(region_service, make_region, editor, tmp_path):
    region = await make_region(editor)

    updated = (await region_service.upload_region_images(editor.id, region.id, {"files": _files(2)})).unwrap()

    assert len(updated.images) == 2
    assert updated.cover_image == updated.images[0]
    for url in updated.images:
        assert url.startswith(f"http://files.test/regions/{region.id}/")
        assert url.endswith(".png")
        assert _stored(tmp_path, url).read_bytes() == PNG


async def test_upload_keeps_existing_cover_unless_asked(region_service, make_region, editor):
    region = await make_region(editor)
    first = (await region_service.upload_region_images(editor.id, region.id, {"files": _files(1)})).unwrap()

    kept = (await region_service.upload_region_images(editor.id, region.id, {"files": _files(1)})).unwrap()
    forced = (await region_service.upload_region_images(editor.id, region.id, {
        "files": _files(1), "set_cover_image": True,
    })).unwrap()

    assert kept.cover_image == first.cover_image
    assert forced.cover_image == forced.images[-1]
    assert len(forced.images) == 3


async def test_upload_limits(region_service, context, make_region, editor, tmp_path):
    region = await make_region(editor)
    await region_service.upload_region_images(editor.id, region.id, {"files": _files(10)})
    await region_service.upload_region_images(editor.id, region.id, {"files": _files(10)})

    too_many = await region_service.upload_region_images(editor.id, region.id, {"files": _files(1)})
    too_big = await region_service.upload_region_images(editor.id, region.id, {
        "files": _files(1, content=b"\x00" * (MediaLimits.MAX_FILE_SIZE_BYTES + 1)),
    })
    per_request = await region_service.upload_region_images(editor.id, region.id, {"files": _files(11)})
    not_an_image = await region_service.upload_region_images(editor.id, region.id, {
        "files": [{"content": b"%PDF", "filename": "doc.pdf", "content_type": "application/pdf"}],
    })

    assert too_many.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert "Current count: 20" in too_many.unwrap_err().message
    assert too_big.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    for result in (per_request, not_an_image):
        assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert len((await context.regions.find_by_id(region.id)).images) == 20
    assert len(list((tmp_path / "regions" / region.id).iterdir())) == 20


async def test_only_owner_or_admin_manages_region_images(region_service, make_region, editor, other_editor, admin):
    region = await make_region(editor)

    stranger = await region_service.upload_region_images(other_editor.id, region.id, {"files": _files(1)})
    by_admin = await region_service.upload_region_images(admin.id, region.id, {"files": _files(1)})
    missing = await region_service.upload_region_images(editor.id, "no-such-region", {"files": _files(1)})

    assert stranger.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert stranger.unwrap_err().message == "Unauthorized to upload images to this region"
    assert len(by_admin.unwrap().images) == 1
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_delete_cover_image_falls_back_to_next(region_service, make_region, editor, tmp_path):
    region = await make_region(editor)
    uploaded = (await region_service.upload_region_images(editor.id, region.id, {"files": _files(2)})).unwrap()
    cover, second = uploaded.images

    updated = (await region_service.delete_region_image(editor.id, region.id, cover)).unwrap()
    again = await region_service.delete_region_image(editor.id, region.id, cover)

    assert updated.images == [second]
    assert updated.cover_image == second
    assert not _stored(tmp_path, cover).exists()
    assert _stored(tmp_path, second).exists()
    assert again.unwrap_err().code == ErrorCode.NOT_FOUND
    assert again.unwrap_err().message == "Image not found in region"


async def test_deleting_last_image_clears_cover(region_service, make_region, editor):
    region = await make_region(editor)
    uploaded = (await region_service.upload_region_images(editor.id, region.id, {"files": _files(1)})).unwrap()

    updated = (await region_service.delete_region_image(editor.id, region.id, uploaded.images[0])).unwrap()

    assert updated.images == []
    assert updated.cover_image is None


async def test_set_region_cover_image(region_service, make_region, editor):
    region = await make_region(editor)
    uploaded = (await region_service.upload_region_images(editor.id, region.id, {"files": _files(3)})).unwrap()

    updated = (await region_service.set_region_cover_image(editor.id, region.id, uploaded.images[2])).unwrap()
    unknown = await region_service.set_region_cover_image(editor.id, region.id, "http://elsewhere/x.png")

    assert updated.cover_image == uploaded.images[2]
    assert updated.images == uploaded.images
    assert unknown.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_image_upload_keeps_counters_and_status(region_service, favorite_service, context, make_region,
                                                      editor, visitor):
    region = await make_region(editor)
    await favorite_service.add_region_favorite(visitor.id, region.id)

    await region_service.upload_region_images(editor.id, region.id, {"files": _files(1)})

    stored = await context.regions.find_by_id(region.id)
    assert stored.favorite_count == 1
    assert stored.status == region.status


async def test_place_images_follow_edit_permission(place_service, make_region, make_place, editor, visitor,
                                                   tmp_path):
    region = await make_region(editor)
    place = await make_place(editor, region)

    uploaded = await place_service.upload_place_images(editor.id, place.id, {"files": _files(1)})
    denied = await place_service.upload_place_images(visitor.id, place.id, {"files": _files(1)})

    url = uploaded.unwrap().images[0]
    assert url.startswith(f"http://files.test/places/{place.id}/")
    assert uploaded.unwrap().cover_image == url
    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert denied.unwrap_err().message == "Unauthorized to upload images to this place"

    removed = (await place_service.delete_place_image(editor.id, place.id, url)).unwrap()
    assert removed.images == []
    assert not _stored(tmp_path, url).exists()


async def test_upload_checkin_photos(checkin_service, make_region, make_place, editor, visitor, tmp_path):
    place = await make_place(editor, await make_region(editor))
    checkin = (await checkin_service.create_checkin(visitor.id, {
        "place_id": place.id, "user_location": {"latitude": 60.1675, "longitude": 24.9525},
    })).unwrap()

    photos = (await checkin_service.upload_checkin_photos(visitor.id, checkin.id, {"files": _files(2)})).unwrap()
    stranger = await checkin_service.upload_checkin_photos(editor.id, checkin.id, {"files": _files(1)})
    too_many = await checkin_service.upload_checkin_photos(visitor.id, checkin.id, {"files": _files(9)})

    assert [photo.display_order for photo in photos] == [0, 1]
    for photo in photos:
        assert photo.url.startswith(f"http://files.test/checkins/{checkin.id}/")
        assert _stored(tmp_path, photo.url).read_bytes() == PNG
    assert stranger.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert too_many.unwrap_err().message == "A check-in can have at most 10 photos"
    assert len(list((tmp_path / "checkins" / checkin.id).iterdir())) == 2
