import pytest

from wayfarer.domain.result import ErrorCode


@pytest.fixture
async def place(make_region, make_place, editor):
    return await make_place(editor, await make_region(editor))


async def test_invite_creates_pending_permission_and_emails_invitee(permission_service, email_service,
                                                                    place, editor, other_editor):
    result = await permission_service.invite_editor(editor.id, place.id, {
        "email": other_editor.email.upper(),
        "can_edit": True,
        "can_delete": False,
    })

    permission = result.unwrap()
    assert permission.user_id == other_editor.id
    assert permission.invited_by == editor.id
    assert not permission.is_accepted()
    assert [mail.to for mail in email_service.sent] == [other_editor.email]
    assert email_service.sent[0].subject == "Eddie Editor invited you to edit Corner Cafe"
    assert permission.id in email_service.sent[0].body


async def test_invite_checks_in_order(permission_service, place, editor, other_editor, visitor):
    missing_inviter = await permission_service.invite_editor("ghost", place.id, {"email": visitor.email})
    missing_place = await permission_service.invite_editor(editor.id, "missing", {"email": visitor.email})
    not_editor = await permission_service.invite_editor(visitor.id, place.id, {"email": other_editor.email})
    unknown_email = await permission_service.invite_editor(editor.id, place.id, {"email": "nobody@example.com"})
    owner = await permission_service.invite_editor(editor.id, place.id, {"email": editor.email})

    assert missing_inviter.unwrap_err().code == ErrorCode.NOT_FOUND
    assert missing_place.unwrap_err().message == "Place 'missing' not found"
    assert not_editor.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert unknown_email.unwrap_err().message == "User with this email not found"
    assert owner.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert owner.unwrap_err().message == "Cannot invite the owner of the place"


async def test_invite_twice_conflicts(permission_service, place, editor, other_editor):
    await permission_service.invite_editor(editor.id, place.id, {"email": other_editor.email})

    again = await permission_service.invite_editor(editor.id, place.id, {"email": other_editor.email})

    assert again.unwrap_err().code == ErrorCode.CONFLICT


async def test_pending_invitation_grants_nothing(permission_service, place, editor, other_editor):
    permission = (await permission_service.invite_editor(
        editor.id, place.id, {"email": other_editor.email, "can_delete": True},
    )).unwrap()

    assert (await permission_service.check_edit_permission(place.id, other_editor.id)).unwrap() is False
    assert (await permission_service.get_shared_places(other_editor.id)).unwrap() == []

    await permission_service.accept_invitation(other_editor.id, permission.id)

    assert (await permission_service.check_edit_permission(place.id, other_editor.id)).unwrap() is True
    assert (await permission_service.check_delete_permission(place.id, other_editor.id)).unwrap() is True
    shared = (await permission_service.get_shared_places(other_editor.id)).unwrap()
    assert [view.place.id for view in shared] == [place.id]
    assert shared[0].has_edit_permission and shared[0].has_delete_permission


async def test_only_invitee_accepts(permission_service, place, editor, other_editor, visitor):
    permission = (await permission_service.invite_editor(
        editor.id, place.id, {"email": other_editor.email},
    )).unwrap()

    stolen = await permission_service.accept_invitation(visitor.id, permission.id)
    by_owner = await permission_service.accept_invitation(editor.id, permission.id)
    accepted = await permission_service.accept_invitation(other_editor.id, permission.id)
    missing = await permission_service.accept_invitation(other_editor.id, "missing")

    assert stolen.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert by_owner.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert accepted.unwrap().is_accepted()
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_accepted_editor_can_edit_but_not_delete(permission_service, place_service, place,
                                                       editor, other_editor):
    permission = (await permission_service.invite_editor(
        editor.id, place.id, {"email": other_editor.email},
    )).unwrap()
    await permission_service.accept_invitation(other_editor.id, permission.id)

    edited = await place_service.update_place(other_editor.id, place.id, {"description": "Great coffee"})
    deleted = await place_service.delete_place(other_editor.id, place.id)

    assert edited.unwrap().description == "Great coffee"
    assert deleted.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED


async def test_only_owner_updates_flags(permission_service, place, editor, other_editor):
    permission = (await permission_service.invite_editor(
        editor.id, place.id, {"email": other_editor.email},
    )).unwrap()
    await permission_service.accept_invitation(other_editor.id, permission.id)

    by_editor = await permission_service.update_editor_permission(
        other_editor.id, permission.id, {"can_delete": True},
    )
    by_owner = await permission_service.update_editor_permission(
        editor.id, permission.id, {"can_delete": True},
    )

    assert by_editor.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert by_owner.unwrap().can_delete is True
    assert by_owner.unwrap().can_edit is True


async def test_remove_permission_requires_delete_rights(permission_service, place, editor,
                                                        other_editor, visitor):
    permission = (await permission_service.invite_editor(
        editor.id, place.id, {"email": other_editor.email},
    )).unwrap()

    denied = await permission_service.remove_editor_permission(visitor.id, permission.id)
    removed = await permission_service.remove_editor_permission(editor.id, permission.id)

    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert removed.unwrap() is True
    assert (await permission_service.list_place_editors(editor.id, place.id)).unwrap() == []


async def test_list_place_editors_requires_edit_rights(permission_service, place, editor,
                                                       other_editor, visitor):
    await permission_service.invite_editor(editor.id, place.id, {"email": other_editor.email})

    editors = (await permission_service.list_place_editors(editor.id, place.id)).unwrap()
    denied = await permission_service.list_place_editors(visitor.id, place.id)

    assert [p.user_id for p in editors] == [other_editor.id]
    assert denied.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
