from datetime import timedelta

from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import PasswordResetToken, UserSession
from wayfarer.domain.result import ErrorCode
from wayfarer.utils.datetime_utils import now

PASSWORD = "correct-horse-battery"


async def _register(user_service, email="Traveller@Example.com", name="  Tove Traveller "):
    return await user_service.register_user({"email": email, "password": PASSWORD, "name": name})


async def test_register_user(user_service, context, email_service):
    user = (await _register(user_service)).unwrap()

    assert user.email == "traveller@example.com"
    assert user.name == "Tove Traveller"
    assert user.role == UserRole.VISITOR
    assert user.status == UserStatus.ACTIVE
    assert user.hashed_password != PASSWORD
    assert context.password_hasher.verify(PASSWORD, user.hashed_password)
    assert [(mail.to, mail.subject) for mail in email_service.sent] == [
        ("traveller@example.com", "Welcome to Wayfarer"),
    ]


async def test_register_rejects_duplicates_and_short_passwords(user_service):
    await _register(user_service)

    duplicate = await _register(user_service, email="TRAVELLER@example.com")
    weak = await user_service.register_user({"email": "new@example.com", "password": "short", "name": "New"})

    assert duplicate.unwrap_err().code == ErrorCode.CONFLICT
    assert duplicate.unwrap_err().message == "Email is already registered"
    assert weak.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert weak.unwrap_err().message.startswith("password:")


async def test_authenticate_opens_session(user_service, context):
    registered = (await _register(user_service)).unwrap()

    session, user = (await user_service.authenticate_user({
        "email": "traveller@example.com", "password": PASSWORD,
    })).unwrap()

    assert session.user_id == registered.id
    assert session.expires_at > now() + timedelta(hours=167)
    assert user.last_login_at is not None
    assert await context.sessions.find_by_token(session.token) is not None


async def test_authenticate_rejects_bad_credentials(user_service):
    await _register(user_service)

    wrong_password = await user_service.authenticate_user({
        "email": "traveller@example.com", "password": "not-the-password",
    })
    unknown = await user_service.authenticate_user({"email": "ghost@example.com", "password": PASSWORD})

    for result in (wrong_password, unknown):
        assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
        assert result.unwrap_err().message == "Invalid email or password"


async def test_inactive_user_cannot_sign_in(user_service, make_user):
    user = await make_user(status=UserStatus.SUSPENDED, email="sleepy@example.com")

    result = await user_service.authenticate_user({"email": user.email, "password": PASSWORD})

    assert result.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED


async def test_current_user_and_sign_out(user_service):
    registered = (await _register(user_service)).unwrap()
    session, _ = (await user_service.authenticate_user({
        "email": registered.email, "password": PASSWORD,
    })).unwrap()

    current = await user_service.get_current_user(session.token)
    signed_out = await user_service.sign_out(session.token)
    after = await user_service.get_current_user(session.token)

    assert current.unwrap().id == registered.id
    assert signed_out.unwrap() is True
    assert after.unwrap_err().message == "Session not found"


async def test_expired_session_is_removed(user_service, context, visitor):
    await context.sessions.create(UserSession(
        user_id=visitor.id, token="stale-token", expires_at=now() - timedelta(minutes=1),
    ))

    result = await user_service.get_current_user("stale-token")

    assert result.unwrap_err().code == ErrorCode.NOT_FOUND
    assert await context.sessions.find_by_token("stale-token") is None


async def test_unknown_token(user_service):
    result = await user_service.get_current_user("nope")

    assert result.unwrap_err().code == ErrorCode.NOT_FOUND


def _reset_token(email_service):
    body = email_service.sent[-1].body
    return body.split("token=")[1].split()[0]


async def _sign_in(user_service, email, password=PASSWORD):
    session, _ = (await user_service.authenticate_user({"email": email, "password": password})).unwrap()
    return session


async def test_sign_out_everywhere(user_service, visitor):
    first = await _sign_in(user_service, visitor.email)
    second = await _sign_in(user_service, visitor.email)

    revoked = await user_service.sign_out_everywhere(visitor.id)

    assert revoked.unwrap() == 2
    for session in (first, second):
        assert (await user_service.get_current_user(session.token)).unwrap_err().code == ErrorCode.NOT_FOUND


async def test_cleanup_expired_sessions(user_service, context, visitor):
    live = await _sign_in(user_service, visitor.email)
    for token in ("old-1", "old-2"):
        await context.sessions.create(UserSession(
            user_id=visitor.id, token=token, expires_at=now() - timedelta(hours=1),
        ))

    removed = await user_service.cleanup_expired_sessions()

    assert removed.unwrap() == 2
    assert await context.sessions.find_by_token("old-1") is None
    assert await context.sessions.find_by_token(live.token) is not None


async def test_get_user_profile(user_service, visitor):
    found = await user_service.get_user_profile(visitor.id)
    missing = await user_service.get_user_profile("no-such-user")

    assert found.unwrap().name == "Vera Visitor"
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND
    assert missing.unwrap_err().message == "User not found"


async def test_update_user_profile_changes_only_given_fields(user_service, context, visitor):
    await user_service.update_user_profile(visitor.id, {"bio": "Slow traveller", "avatar": "http://img/v.png"})

    updated = (await user_service.update_user_profile(visitor.id, {"name": "  Vera V. ", "avatar": None})).unwrap()

    assert updated.name == "Vera V."
    assert updated.bio == "Slow traveller"
    assert updated.avatar is None
    stored = await context.users.find_by_id(visitor.id)
    assert stored.role == UserRole.VISITOR
    assert context.password_hasher.verify(PASSWORD, stored.hashed_password)


async def test_update_user_profile_validates_input(user_service, visitor, make_user):
    suspended = await make_user(status=UserStatus.SUSPENDED)

    long_bio = await user_service.update_user_profile(visitor.id, {"bio": "x" * 501})
    empty_name = await user_service.update_user_profile(visitor.id, {"name": ""})
    inactive = await user_service.update_user_profile(suspended.id, {"bio": "hi"})

    assert long_bio.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert empty_name.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert inactive.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED


async def test_change_user_password(user_service, visitor):
    wrong = await user_service.change_user_password(visitor.id, {
        "current_password": "not-it", "new_password": "a-brand-new-secret",
    })
    changed = await user_service.change_user_password(visitor.id, {
        "current_password": PASSWORD, "new_password": "a-brand-new-secret",
    })

    assert wrong.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert wrong.unwrap_err().message == "Current password is incorrect"
    assert changed.unwrap() is True
    old = await user_service.authenticate_user({"email": visitor.email, "password": PASSWORD})
    assert old.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert (await user_service.authenticate_user({
        "email": visitor.email, "password": "a-brand-new-secret",
    })).is_ok()


async def test_password_reset_for_unknown_email_is_silent(user_service, email_service):
    result = await user_service.request_password_reset({"email": "ghost@example.com"})

    assert result.unwrap() is True
    assert email_service.sent == []


async def test_password_reset_flow(user_service, context, email_service, visitor):
    session = await _sign_in(user_service, visitor.email)

    requested = await user_service.request_password_reset({"email": visitor.email.upper()})
    token = _reset_token(email_service)
    reset = await user_service.reset_password({"token": token, "new_password": "fresh-password-1"})

    assert requested.unwrap() is True
    assert email_service.sent[-1].to == visitor.email
    assert reset.unwrap() is True
    assert (await context.password_reset_tokens.find_by_token(token)).is_used()
    assert (await user_service.get_current_user(session.token)).unwrap_err().code == ErrorCode.NOT_FOUND
    assert (await user_service.authenticate_user({
        "email": visitor.email, "password": "fresh-password-1",
    })).is_ok()


async def test_reset_token_is_single_use(user_service, email_service, visitor):
    await user_service.request_password_reset({"email": visitor.email})
    token = _reset_token(email_service)

    first = await user_service.reset_password({"token": token, "new_password": "fresh-password-1"})
    second = await user_service.reset_password({"token": token, "new_password": "fresh-password-2"})

    assert first.is_ok()
    assert second.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert second.unwrap_err().message == "Reset token has already been used"


async def test_reset_password_rejects_unknown_and_expired_tokens(user_service, context, visitor):
    await context.password_reset_tokens.create(PasswordResetToken(
        user_id=visitor.id, token="stale", expires_at=now() - timedelta(minutes=5),
    ))

    unknown = await user_service.reset_password({"token": "nope", "new_password": "fresh-password-1"})
    expired = await user_service.reset_password({"token": "stale", "new_password": "fresh-password-1"})
    short = await user_service.reset_password({"token": "stale", "new_password": "short"})

    assert unknown.unwrap_err().message == "Invalid or expired reset token"
    assert expired.unwrap_err().message == "Reset token has expired"
    assert short.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert context.password_hasher.verify(PASSWORD, (await context.users.find_by_id(visitor.id)).hashed_password)
