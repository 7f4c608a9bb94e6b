"""
User Account Use Cases
======================

Registration, sign-in with session tokens, current-user lookup, sign-out
and expired-session cleanup.
"""
import logging
import secrets
from datetime import timedelta
from typing import Tuple

from wayfarer.application.context import Context
from wayfarer.application.dto.user_dto import LoginRequest, RegisterUserRequest
from wayfarer.domain.models.user import User, UserSession
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import ErrorCode, Ok, Result, conflict, err, not_found, permission_required
from wayfarer.domain.services.email_service import EmailDeliveryError
from wayfarer.utils.datetime_utils import now

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class RegisterUserUseCase:
    """
    Use case for registering a new visitor account.

    The password is stored only as a hash. A welcome e-mail is sent after the
    account exists; a delivery failure does not undo the registration.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, request: RegisterUserRequest) -> Result[User]:
        email = request.email.strip().lower()
        if await self._context.users.find_by_email(email) is not None:
            return conflict("Email is already registered")

        user = User(
            email=email,
            hashed_password=self._context.password_hasher.hash(request.password),
            name=request.name.strip(),
            bio=request.bio,
            avatar=request.avatar,
        )
        try:
            created = await self._context.users.create(user)
        except RepositoryError as exc:
            if exc.code == ErrorCode.CONFLICT:
                return conflict(exc.message)
            raise

        try:
            await self._context.email_service.send_welcome_email(created.email, created.name)
        except EmailDeliveryError as exc:
            logger.warning(f"Welcome email for user {created.id} not sent: {exc}")

        logger.info(f"User registered: {created.id}")
        return Ok(created)


class AuthenticateUserUseCase:
    """Verify credentials and open a session."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, request: LoginRequest) -> Result[Tuple[UserSession, User]]:
        user = await self._context.users.find_by_email(request.email)
        if user is None or not self._context.password_hasher.verify(request.password, user.hashed_password):
            return err(ErrorCode.VALIDATION_ERROR, INVALID_CREDENTIALS)
        if not user.is_active():
            return permission_required("Account is not active")

        session = await self._context.sessions.create(UserSession(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            expires_at=now() + timedelta(hours=self._context.settings.session_expiry_hours),
        ))
        await self._context.users.update_last_login(user.id)
        user = await self._context.users.find_by_id(user.id) or user
        logger.info(f"User signed in: {user.id}")
        return Ok((session, user))


class GetCurrentUserUseCase:
    """Resolve the user behind a session token. Expired sessions are removed."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, token: str) -> Result[User]:
        session = await self._context.sessions.find_by_token(token)
        if session is None:
            return not_found("Session")
        if session.is_expired():
            await self._context.sessions.delete(token)
            return not_found("Session")

        user = await self._context.users.find_by_id(session.user_id)
        if user is None:
            return not_found("User", session.user_id)
        if not user.is_active():
            return permission_required("Account is not active")
        return Ok(user)


class SignOutUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, token: str) -> Result[bool]:
        await self._context.sessions.delete(token)
        return Ok(True)


class SignOutEverywhereUseCase:
    """Revoke every session of a user."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str) -> Result[int]:
        revoked = await self._context.sessions.delete_by_user(user_id)
        logger.info(f"Revoked {revoked} sessions of user {user_id}")
        return Ok(revoked)


class CleanupExpiredSessionsUseCase:
    """Maintenance task removing sessions past their expiry."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self) -> Result[int]:
        removed = await self._context.sessions.delete_expired(now())
        if removed:
            logger.info(f"Removed {removed} expired sessions")
        return Ok(removed)
