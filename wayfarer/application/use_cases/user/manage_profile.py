"""
User Profile Use Cases
======================

Reading and editing the signed-in user's own profile and password.
"""
import logging

from wayfarer.application.authorization import require_active_user
from wayfarer.application.context import Context
from wayfarer.application.dto.user_dto import ChangePasswordRequest, UpdateProfileRequest
from wayfarer.domain.models.user import User
from wayfarer.domain.result import ErrorCode, Ok, Result, err, not_found

logger = logging.getLogger(__name__)


class GetUserProfileUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str) -> Result[User]:
        user = await self._context.users.find_by_id(user_id)
        if user is None:
            return not_found("User")
        return Ok(user)


class UpdateUserProfileUseCase:
    """
    Partial update of name, bio and avatar.

    Only fields present in the request change. An explicit null clears bio or
    avatar; the name can be changed but never cleared.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, request: UpdateProfileRequest) -> Result[User]:
        loaded = await require_active_user(self._context, user_id)
        if loaded.is_err():
            return loaded
        user = loaded.unwrap()

        changes = request.model_dump(exclude_unset=True)
        if "name" in changes and request.name is not None:
            user.name = request.name.strip()
        if "bio" in changes:
            user.bio = request.bio
        if "avatar" in changes:
            user.avatar = request.avatar

        updated = await self._context.users.update_profile(user)
        logger.info(f"Profile updated for user {user_id}")
        return Ok(updated)


class ChangeUserPasswordUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, request: ChangePasswordRequest) -> Result[bool]:
        loaded = await require_active_user(self._context, user_id)
        if loaded.is_err():
            return loaded
        user = loaded.unwrap()

        hasher = self._context.password_hasher
        if not hasher.verify(request.current_password, user.hashed_password):
            return err(ErrorCode.VALIDATION_ERROR, "Current password is incorrect")

        await self._context.users.update_password(user_id, hasher.hash(request.new_password))
        logger.info(f"Password changed for user {user_id}")
        return Ok(True)
