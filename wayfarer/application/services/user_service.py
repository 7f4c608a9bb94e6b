"""
User Service
============

Application service for registration, sessions, profiles and password
recovery.
"""
from typing import Tuple

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.user_dto import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordResetRequest,
    RegisterUserRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
)
from wayfarer.application.use_cases.user.manage_account import (
    AuthenticateUserUseCase,
    CleanupExpiredSessionsUseCase,
    GetCurrentUserUseCase,
    RegisterUserUseCase,
    SignOutEverywhereUseCase,
    SignOutUseCase,
)
from wayfarer.application.use_cases.user.manage_profile import (
    ChangeUserPasswordUseCase,
    GetUserProfileUseCase,
    UpdateUserProfileUseCase,
)
from wayfarer.application.use_cases.user.password_reset import RequestPasswordResetUseCase, ResetPasswordUseCase
from wayfarer.domain.models.user import User, UserSession
from wayfarer.domain.result import ErrorCode, Result


class UserService:
    """Application service for user accounts."""

    def __init__(self, context: Context):
        self._register_use_case = RegisterUserUseCase(context)
        self._authenticate_use_case = AuthenticateUserUseCase(context)
        self._current_user_use_case = GetCurrentUserUseCase(context)
        self._sign_out_use_case = SignOutUseCase(context)
        self._sign_out_everywhere_use_case = SignOutEverywhereUseCase(context)
        self._cleanup_sessions_use_case = CleanupExpiredSessionsUseCase(context)
        self._get_profile_use_case = GetUserProfileUseCase(context)
        self._update_profile_use_case = UpdateUserProfileUseCase(context)
        self._change_password_use_case = ChangeUserPasswordUseCase(context)
        self._request_reset_use_case = RequestPasswordResetUseCase(context)
        self._reset_password_use_case = ResetPasswordUseCase(context)

    @service_boundary("register user", ErrorCode.QUERY_FAILED)
    async def register_user(self, data: Input) -> Result[User]:
        return await self._register_use_case.execute(parse_input(RegisterUserRequest, data))

    @service_boundary("authenticate user", ErrorCode.QUERY_FAILED)
    async def authenticate_user(self, data: Input) -> Result[Tuple[UserSession, User]]:
        """
        Verify credentials and open a session.

        Args:
            data: LoginRequest or an equivalent mapping

        Returns:
            Ok((session, user)); wrong credentials are VALIDATION_ERROR and
            inactive accounts PERMISSION_REQUIRED
        """
        return await self._authenticate_use_case.execute(parse_input(LoginRequest, data))

    @service_boundary("get current user")
    async def get_current_user(self, token: str) -> Result[User]:
        return await self._current_user_use_case.execute(token)

    @service_boundary("sign out", ErrorCode.QUERY_FAILED)
    async def sign_out(self, token: str) -> Result[bool]:
        return await self._sign_out_use_case.execute(token)

    @service_boundary("sign out everywhere", ErrorCode.QUERY_FAILED)
    async def sign_out_everywhere(self, user_id: str) -> Result[int]:
        return await self._sign_out_everywhere_use_case.execute(user_id)

    @service_boundary("cleanup expired sessions", ErrorCode.QUERY_FAILED)
    async def cleanup_expired_sessions(self) -> Result[int]:
        """Remove expired sessions and return how many were deleted."""
        return await self._cleanup_sessions_use_case.execute()

    @service_boundary("get user profile")
    async def get_user_profile(self, user_id: str) -> Result[User]:
        return await self._get_profile_use_case.execute(user_id)

    @service_boundary("update user profile", ErrorCode.QUERY_FAILED)
    async def update_user_profile(self, user_id: str, data: Input) -> Result[User]:
        return await self._update_profile_use_case.execute(user_id, parse_input(UpdateProfileRequest, data))

    @service_boundary("change password", ErrorCode.QUERY_FAILED)
    async def change_user_password(self, user_id: str, data: Input) -> Result[bool]:
        return await self._change_password_use_case.execute(user_id, parse_input(ChangePasswordRequest, data))

    @service_boundary("request password reset", ErrorCode.QUERY_FAILED)
    async def request_password_reset(self, data: Input) -> Result[bool]:
        """
        Send a reset link to the address when it belongs to an active account.

        Returns:
            Ok(True) whether or not the address is registered
        """
        return await self._request_reset_use_case.execute(parse_input(PasswordResetRequest, data))

    @service_boundary("reset password", ErrorCode.QUERY_FAILED)
    async def reset_password(self, data: Input) -> Result[bool]:
        return await self._reset_password_use_case.execute(parse_input(ResetPasswordRequest, data))
