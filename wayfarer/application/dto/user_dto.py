"""
User DTO
========

Pydantic models for registration, sign-in, profile and password management
and admin user management.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from wayfarer.application.dto.common_dto import PaginationDTO, SortDTO
from wayfarer.application.dto.place_dto import EMAIL_PATTERN
from wayfarer.domain.constants.limits import UserLimits
from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import User, UserSession


class RegisterUserRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=UserLimits.MIN_PASSWORD_LENGTH,
                          max_length=UserLimits.MAX_PASSWORD_LENGTH)
    name: str = Field(..., min_length=UserLimits.MIN_NAME_LENGTH, max_length=UserLimits.MAX_NAME_LENGTH)
    bio: Optional[str] = Field(None, max_length=UserLimits.MAX_BIO_LENGTH)
    avatar: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields keep their values, an explicit null clears bio or avatar."""
    name: Optional[str] = Field(None, min_length=UserLimits.MIN_NAME_LENGTH, max_length=UserLimits.MAX_NAME_LENGTH)
    bio: Optional[str] = Field(None, max_length=UserLimits.MAX_BIO_LENGTH)
    avatar: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=UserLimits.MIN_PASSWORD_LENGTH,
                              max_length=UserLimits.MAX_PASSWORD_LENGTH)


class PasswordResetRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=UserLimits.MIN_PASSWORD_LENGTH,
                              max_length=UserLimits.MAX_PASSWORD_LENGTH)


class UpdateUserRoleRequest(BaseModel):
    role: str = Field(..., description="visitor | editor | admin")


class UpdateUserStatusRequest(BaseModel):
    status: str = Field(..., description="active | suspended | deleted")


class UserListRequest(BaseModel):
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    keyword: Optional[str] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class UserResponse(BaseModel):
    """Public user data. Never includes the password hash."""
    id: str
    email: str
    name: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    status: UserStatus
    email_verified: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            bio=user.bio,
            avatar=user.avatar,
            role=user.role,
            status=user.status,
            email_verified=user.email_verified,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )


class SessionResponse(BaseModel):
    token: str
    expires_at: datetime
    user: UserResponse

    @classmethod
    def from_domain(cls, session: UserSession, user: User) -> "SessionResponse":
        return cls(token=session.token, expires_at=session.expires_at, user=UserResponse.from_domain(user))
