"""
User Model
==========

Domain model representing a platform user and their login sessions.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.utils.datetime_utils import now


USER_PROFILE_FIELDS = ("name", "bio", "avatar")


@dataclass
class User:
    email: str
    hashed_password: str
    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    bio: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole = UserRole.VISITOR
    status: UserStatus = UserStatus.ACTIVE
    email_verified: bool = False
    last_login_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def is_active(self) -> bool:
        """Check if user account is active."""
        return self.status == UserStatus.ACTIVE

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class UserSession:
    user_id: str
    token: str
    expires_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: now())

    def is_expired(self, at: Optional[datetime] = None) -> bool:
        return (at or now()) >= self.expires_at


@dataclass
class PasswordResetToken:
    """Single-use token that lets a user choose a new password."""
    user_id: str
    token: str
    expires_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    used_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: now())

    def is_expired(self, at: Optional[datetime] = None) -> bool:
        return (at or now()) >= self.expires_at

    def is_used(self) -> bool:
        return self.used_at is not None
