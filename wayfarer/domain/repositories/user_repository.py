"""
User Repository Interface
=========================

Abstract interfaces for user and session data access.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import PasswordResetToken, User, UserSession
from wayfarer.domain.queries import Page, UserQuery


class UserRepository(ABC):
    """
    Abstract repository for user persistence operations.

    E-mail addresses are unique, compared case-insensitively.
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create a new user.

        Args:
            user: User entity to create

        Returns:
            Created user entity

        Raises:
            RepositoryError: CONFLICT if the e-mail is taken
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def update_role(self, user_id: str, role: UserRole) -> User:
        pass

    @abstractmethod
    async def update_status(self, user_id: str, status: UserStatus) -> User:
        pass

    @abstractmethod
    async def update_profile(self, user: User) -> User:
        """Write the profile fields of ``user`` (name, bio, avatar) and nothing else."""
        pass

    @abstractmethod
    async def update_password(self, user_id: str, hashed_password: str) -> User:
        pass

    @abstractmethod
    async def update_last_login(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def list(self, query: UserQuery) -> Page[User]:
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        pass


class SessionRepository(ABC):
    """Abstract repository for login sessions."""

    @abstractmethod
    async def create(self, session: UserSession) -> UserSession:
        pass

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[UserSession]:
        pass

    @abstractmethod
    async def delete(self, token: str) -> None:
        pass

    @abstractmethod
    async def delete_by_user(self, user_id: str) -> int:
        """Delete every session of a user and return how many were removed."""
        pass

    @abstractmethod
    async def delete_expired(self, at: datetime) -> int:
        pass


class PasswordResetTokenRepository(ABC):
    """Abstract repository for password reset tokens."""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        pass

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[PasswordResetToken]:
        pass

    @abstractmethod
    async def mark_used(self, token: str, at: datetime) -> None:
        """
        Record that a token was redeemed.

        Raises:
            RepositoryError: NOT_FOUND if the token does not exist
        """
        pass
