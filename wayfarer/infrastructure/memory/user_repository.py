"""In-memory UserRepository and SessionRepository."""
import copy
from datetime import datetime
from typing import Optional

from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import USER_PROFILE_FIELDS, PasswordResetToken, User, UserSession
from wayfarer.domain.queries import Page, UserFilter, UserQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.user_repository import PasswordResetTokenRepository, SessionRepository, UserRepository
from wayfarer.domain.search.engine import USER_SORT_FIELDS, matches_keyword, paginate, sort_items
from wayfarer.infrastructure.memory.store import InMemoryRepository
from wayfarer.utils.datetime_utils import now


def _matches(user: User, flt: UserFilter) -> bool:
    if flt.role is not None and user.role != flt.role:
        return False
    if flt.status is not None and user.status != flt.status:
        return False
    return matches_keyword([user.name, user.email], flt.keyword)


class InMemoryUserRepository(InMemoryRepository, UserRepository):
    TABLE = "users"
    ENTITY = "User"

    def _find_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        for row in self._rows.values():
            if row.email.lower() == wanted:
                return row
        return None

    async def create(self, user: User) -> User:
        async with self._store.lock:
            if self._find_by_email(user.email) is not None:
                raise RepositoryError.conflict("Email is already registered")
            return self._put(user)

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return self._get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        row = self._find_by_email(email)
        return copy.deepcopy(row) if row is not None else None

    async def update_role(self, user_id: str, role: UserRole) -> User:
        async with self._store.lock:
            row = self._require(user_id)
            row.role = role
            row.updated_at = now()
            return copy.deepcopy(row)

    async def update_status(self, user_id: str, status: UserStatus) -> User:
        async with self._store.lock:
            row = self._require(user_id)
            row.status = status
            row.updated_at = now()
            return copy.deepcopy(row)

    async def update_profile(self, user: User) -> User:
        async with self._store.lock:
            return self._patch(user, USER_PROFILE_FIELDS)

    async def update_password(self, user_id: str, hashed_password: str) -> User:
        async with self._store.lock:
            row = self._require(user_id)
            row.hashed_password = hashed_password
            row.updated_at = now()
            return copy.deepcopy(row)

    async def update_last_login(self, user_id: str) -> None:
        async with self._store.lock:
            self._require(user_id).last_login_at = now()

    async def list(self, query: UserQuery) -> Page[User]:
        matched = [row for row in self._all() if _matches(row, query.filter)]
        return paginate(sort_items(matched, query.sort, USER_SORT_FIELDS), query.pagination)

    async def delete(self, user_id: str) -> None:
        async with self._store.lock:
            self._require(user_id)
            del self._rows[user_id]


class InMemorySessionRepository(InMemoryRepository, SessionRepository):
    """Sessions keyed by token."""

    TABLE = "sessions"
    ENTITY = "Session"

    async def create(self, session: UserSession) -> UserSession:
        async with self._store.lock:
            self._rows[session.token] = copy.deepcopy(session)
            return copy.deepcopy(session)

    async def find_by_token(self, token: str) -> Optional[UserSession]:
        return self._get(token)

    async def delete(self, token: str) -> None:
        async with self._store.lock:
            self._rows.pop(token, None)

    async def delete_by_user(self, user_id: str) -> int:
        async with self._store.lock:
            tokens = [token for token, row in self._rows.items() if row.user_id == user_id]
            for token in tokens:
                del self._rows[token]
            return len(tokens)

    async def delete_expired(self, at: datetime) -> int:
        async with self._store.lock:
            tokens = [token for token, row in self._rows.items() if row.is_expired(at)]
            for token in tokens:
                del self._rows[token]
            return len(tokens)


class InMemoryPasswordResetTokenRepository(InMemoryRepository, PasswordResetTokenRepository):
    """Reset tokens keyed by token."""

    TABLE = "password_reset_tokens"
    ENTITY = "Reset token"

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        async with self._store.lock:
            self._rows[token.token] = copy.deepcopy(token)
            return copy.deepcopy(token)

    async def find_by_token(self, token: str) -> Optional[PasswordResetToken]:
        return self._get(token)

    async def mark_used(self, token: str, at: datetime) -> None:
        async with self._store.lock:
            self._require(token).used_at = at
