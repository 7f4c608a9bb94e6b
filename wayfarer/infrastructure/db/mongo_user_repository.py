"""
MongoDB User Repositories
=========================

Concrete implementations of UserRepository, SessionRepository and
PasswordResetTokenRepository using MongoDB.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from wayfarer.domain.constants.fields import CommonFields, PasswordResetFields, SessionFields, UserFields
from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import USER_PROFILE_FIELDS, PasswordResetToken, User, UserSession
from wayfarer.domain.queries import Page, UserQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.user_repository import PasswordResetTokenRepository, SessionRepository, UserRepository
from wayfarer.domain.search.engine import USER_SORT_FIELDS
from wayfarer.infrastructure.db.base import MongoRepository, mongo_errors, mongo_sort
from wayfarer.infrastructure.db.content_filters import keyword_clause
from wayfarer.utils.datetime_utils import now


class MongoUserRepository(MongoRepository, UserRepository):
    """
    MongoDB implementation of UserRepository.

    E-mail addresses are stored lower-cased under a unique index.
    """

    ENTITY = "User"

    def _to_entity(self, doc: dict) -> User:
        """Convert MongoDB document to User entity."""
        return User(
            id=doc[CommonFields.MONGO_ID],
            email=doc[UserFields.EMAIL],
            hashed_password=doc[UserFields.HASHED_PASSWORD],
            name=doc[UserFields.NAME],
            bio=doc.get(UserFields.BIO),
            avatar=doc.get(UserFields.AVATAR),
            role=UserRole(doc.get(UserFields.ROLE, UserRole.VISITOR.value)),
            status=UserStatus(doc.get(UserFields.STATUS, UserStatus.ACTIVE.value)),
            email_verified=doc.get(UserFields.EMAIL_VERIFIED, False),
            last_login_at=doc.get(UserFields.LAST_LOGIN_AT),
            created_at=doc[UserFields.CREATED_AT],
            updated_at=doc[UserFields.UPDATED_AT],
        )

    def _to_document(self, user: User) -> dict:
        """Convert User entity to MongoDB document."""
        return {
            CommonFields.MONGO_ID: user.id,
            UserFields.EMAIL: user.email.strip().lower(),
            UserFields.HASHED_PASSWORD: user.hashed_password,
            UserFields.NAME: user.name,
            UserFields.BIO: user.bio,
            UserFields.AVATAR: user.avatar,
            UserFields.ROLE: user.role.value,
            UserFields.STATUS: user.status.value,
            UserFields.EMAIL_VERIFIED: user.email_verified,
            UserFields.LAST_LOGIN_AT: user.last_login_at,
            UserFields.CREATED_AT: user.created_at,
            UserFields.UPDATED_AT: user.updated_at,
        }

    async def create(self, user: User) -> User:
        with mongo_errors("create user", "Email is already registered"):
            await self._collection.insert_one(self._to_document(user), session=self._session)
        return user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await self._find_one({CommonFields.MONGO_ID: user_id}, "find user")

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_one({UserFields.EMAIL: email.strip().lower()}, "find user by email")

    async def update_role(self, user_id: str, role: UserRole) -> User:
        return await self._update_by_id(
            user_id, {"$set": {UserFields.ROLE: role.value, UserFields.UPDATED_AT: now()}}, "update user role",
        )

    async def update_status(self, user_id: str, status: UserStatus) -> User:
        return await self._update_by_id(
            user_id, {"$set": {UserFields.STATUS: status.value, UserFields.UPDATED_AT: now()}}, "update user status",
        )

    async def update_profile(self, user: User) -> User:
        doc = self._to_document(user)
        fields = {name: doc[name] for name in USER_PROFILE_FIELDS}
        fields[UserFields.UPDATED_AT] = now()
        return await self._update_by_id(user.id, {"$set": fields}, "update user profile")

    async def update_password(self, user_id: str, hashed_password: str) -> User:
        return await self._update_by_id(
            user_id,
            {"$set": {UserFields.HASHED_PASSWORD: hashed_password, UserFields.UPDATED_AT: now()}},
            "update user password",
        )

    async def update_last_login(self, user_id: str) -> None:
        await self._update_by_id(user_id, {"$set": {UserFields.LAST_LOGIN_AT: now()}}, "record login")

    async def list(self, query: UserQuery) -> Page[User]:
        flt = query.filter
        document: Dict[str, Any] = {}
        if flt.role is not None:
            document[UserFields.ROLE] = flt.role.value
        if flt.status is not None:
            document[UserFields.STATUS] = flt.status.value
        keyword = keyword_clause(flt.keyword, (UserFields.NAME, UserFields.EMAIL))
        if keyword:
            document.update(keyword)
        return await self._find_page(document, mongo_sort(query.sort, USER_SORT_FIELDS), query.pagination, "list users")

    async def delete(self, user_id: str) -> None:
        await self._delete_by_id(user_id, "delete user")


class MongoSessionRepository(MongoRepository, SessionRepository):
    """Login sessions, looked up by their unique token."""

    ENTITY = "Session"

    def _to_entity(self, doc: dict) -> UserSession:
        return UserSession(
            id=doc[CommonFields.MONGO_ID],
            user_id=doc[SessionFields.USER_ID],
            token=doc[SessionFields.TOKEN],
            expires_at=doc[SessionFields.EXPIRES_AT],
            created_at=doc[SessionFields.CREATED_AT],
        )

    def _to_document(self, session: UserSession) -> dict:
        return {
            CommonFields.MONGO_ID: session.id,
            SessionFields.USER_ID: session.user_id,
            SessionFields.TOKEN: session.token,
            SessionFields.EXPIRES_AT: session.expires_at,
            SessionFields.CREATED_AT: session.created_at,
        }

    async def create(self, session: UserSession) -> UserSession:
        with mongo_errors("create session", "Session token already exists"):
            await self._collection.insert_one(self._to_document(session), session=self._session)
        return session

    async def find_by_token(self, token: str) -> Optional[UserSession]:
        return await self._find_one({SessionFields.TOKEN: token}, "find session")

    async def delete(self, token: str) -> None:
        with mongo_errors("delete session"):
            await self._collection.delete_one({SessionFields.TOKEN: token}, session=self._session)

    async def delete_by_user(self, user_id: str) -> int:
        with mongo_errors("delete user sessions"):
            result = await self._collection.delete_many({SessionFields.USER_ID: user_id}, session=self._session)
        return result.deleted_count

    async def delete_expired(self, at: datetime) -> int:
        with mongo_errors("delete expired sessions"):
            result = await self._collection.delete_many(
                {SessionFields.EXPIRES_AT: {"$lte": at}}, session=self._session,
            )
        return result.deleted_count


class MongoPasswordResetTokenRepository(MongoRepository, PasswordResetTokenRepository):
    ENTITY = "Reset token"

    def _to_entity(self, doc: dict) -> PasswordResetToken:
        return PasswordResetToken(
            id=doc[CommonFields.MONGO_ID],
            user_id=doc[PasswordResetFields.USER_ID],
            token=doc[PasswordResetFields.TOKEN],
            expires_at=doc[PasswordResetFields.EXPIRES_AT],
            used_at=doc.get(PasswordResetFields.USED_AT),
            created_at=doc[PasswordResetFields.CREATED_AT],
        )

    def _to_document(self, token: PasswordResetToken) -> dict:
        return {
            CommonFields.MONGO_ID: token.id,
            PasswordResetFields.USER_ID: token.user_id,
            PasswordResetFields.TOKEN: token.token,
            PasswordResetFields.EXPIRES_AT: token.expires_at,
            PasswordResetFields.USED_AT: token.used_at,
            PasswordResetFields.CREATED_AT: token.created_at,
        }

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        with mongo_errors("create reset token", "Reset token already exists"):
            await self._collection.insert_one(self._to_document(token), session=self._session)
        return token

    async def find_by_token(self, token: str) -> Optional[PasswordResetToken]:
        return await self._find_one({PasswordResetFields.TOKEN: token}, "find reset token")

    async def mark_used(self, token: str, at: datetime) -> None:
        with mongo_errors("mark reset token used"):
            result = await self._collection.update_one(
                {PasswordResetFields.TOKEN: token},
                {"$set": {PasswordResetFields.USED_AT: at}},
                session=self._session,
            )
        if result.matched_count == 0:
            raise RepositoryError.not_found(self.ENTITY, token)
