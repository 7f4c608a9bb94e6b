"""
Manage Users Use Cases
======================

Admin user management. Every mutating operation checks, in this order:

1. the acting user exists
2. the acting user is an admin
3. the acting user is active
4. the actor is not the target (CANNOT_MODIFY_SELF)
5. the target exists
6. the operation's own rule
"""
import logging
from typing import Optional

from wayfarer.application.authorization import Capability, authorize
from wayfarer.application.context import Context
from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import User
from wayfarer.domain.queries import Page, Pagination, SortSpec, UserFilter, UserQuery
from wayfarer.domain.result import ErrorCode, Ok, Result, err, not_found, validation_error
from wayfarer.domain.search.engine import USER_SORT_FIELDS, sort_validation_message

logger = logging.getLogger(__name__)


def _parse_enum(enum_type, raw: str):
    try:
        return enum_type(raw.strip().lower())
    except (AttributeError, ValueError):
        return None


class ManageUsersUseCase:
    """Role and status changes, deletion and listing of users by an admin."""

    def __init__(self, context: Context):
        self._context = context

    async def _resolve_target(self, actor_id: str, target_id: str, action: str) -> Result[User]:
        actor = await authorize(self._context, actor_id, Capability.MANAGE_USERS)
        if actor.is_err():
            return actor
        if actor_id == target_id:
            return err(ErrorCode.CANNOT_MODIFY_SELF, f"You cannot {action} your own account")

        target = await self._context.users.find_by_id(target_id)
        if target is None:
            return not_found("User", target_id)
        return Ok(target)

    async def update_role(self, actor_id: str, target_id: str, role: str) -> Result[User]:
        """
        Change a user's role.

        Args:
            actor_id: Acting admin
            target_id: User to change
            role: One of visitor, editor, admin

        Returns:
            Ok(updated user)
        """
        target = await self._resolve_target(actor_id, target_id, "change the role of")
        if target.is_err():
            return target

        new_role = _parse_enum(UserRole, role)
        if new_role is None:
            return validation_error(f"Invalid role '{role}'")

        updated = await self._context.users.update_role(target_id, new_role)
        logger.info(f"User {target_id} role set to {new_role.value} by admin {actor_id}")
        return Ok(updated)

    async def update_status(self, actor_id: str, target_id: str, status: str) -> Result[User]:
        """
        Change a user's status. Leaving ``active`` signs the user out everywhere.
        """
        target = await self._resolve_target(actor_id, target_id, "change the status of")
        if target.is_err():
            return target

        new_status = _parse_enum(UserStatus, status)
        if new_status is None:
            return validation_error(f"Invalid status '{status}'")

        updated = await self._context.users.update_status(target_id, new_status)
        if new_status != UserStatus.ACTIVE:
            await self._context.sessions.delete_by_user(target_id)
        logger.info(f"User {target_id} status set to {new_status.value} by admin {actor_id}")
        return Ok(updated)

    async def delete(self, actor_id: str, target_id: str) -> Result[bool]:
        """
        Delete a user account permanently.

        Sessions are revoked in the same transaction as the account removal.
        Authored content keeps its ``created_by`` id.
        """
        target = await self._resolve_target(actor_id, target_id, "delete")
        if target.is_err():
            return target
        if target.unwrap().status == UserStatus.DELETED:
            return not_found("User", target_id)

        async def remove(tx: Context) -> Result[int]:
            revoked = await tx.sessions.delete_by_user(target_id)
            await tx.users.delete(target_id)
            return Ok(revoked)

        result = await self._context.with_transaction(remove)
        if result.is_err():
            return result
        logger.info(f"User {target_id} deleted by admin {actor_id}, {result.unwrap()} sessions revoked")
        return Ok(True)

    async def list(
        self,
        actor_id: str,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
        keyword: Optional[str] = None,
        sort: Optional[SortSpec] = None,
        pagination: Optional[Pagination] = None,
    ) -> Result[Page[User]]:
        actor = await authorize(self._context, actor_id, Capability.MANAGE_USERS)
        if actor.is_err():
            return actor

        pagination = pagination or Pagination()
        message = pagination.validation_message() or sort_validation_message(sort, USER_SORT_FIELDS)
        if message:
            return validation_error(message)

        return Ok(await self._context.users.list(UserQuery(
            filter=UserFilter(role=role, status=status, keyword=keyword),
            sort=sort,
            pagination=pagination,
        )))
