"""
Authorization
=============

Role to capability table and the single gate every privileged operation goes
through. The gate checks, in order: the actor exists, the actor's role grants
the capability, the actor is active.
"""
from enum import Enum
from typing import Dict, FrozenSet

from wayfarer.application.context import Context
from wayfarer.domain.models.common import UserRole
from wayfarer.domain.models.user import User
from wayfarer.domain.result import ErrorCode, Ok, Result, err


class Capability(str, Enum):
    AUTHOR_CONTENT = "author_content"
    MODERATE_CONTENT = "moderate_content"
    MODERATE_REPORTS = "moderate_reports"
    MANAGE_USERS = "manage_users"
    VIEW_STATISTICS = "view_statistics"


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.VISITOR: frozenset(),
    UserRole.EDITOR: frozenset({Capability.AUTHOR_CONTENT}),
    UserRole.ADMIN: frozenset(Capability),
}


def has_capability(user: User, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(user.role, frozenset())


async def authorize(context: Context, actor_id: str, capability: Capability) -> Result[User]:
    """
    Resolve the acting user and check a capability.

    Args:
        context: Application context
        actor_id: Acting user
        capability: Required capability

    Returns:
        Ok(actor) or NOT_FOUND / PERMISSION_REQUIRED
    """
    actor = await context.users.find_by_id(actor_id)
    if actor is None:
        return err(ErrorCode.NOT_FOUND, "Acting user not found")

    if not has_capability(actor, capability):
        if capability == Capability.AUTHOR_CONTENT:
            return err(ErrorCode.PERMISSION_REQUIRED, "Editor or admin role required")
        return err(ErrorCode.PERMISSION_REQUIRED, "Insufficient permissions: admin role required")

    if not actor.is_active():
        return err(ErrorCode.PERMISSION_REQUIRED, "Account is not active")

    return Ok(actor)


async def require_active_user(context: Context, user_id: str) -> Result[User]:
    """Resolve a user that must exist and be active (no capability needed)."""
    user = await context.users.find_by_id(user_id)
    if user is None:
        return err(ErrorCode.NOT_FOUND, "User not found")
    if not user.is_active():
        return err(ErrorCode.PERMISSION_REQUIRED, "Account is not active")
    return Ok(user)
