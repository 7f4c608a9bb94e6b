"""
Manage Permissions Use Cases
============================

Inviting co-editors to a place, accepting invitations, changing or revoking
granted flags and listing shared places.
"""
import logging
from typing import List, Optional

from wayfarer.application.context import Context
from wayfarer.application.use_cases.permissions.place_access import can_delete_place, can_edit_place
from wayfarer.domain.models.place import PlacePermission, PlaceView
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import (
    ErrorCode,
    Ok,
    Result,
    conflict,
    not_found,
    permission_required,
    validation_error,
)
from wayfarer.domain.services.email_service import EmailDeliveryError

logger = logging.getLogger(__name__)


class InviteEditorUseCase:
    """
    Use case for inviting a registered user to co-edit a place.

    The invitation stays pending until the invitee accepts it.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        inviter_id: str,
        place_id: str,
        email: str,
        can_edit: bool = True,
        can_delete: bool = False,
    ) -> Result[PlacePermission]:
        """
        Execute the invite editor use case.

        Args:
            inviter_id: User sending the invitation
            place_id: Place to share
            email: E-mail of the invitee
            can_edit: Grant edit rights
            can_delete: Grant delete rights

        Returns:
            Ok(pending permission), or NOT_FOUND / PERMISSION_REQUIRED /
            VALIDATION_ERROR / CONFLICT
        """
        inviter = await self._context.users.find_by_id(inviter_id)
        if inviter is None:
            return not_found("User", inviter_id)

        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        if not await can_edit_place(self._context, place, inviter_id):
            return permission_required("You do not have permission to share this place")

        invitee = await self._context.users.find_by_email(email.strip())
        if invitee is None:
            return not_found("User with this email")
        if place.is_owned_by(invitee.id):
            return validation_error("Cannot invite the owner of the place")
        if await self._context.place_permissions.find_by_user_and_place(invitee.id, place_id):
            return conflict("User already has permission for this place")

        try:
            permission = await self._context.place_permissions.create(PlacePermission(
                place_id=place_id,
                user_id=invitee.id,
                invited_by=inviter_id,
                can_edit=can_edit,
                can_delete=can_delete,
            ))
        except RepositoryError as exc:
            if exc.code == ErrorCode.CONFLICT:
                return conflict(exc.message)
            raise

        try:
            await self._context.email_service.send_editor_invitation_email(
                invitee.email, inviter.name, place.name, permission.id,
            )
        except EmailDeliveryError as exc:
            logger.warning(f"Invitation email for permission {permission.id} not sent: {exc}")

        logger.info(f"User {invitee.id} invited to place {place_id} by {inviter_id}")
        return Ok(permission)


class AcceptInvitationUseCase:
    """Accept a pending invitation. Accepting again re-sets ``accepted_at``."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, permission_id: str) -> Result[PlacePermission]:
        permission = await self._context.place_permissions.find_by_id(permission_id)
        if permission is None:
            return not_found("Permission", permission_id)
        if permission.user_id != user_id:
            return permission_required("This invitation belongs to another user")
        return Ok(await self._context.place_permissions.accept(permission_id))


class UpdateEditorPermissionUseCase:
    """Change the granted flags. Only the place owner may do this."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, permission_id: str, can_edit: Optional[bool] = None,
                      can_delete: Optional[bool] = None) -> Result[PlacePermission]:
        permission = await self._context.place_permissions.find_by_id(permission_id)
        if permission is None:
            return not_found("Permission", permission_id)

        place = await self._context.places.find_by_id(permission.place_id)
        if place is None:
            return not_found("Place", permission.place_id)
        if not place.is_owned_by(user_id):
            return permission_required("Only the place owner can change editor permissions")

        return Ok(await self._context.place_permissions.update(permission_id, can_edit, can_delete))


class RemoveEditorPermissionUseCase:
    """Revoke a permission. The owner or a holder of delete rights may do this."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, permission_id: str) -> Result[bool]:
        permission = await self._context.place_permissions.find_by_id(permission_id)
        if permission is None:
            return not_found("Permission", permission_id)

        place = await self._context.places.find_by_id(permission.place_id)
        if place is None:
            return not_found("Place", permission.place_id)
        if not await can_delete_place(self._context, place, user_id):
            return permission_required("You do not have permission to remove editors from this place")

        await self._context.place_permissions.remove(permission_id)
        logger.info(f"Permission {permission_id} on place {place.id} removed by {user_id}")
        return Ok(True)


class ListPlaceEditorsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, place_id: str) -> Result[List[PlacePermission]]:
        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        if not await can_edit_place(self._context, place, user_id):
            return permission_required("You do not have permission to view editors of this place")
        return Ok(await self._context.place_permissions.find_by_place(place_id))


class CheckPlacePermissionUseCase:
    """
    Answer whether a user may edit or delete a place.

    True for the creator, or for a holder of an accepted permission with the
    matching flag. Pending invitations grant nothing.
    """

    def __init__(self, context: Context):
        self._context = context

    async def can_edit(self, user_id: str, place_id: str) -> Result[bool]:
        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        return Ok(await can_edit_place(self._context, place, user_id))

    async def can_delete(self, user_id: str, place_id: str) -> Result[bool]:
        place = await self._context.places.find_by_id(place_id)
        if place is None:
            return not_found("Place", place_id)
        return Ok(await can_delete_place(self._context, place, user_id))


class GetSharedPlacesUseCase:
    """Places shared with a user through accepted permissions, annotated with the granted flags."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str) -> Result[List[PlaceView]]:
        favorites = {fav.place_id for fav in await self._context.place_favorites.find_by_user(user_id)}
        views = []
        for permission in await self._context.place_permissions.find_by_user(user_id):
            if not permission.is_accepted():
                continue
            place = await self._context.places.find_by_id(permission.place_id)
            if place is None:
                continue
            views.append(PlaceView(
                place=place,
                is_favorited=place.id in favorites,
                has_edit_permission=permission.can_edit,
                has_delete_permission=permission.can_delete,
            ))
        return Ok(views)
