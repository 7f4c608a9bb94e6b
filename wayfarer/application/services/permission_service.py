"""
Permission Service
==================

Application service for sharing places with co-editors.
"""
from typing import List

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.place_dto import InviteEditorRequest, UpdatePermissionRequest
from wayfarer.application.use_cases.permissions.manage_permissions import (
    AcceptInvitationUseCase,
    CheckPlacePermissionUseCase,
    GetSharedPlacesUseCase,
    InviteEditorUseCase,
    ListPlaceEditorsUseCase,
    RemoveEditorPermissionUseCase,
    UpdateEditorPermissionUseCase,
)
from wayfarer.domain.models.place import PlacePermission, PlaceView
from wayfarer.domain.result import ErrorCode, Result


class PermissionService:
    """
    Application service for place permissions.

    A permission is pending until accepted; only accepted permissions grant
    edit or delete rights.
    """

    def __init__(self, context: Context):
        self._invite_use_case = InviteEditorUseCase(context)
        self._accept_use_case = AcceptInvitationUseCase(context)
        self._update_use_case = UpdateEditorPermissionUseCase(context)
        self._remove_use_case = RemoveEditorPermissionUseCase(context)
        self._list_editors_use_case = ListPlaceEditorsUseCase(context)
        self._check_use_case = CheckPlacePermissionUseCase(context)
        self._shared_use_case = GetSharedPlacesUseCase(context)

    @service_boundary("invite editor", ErrorCode.QUERY_FAILED)
    async def invite_editor(self, inviter_id: str, place_id: str, data: Input) -> Result[PlacePermission]:
        """
        Invite a user, by e-mail, to co-edit a place.

        Args:
            inviter_id: User with edit permission on the place
            place_id: Place to share
            data: InviteEditorRequest or an equivalent mapping

        Returns:
            Ok(pending permission) or Err
        """
        request = parse_input(InviteEditorRequest, data)
        return await self._invite_use_case.execute(
            inviter_id, place_id, request.email, request.can_edit, request.can_delete,
        )

    @service_boundary("accept invitation", ErrorCode.QUERY_FAILED)
    async def accept_invitation(self, user_id: str, permission_id: str) -> Result[PlacePermission]:
        return await self._accept_use_case.execute(user_id, permission_id)

    @service_boundary("update editor permission", ErrorCode.QUERY_FAILED)
    async def update_editor_permission(self, user_id: str, permission_id: str,
                                       data: Input) -> Result[PlacePermission]:
        request = parse_input(UpdatePermissionRequest, data)
        return await self._update_use_case.execute(user_id, permission_id, request.can_edit, request.can_delete)

    @service_boundary("remove editor permission", ErrorCode.QUERY_FAILED)
    async def remove_editor_permission(self, user_id: str, permission_id: str) -> Result[bool]:
        return await self._remove_use_case.execute(user_id, permission_id)

    @service_boundary("list place editors")
    async def list_place_editors(self, user_id: str, place_id: str) -> Result[List[PlacePermission]]:
        return await self._list_editors_use_case.execute(user_id, place_id)

    @service_boundary("check edit permission")
    async def check_edit_permission(self, place_id: str, user_id: str) -> Result[bool]:
        return await self._check_use_case.can_edit(user_id, place_id)

    @service_boundary("check delete permission")
    async def check_delete_permission(self, place_id: str, user_id: str) -> Result[bool]:
        return await self._check_use_case.can_delete(user_id, place_id)

    @service_boundary("get shared places")
    async def get_shared_places(self, user_id: str) -> Result[List[PlaceView]]:
        return await self._shared_use_case.execute(user_id)
