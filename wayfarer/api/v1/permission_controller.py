"""
Permission Controller
=====================

Place sharing: invitations, acceptance and editor rights.
"""
from typing import Dict, List

from fastapi import APIRouter, Depends, Response, status

from wayfarer.api.v1.dependencies import get_current_user_id, get_permission_service
from wayfarer.api.v1.errors import unwrap
from wayfarer.application.dto.place_dto import InviteEditorRequest, PermissionResponse, UpdatePermissionRequest
from wayfarer.application.services.permission_service import PermissionService

router = APIRouter(tags=["permissions"])


@router.post(
    "/places/{place_id}/invite",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite an editor",
    description="Share a place with a registered user by e-mail. Requires edit rights on the place.",
)
async def invite_editor(
    place_id: str,
    request: InviteEditorRequest,
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionResponse:
    permission = unwrap(await service.invite_editor(user_id, place_id, request))
    return PermissionResponse.from_domain(permission)


@router.get("/places/{place_id}", response_model=List[PermissionResponse], summary="List place editors")
async def list_place_editors(
    place_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> List[PermissionResponse]:
    permissions = unwrap(await service.list_place_editors(user_id, place_id))
    return [PermissionResponse.from_domain(permission) for permission in permissions]


@router.get(
    "/places/{place_id}/check",
    response_model=Dict[str, bool],
    summary="Check my rights on a place",
)
async def check_place_permissions(
    place_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> Dict[str, bool]:
    can_edit = unwrap(await service.check_edit_permission(place_id, user_id))
    can_delete = unwrap(await service.check_delete_permission(place_id, user_id))
    return {"can_edit": can_edit, "can_delete": can_delete}


@router.post("/{permission_id}/accept", response_model=PermissionResponse, summary="Accept an invitation")
async def accept_invitation(
    permission_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionResponse:
    permission = unwrap(await service.accept_invitation(user_id, permission_id))
    return PermissionResponse.from_domain(permission)


@router.patch("/{permission_id}", response_model=PermissionResponse, summary="Change editor rights")
async def update_editor_permission(
    permission_id: str,
    request: UpdatePermissionRequest,
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionResponse:
    permission = unwrap(await service.update_editor_permission(user_id, permission_id, request))
    return PermissionResponse.from_domain(permission)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Revoke an editor",
)
async def remove_editor_permission(
    permission_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> Response:
    unwrap(await service.remove_editor_permission(user_id, permission_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
