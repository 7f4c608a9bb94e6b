"""
Admin Service
=============

Application service for content moderation and user management.
"""
from typing import Optional, Union

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.common_dto import PaginationDTO
from wayfarer.application.dto.place_dto import ContentStatusRequest
from wayfarer.application.dto.user_dto import UserListRequest
from wayfarer.application.use_cases.admin.manage_users import ManageUsersUseCase
from wayfarer.application.use_cases.admin.moderate_content import (
    AdminDeleteContentUseCase,
    AdminListContentUseCase,
    ContentKind,
    ContentStatistics,
    GetContentStatisticsUseCase,
    UpdateContentStatusUseCase,
)
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.place import Place
from wayfarer.domain.models.region import Region
from wayfarer.domain.models.user import User
from wayfarer.domain.queries import Page
from wayfarer.domain.result import ErrorCode, Result, validation_error


class AdminService:
    """
    Application service for administrator operations.

    Every method is gated on the acting user being an active admin.
    """

    def __init__(self, context: Context):
        self._status_use_case = UpdateContentStatusUseCase(context)
        self._delete_use_case = AdminDeleteContentUseCase(context)
        self._list_content_use_case = AdminListContentUseCase(context)
        self._stats_use_case = GetContentStatisticsUseCase(context)
        self._users_use_case = ManageUsersUseCase(context)

    @service_boundary("update region status", ErrorCode.QUERY_FAILED)
    async def admin_update_region_status(self, admin_id: str, region_id: str, data: Input) -> Result[Region]:
        request = parse_input(ContentStatusRequest, data)
        return await self._status_use_case.update_region_status(admin_id, region_id, request.status)

    @service_boundary("update place status", ErrorCode.QUERY_FAILED)
    async def admin_update_place_status(self, admin_id: str, place_id: str, data: Input) -> Result[Place]:
        request = parse_input(ContentStatusRequest, data)
        return await self._status_use_case.update_place_status(admin_id, place_id, request.status)

    @service_boundary("delete region", ErrorCode.QUERY_FAILED)
    async def admin_delete_region(self, admin_id: str, region_id: str) -> Result[bool]:
        return await self._delete_use_case.delete_region(admin_id, region_id)

    @service_boundary("delete place", ErrorCode.QUERY_FAILED)
    async def admin_delete_place(self, admin_id: str, place_id: str) -> Result[bool]:
        return await self._delete_use_case.delete_place(admin_id, place_id)

    @service_boundary("list content")
    async def admin_list_content(
        self,
        admin_id: str,
        kind: Union[ContentKind, str],
        status: Optional[Union[ContentStatus, str]] = None,
        keyword: Optional[str] = None,
        pagination: Optional[Input] = None,
    ) -> Result[Page[Union[Region, Place]]]:
        """
        List regions or places in any status.

        Args:
            admin_id: Acting admin
            kind: "region" or "place"
            status: Optional status filter
            keyword: Optional keyword filter
            pagination: PaginationDTO or an equivalent mapping

        Returns:
            Ok(page of regions or places)
        """
        try:
            kind = ContentKind(kind)
            status = ContentStatus(status) if status is not None else None
        except ValueError:
            return validation_error("Invalid content kind or status")
        window = parse_input(PaginationDTO, pagination or {})
        return await self._list_content_use_case.execute(
            admin_id, kind, status=status, keyword=keyword, pagination=window.to_domain(),
        )

    @service_boundary("get content statistics")
    async def get_content_statistics(self, admin_id: str) -> Result[ContentStatistics]:
        return await self._stats_use_case.execute(admin_id)

    @service_boundary("list users")
    async def admin_list_users(self, admin_id: str, data: Optional[Input] = None) -> Result[Page[User]]:
        request = parse_input(UserListRequest, data or {})
        return await self._users_use_case.list(
            admin_id,
            role=request.role,
            status=request.status,
            keyword=request.keyword,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
        )

    @service_boundary("update user role", ErrorCode.QUERY_FAILED)
    async def update_user_role(self, actor_id: str, target_id: str, role: str) -> Result[User]:
        """
        Change another user's role.

        Args:
            actor_id: Acting admin
            target_id: User to change; must not be the actor
            role: visitor, editor or admin

        Returns:
            Ok(updated user), or CANNOT_MODIFY_SELF when actor and target match
        """
        return await self._users_use_case.update_role(actor_id, target_id, role)

    @service_boundary("update user status", ErrorCode.QUERY_FAILED)
    async def update_user_status(self, actor_id: str, target_id: str, status: str) -> Result[User]:
        return await self._users_use_case.update_status(actor_id, target_id, status)

    @service_boundary("delete user", ErrorCode.QUERY_FAILED)
    async def delete_user(self, actor_id: str, target_id: str) -> Result[bool]:
        return await self._users_use_case.delete(actor_id, target_id)
