"""
Check-in Service
================

Application service for check-ins and check-in photos.
"""
from typing import List, Optional

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.checkin_dto import (
    CheckinListRequest,
    CreateCheckinRequest,
    UpdateCheckinRequest,
    UploadCheckinPhotosRequest,
)
from wayfarer.application.dto.media_dto import UploadPhotosRequest
from wayfarer.application.use_cases.checkin.manage_checkins import (
    CheckinPhotosUseCase,
    CreateCheckinUseCase,
    DeleteCheckinUseCase,
    ListUserCheckinsUseCase,
    UpdateCheckinUseCase,
)
from wayfarer.domain.models.checkin import Checkin, CheckinPhoto
from wayfarer.domain.queries import Page
from wayfarer.domain.result import ErrorCode, Result


class CheckinService:
    """Application service for check-in operations."""

    def __init__(self, context: Context):
        self._create_use_case = CreateCheckinUseCase(context)
        self._update_use_case = UpdateCheckinUseCase(context)
        self._delete_use_case = DeleteCheckinUseCase(context)
        self._list_use_case = ListUserCheckinsUseCase(context)
        self._photos_use_case = CheckinPhotosUseCase(context)

    @service_boundary("create checkin", ErrorCode.QUERY_FAILED)
    async def create_checkin(self, user_id: str, data: Input) -> Result[Checkin]:
        """
        Check in at a published place.

        Args:
            user_id: Acting user
            data: CreateCheckinRequest or an equivalent mapping

        Returns:
            Ok(check-in), or VALIDATION_ERROR when the user is too far away
        """
        return await self._create_use_case.execute(user_id, parse_input(CreateCheckinRequest, data))

    @service_boundary("update checkin", ErrorCode.QUERY_FAILED)
    async def update_checkin(self, user_id: str, checkin_id: str, data: Input) -> Result[Checkin]:
        return await self._update_use_case.execute(user_id, checkin_id, parse_input(UpdateCheckinRequest, data))

    @service_boundary("delete checkin", ErrorCode.QUERY_FAILED)
    async def delete_checkin(self, user_id: str, checkin_id: str) -> Result[bool]:
        return await self._delete_use_case.execute(user_id, checkin_id)

    @service_boundary("list checkins")
    async def list_user_checkins(self, user_id: str, data: Optional[Input] = None) -> Result[Page[Checkin]]:
        request = parse_input(CheckinListRequest, data or {})
        return await self._list_use_case.execute(
            user_id,
            place_id=request.place_id,
            status=request.status,
            has_rating=request.has_rating,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
        )

    @service_boundary("add checkin photos", ErrorCode.QUERY_FAILED)
    async def add_checkin_photos(self, user_id: str, checkin_id: str, data: Input) -> Result[List[CheckinPhoto]]:
        request = parse_input(UploadCheckinPhotosRequest, data)
        return await self._photos_use_case.add(user_id, checkin_id, request.photos)

    @service_boundary("upload checkin photos", ErrorCode.QUERY_FAILED)
    async def upload_checkin_photos(self, user_id: str, checkin_id: str, data: Input) -> Result[List[CheckinPhoto]]:
        """Store image files in the configured storage and attach them as photos."""
        request = parse_input(UploadPhotosRequest, data)
        return await self._photos_use_case.upload(user_id, checkin_id, request.files)

    @service_boundary("get checkin photos")
    async def get_checkin_photos(self, checkin_id: str, user_id: Optional[str] = None) -> Result[List[CheckinPhoto]]:
        return await self._photos_use_case.list(checkin_id, user_id)
