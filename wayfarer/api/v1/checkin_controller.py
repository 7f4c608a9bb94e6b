"""
Check-in Controller
===================

Visits recorded at a place, with optional rating and photos.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response, status

from wayfarer.api.v1.dependencies import (
    get_checkin_service,
    get_current_user_id,
    get_optional_user_id,
    pagination_query,
    sort_query,
)
from wayfarer.api.v1.errors import to_page_response, unwrap
from wayfarer.application.dto.checkin_dto import (
    CheckinPhotoResponse,
    CheckinResponse,
    CreateCheckinRequest,
    UpdateCheckinRequest,
    UploadCheckinPhotosRequest,
)
from wayfarer.application.dto.common_dto import PageResponse
from wayfarer.application.dto.media_dto import Base64UploadPhotosRequest
from wayfarer.application.services.checkin_service import CheckinService
from wayfarer.domain.models.common import CheckinStatus

router = APIRouter(tags=["checkins"])


@router.post(
    "",
    response_model=CheckinResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check in at a place",
    description="The user must be within the configured distance of the place, "
                "and may check in at the same place once every 24 hours.",
)
async def create_checkin(
    request: CreateCheckinRequest,
    user_id: str = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> CheckinResponse:
    checkin = unwrap(await service.create_checkin(user_id, request))
    return CheckinResponse.from_domain(checkin)


@router.get("", response_model=PageResponse[CheckinResponse], summary="List my check-ins")
async def list_user_checkins(
    place_id: Optional[str] = None,
    checkin_status: Optional[CheckinStatus] = None,
    has_rating: Optional[bool] = None,
    sort: Optional[Dict[str, Any]] = Depends(sort_query),
    pagination: Dict[str, Any] = Depends(pagination_query),
    user_id: str = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> PageResponse[CheckinResponse]:
    data = {
        "place_id": place_id,
        "status": checkin_status,
        "has_rating": has_rating,
        "sort": sort,
        "pagination": pagination,
    }
    page = unwrap(await service.list_user_checkins(user_id, data))
    return to_page_response(page, CheckinResponse.from_domain)


@router.patch("/{checkin_id}", response_model=CheckinResponse, summary="Update a check-in")
async def update_checkin(
    checkin_id: str,
    request: UpdateCheckinRequest,
    user_id: str = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> CheckinResponse:
    checkin = unwrap(await service.update_checkin(user_id, checkin_id, request))
    return CheckinResponse.from_domain(checkin)


@router.delete(
    "/{checkin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a check-in",
)
async def delete_checkin(
    checkin_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> Response:
    unwrap(await service.delete_checkin(user_id, checkin_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{checkin_id}/photos",
    response_model=List[CheckinPhotoResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Attach photos to a check-in",
)
async def add_checkin_photos(
    checkin_id: str,
    request: UploadCheckinPhotosRequest,
    user_id: str = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> List[CheckinPhotoResponse]:
    photos = unwrap(await service.add_checkin_photos(user_id, checkin_id, request))
    return [CheckinPhotoResponse.from_domain(photo) for photo in photos]


@router.post(
    "/{checkin_id}/photos/upload",
    response_model=List[CheckinPhotoResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload photo files to a check-in",
    description="Base64 encoded JPEG, PNG, WebP or GIF files, 10MB each.",
)
async def upload_checkin_photos(
    checkin_id: str,
    request: Base64UploadPhotosRequest,
    user_id: str = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> List[CheckinPhotoResponse]:
    photos = unwrap(await service.upload_checkin_photos(user_id, checkin_id, request.to_request()))
    return [CheckinPhotoResponse.from_domain(photo) for photo in photos]

@router.get(
    "/{checkin_id}/photos",
    response_model=List[CheckinPhotoResponse],
    summary="Photos of a check-in",
    description="Photos of private check-ins are visible to their owner only.",
)
async def get_checkin_photos(
    checkin_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: CheckinService = Depends(get_checkin_service),
) -> List[CheckinPhotoResponse]:
    photos = unwrap(await service.get_checkin_photos(checkin_id, user_id))
    return [CheckinPhotoResponse.from_domain(photo) for photo in photos]
