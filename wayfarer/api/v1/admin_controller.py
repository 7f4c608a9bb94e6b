"""
Admin Controller
================

Moderation endpoints: reports, content status, content listing and user
management. Every route requires an admin; the services enforce it.
"""
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status

from wayfarer.api.v1.dependencies import (
    get_admin_service,
    get_current_user_id,
    get_report_service,
    pagination_query,
    sort_query,
)
from wayfarer.api.v1.errors import to_page_response, unwrap
from wayfarer.application.dto.common_dto import PageResponse
from wayfarer.application.dto.place_dto import ContentStatisticsResponse, ContentStatusRequest, PlaceResponse
from wayfarer.application.dto.region_dto import RegionResponse
from wayfarer.application.dto.report_dto import (
    ReportResponse,
    ReportStatsResponse,
    ReviewReportRequest,
)
from wayfarer.application.dto.user_dto import UpdateUserRoleRequest, UpdateUserStatusRequest, UserResponse
from wayfarer.application.services.admin_service import AdminService
from wayfarer.application.services.report_service import ReportService
from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.place import Place
from wayfarer.domain.models.report import ReportEntityType, ReportStatus, ReportType

router = APIRouter(tags=["admin"])


def _content_response(item: Any) -> Union[RegionResponse, PlaceResponse]:
    if isinstance(item, Place):
        return PlaceResponse.from_domain(item)
    return RegionResponse.from_domain(item)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@router.get("/reports", response_model=PageResponse[ReportResponse], summary="List reports")
async def admin_list_reports(
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    report_type: Optional[ReportType] = Query(None, alias="type"),
    entity_type: Optional[ReportEntityType] = None,
    entity_id: Optional[str] = None,
    reporter_user_id: Optional[str] = None,
    sort: Optional[Dict[str, Any]] = Depends(sort_query),
    pagination: Dict[str, Any] = Depends(pagination_query),
    admin_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> PageResponse[ReportResponse]:
    data = {
        "status": report_status,
        "type": report_type,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "reporter_user_id": reporter_user_id,
        "sort": sort,
        "pagination": pagination,
    }
    page = unwrap(await service.admin_list_reports(admin_id, data))
    return to_page_response(page, ReportResponse.from_domain)


@router.get("/reports/statistics", response_model=ReportStatsResponse, summary="Report statistics")
async def get_report_statistics(
    admin_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> ReportStatsResponse:
    stats = unwrap(await service.get_report_statistics(admin_id))
    return ReportStatsResponse.from_domain(stats)


@router.get(
    "/reports/entity/{entity_type}/{entity_id}",
    response_model=List[ReportResponse],
    summary="Reports filed against one entity",
)
async def get_entity_reports(
    entity_type: str,
    entity_id: str,
    admin_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> List[ReportResponse]:
    reports = unwrap(await service.get_entity_reports(admin_id, entity_type, entity_id))
    return [ReportResponse.from_domain(report) for report in reports]


@router.post(
    "/reports/{report_id}/under-review",
    response_model=ReportResponse,
    summary="Start reviewing a pending report",
)
async def mark_report_under_review(
    report_id: str,
    admin_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = unwrap(await service.mark_report_under_review(admin_id, report_id))
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/review",
    response_model=ReportResponse,
    summary="Resolve or dismiss a report",
    description="Closing the last open report on a region or place clears its reported flag.",
)
async def review_report(
    report_id: str,
    request: ReviewReportRequest,
    admin_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = unwrap(await service.review_report(admin_id, report_id, request))
    return ReportResponse.from_domain(report)


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------

@router.put("/regions/{region_id}/status", response_model=RegionResponse, summary="Set region status")
async def admin_update_region_status(
    region_id: str,
    request: ContentStatusRequest,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> RegionResponse:
    region = unwrap(await service.admin_update_region_status(admin_id, region_id, request))
    return RegionResponse.from_domain(region)


@router.put("/places/{place_id}/status", response_model=PlaceResponse, summary="Set place status")
async def admin_update_place_status(
    place_id: str,
    request: ContentStatusRequest,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> PlaceResponse:
    place = unwrap(await service.admin_update_place_status(admin_id, place_id, request))
    return PlaceResponse.from_domain(place)


@router.delete(
    "/regions/{region_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete any region",
)
async def admin_delete_region(
    region_id: str,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> Response:
    unwrap(await service.admin_delete_region(admin_id, region_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/places/{place_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete any place",
)
async def admin_delete_place(
    place_id: str,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> Response:
    unwrap(await service.admin_delete_place(admin_id, place_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/content/{kind}",
    response_model=PageResponse[Union[RegionResponse, PlaceResponse]],
    summary="List regions or places in any status",
)
async def admin_list_content(
    kind: str,
    content_status: Optional[str] = Query(None, alias="status"),
    keyword: Optional[str] = None,
    pagination: Dict[str, Any] = Depends(pagination_query),
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> PageResponse[Union[RegionResponse, PlaceResponse]]:
    page = unwrap(await service.admin_list_content(admin_id, kind, content_status, keyword, pagination))
    return to_page_response(page, _content_response)


@router.get("/statistics", response_model=ContentStatisticsResponse, summary="Content statistics")
async def get_content_statistics(
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> ContentStatisticsResponse:
    stats = unwrap(await service.get_content_statistics(admin_id))
    return ContentStatisticsResponse.model_validate(stats, from_attributes=True)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users", response_model=PageResponse[UserResponse], summary="List users")
async def admin_list_users(
    role: Optional[UserRole] = None,
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    keyword: Optional[str] = None,
    sort: Optional[Dict[str, Any]] = Depends(sort_query),
    pagination: Dict[str, Any] = Depends(pagination_query),
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> PageResponse[UserResponse]:
    data = {
        "role": role,
        "status": user_status,
        "keyword": keyword,
        "sort": sort,
        "pagination": pagination,
    }
    page = unwrap(await service.admin_list_users(admin_id, data))
    return to_page_response(page, UserResponse.from_domain)


@router.put("/users/{user_id}/role", response_model=UserResponse, summary="Change a user's role")
async def update_user_role(
    user_id: str,
    request: UpdateUserRoleRequest,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> UserResponse:
    user = unwrap(await service.update_user_role(admin_id, user_id, request.role))
    return UserResponse.from_domain(user)


@router.put("/users/{user_id}/status", response_model=UserResponse, summary="Change a user's status")
async def update_user_status(
    user_id: str,
    request: UpdateUserStatusRequest,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> UserResponse:
    user = unwrap(await service.update_user_status(admin_id, user_id, request.status))
    return UserResponse.from_domain(user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
    description="Permanently removes the account and revokes its sessions.",
)
async def delete_user(
    user_id: str,
    admin_id: str = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service),
) -> Response:
    unwrap(await service.delete_user(admin_id, user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
