"""
Report Controller
=================

Content reports filed by signed-in users. Moderation lives under /admin.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from wayfarer.api.v1.dependencies import get_current_user_id, get_report_service
from wayfarer.api.v1.errors import unwrap
from wayfarer.application.dto.report_dto import CreateReportRequest, ReportResponse
from wayfarer.application.services.report_service import ReportService

router = APIRouter(tags=["reports"])


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a region or place",
    description="One report per user and entity. Reporting your own content is rejected.",
)
async def create_report(
    request: CreateReportRequest,
    user_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = unwrap(await service.create_report(user_id, request))
    return ReportResponse.from_domain(report)


@router.get("/mine", response_model=List[ReportResponse], summary="Reports filed by the caller")
async def get_my_reports(
    user_id: str = Depends(get_current_user_id),
    service: ReportService = Depends(get_report_service),
) -> List[ReportResponse]:
    reports = unwrap(await service.get_my_reports(user_id))
    return [ReportResponse.from_domain(report) for report in reports]
