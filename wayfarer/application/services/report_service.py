"""
Report Service
==============

Application service for community reports and their review by admins.
"""
from typing import List, Optional, Union

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.report_dto import CreateReportRequest, ReportListRequest, ReviewReportRequest
from wayfarer.application.use_cases.reports.manage_reports import (
    CreateReportUseCase,
    GetEntityReportsUseCase,
    GetMyReportsUseCase,
    GetReportStatisticsUseCase,
    ListReportsUseCase,
    ReviewReportUseCase,
)
from wayfarer.domain.models.report import Report, ReportEntityType, ReportStats
from wayfarer.domain.queries import Page, ReportFilter
from wayfarer.domain.result import ErrorCode, Result, validation_error


class ReportService:
    """
    Application service for reports.

    Reports move pending -> under_review -> resolved | dismissed; any other
    step is INVALID_TRANSITION.
    """

    def __init__(self, context: Context):
        self._create_use_case = CreateReportUseCase(context)
        self._review_use_case = ReviewReportUseCase(context)
        self._list_use_case = ListReportsUseCase(context)
        self._entity_use_case = GetEntityReportsUseCase(context)
        self._mine_use_case = GetMyReportsUseCase(context)
        self._stats_use_case = GetReportStatisticsUseCase(context)

    @service_boundary("create report", ErrorCode.QUERY_FAILED)
    async def create_report(self, reporter_id: str, data: Input) -> Result[Report]:
        """
        File a report against a user, place, region or check-in.

        Args:
            reporter_id: Reporting user
            data: CreateReportRequest or an equivalent mapping

        Returns:
            Ok(pending report) or Err
        """
        request = parse_input(CreateReportRequest, data)
        return await self._create_use_case.execute(
            reporter_id, request.entity_type, request.entity_id, request.type, request.reason,
        )

    @service_boundary("list my reports")
    async def get_my_reports(self, user_id: str) -> Result[List[Report]]:
        return await self._mine_use_case.execute(user_id)

    @service_boundary("update report status", ErrorCode.QUERY_FAILED)
    async def mark_report_under_review(self, admin_id: str, report_id: str) -> Result[Report]:
        return await self._review_use_case.mark_under_review(admin_id, report_id)

    @service_boundary("update report status", ErrorCode.QUERY_FAILED)
    async def review_report(self, admin_id: str, report_id: str, data: Input) -> Result[Report]:
        request = parse_input(ReviewReportRequest, data)
        return await self._review_use_case.review(admin_id, report_id, request.status, request.review_notes)

    @service_boundary("list reports")
    async def admin_list_reports(self, admin_id: str, data: Optional[Input] = None) -> Result[Page[Report]]:
        request = parse_input(ReportListRequest, data or {})
        report_filter = ReportFilter(
            status=request.status,
            type=request.type,
            entity_type=request.entity_type,
            entity_id=request.entity_id,
            reporter_user_id=request.reporter_user_id,
        )
        return await self._list_use_case.execute(
            admin_id,
            report_filter,
            request.sort.to_domain() if request.sort else None,
            request.pagination.to_domain(),
        )

    @service_boundary("get entity reports")
    async def get_entity_reports(self, admin_id: str, entity_type: Union[ReportEntityType, str],
                                 entity_id: str) -> Result[List[Report]]:
        try:
            entity_type = ReportEntityType(entity_type)
        except ValueError:
            return validation_error(f"Invalid entity type '{entity_type}'")
        return await self._entity_use_case.execute(admin_id, entity_type, entity_id)

    @service_boundary("get report statistics")
    async def get_report_statistics(self, admin_id: str) -> Result[ReportStats]:
        return await self._stats_use_case.execute(admin_id)
