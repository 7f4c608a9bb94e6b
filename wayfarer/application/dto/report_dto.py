"""
Report DTO
==========

Pydantic models for reports and moderation.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from wayfarer.application.dto.common_dto import PaginationDTO, SortDTO
from wayfarer.domain.constants.limits import ReportLimits
from wayfarer.domain.models.report import Report, ReportEntityType, ReportStats, ReportStatus, ReportType


class CreateReportRequest(BaseModel):
    """DTO for reporting a user, place, region or check-in."""
    entity_type: ReportEntityType
    entity_id: str
    type: ReportType
    reason: str = Field(..., min_length=ReportLimits.MIN_REASON_LENGTH, max_length=ReportLimits.MAX_REASON_LENGTH)


class ReviewReportRequest(BaseModel):
    """
    Admin review step. Only resolved or dismissed are reachable from
    under_review; anything else is an invalid transition.
    """
    status: ReportStatus
    review_notes: Optional[str] = Field(None, max_length=ReportLimits.MAX_REVIEW_NOTES_LENGTH)


class ReportListRequest(BaseModel):
    status: Optional[ReportStatus] = None
    type: Optional[ReportType] = None
    entity_type: Optional[ReportEntityType] = None
    entity_id: Optional[str] = None
    reporter_user_id: Optional[str] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class ReportResponse(BaseModel):
    id: str
    reporter_user_id: str
    entity_type: ReportEntityType
    entity_id: str
    type: ReportType
    reason: str
    status: ReportStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, report: Report) -> "ReportResponse":
        return cls(
            id=report.id,
            reporter_user_id=report.reporter_user_id,
            entity_type=report.entity_type,
            entity_id=report.entity_id,
            type=report.type,
            reason=report.reason,
            status=report.status,
            reviewed_by=report.reviewed_by,
            reviewed_at=report.reviewed_at,
            review_notes=report.review_notes,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )


class ReportStatsResponse(BaseModel):
    total_reports: int
    pending_reports: int
    under_review_reports: int
    resolved_reports: int
    dismissed_reports: int
    reports_this_week: int
    reports_this_month: int
    top_report_types: List[Dict[str, Any]]

    @classmethod
    def from_domain(cls, stats: ReportStats) -> "ReportStatsResponse":
        return cls(
            total_reports=stats.total_reports,
            pending_reports=stats.pending_reports,
            under_review_reports=stats.under_review_reports,
            resolved_reports=stats.resolved_reports,
            dismissed_reports=stats.dismissed_reports,
            reports_this_week=stats.reports_this_week,
            reports_this_month=stats.reports_this_month,
            top_report_types=list(stats.top_report_types),
        )
