"""
Manage Reports Use Cases
========================

Community reports against users, places, regions and check-ins, and the
admin review workflow:

    pending -> under_review -> resolved | dismissed

Terminal states are never left. A region or place carries ``is_reported``
while at least one open report targets it.
"""
import logging
from typing import List, Optional

from wayfarer.application.authorization import Capability, authorize, require_active_user
from wayfarer.application.context import Context
from wayfarer.domain.constants.limits import PaginationLimits, ReportLimits
from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.report import (
    Report,
    ReportEntityType,
    ReportStats,
    ReportStatus,
    ReportType,
    can_transition_report,
)
from wayfarer.domain.queries import Page, Pagination, ReportFilter, ReportQuery, SortSpec, UserFilter, UserQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import (
    ErrorCode,
    Ok,
    Result,
    conflict,
    err,
    not_found,
    validation_error,
)
from wayfarer.domain.search.engine import REPORT_SORT_FIELDS, sort_validation_message
from wayfarer.domain.services.email_service import EmailDeliveryError

logger = logging.getLogger(__name__)

MARKED_ENTITY_TYPES = (ReportEntityType.REGION, ReportEntityType.PLACE)


async def _resolve_owner(context: Context, entity_type: ReportEntityType, entity_id: str) -> Optional[str]:
    """
    Owner of the reported entity, or None when the entity does not exist.

    A reported user owns themself.
    """
    if entity_type == ReportEntityType.USER:
        user = await context.users.find_by_id(entity_id)
        return user.id if user else None
    if entity_type == ReportEntityType.REGION:
        region = await context.regions.find_by_id(entity_id)
        return region.created_by if region else None
    if entity_type == ReportEntityType.PLACE:
        place = await context.places.find_by_id(entity_id)
        return place.created_by if place else None
    checkin = await context.checkins.find_by_id(entity_id)
    return checkin.user_id if checkin else None


async def _set_reported(context: Context, entity_type: ReportEntityType, entity_id: str, flag: bool) -> None:
    if entity_type == ReportEntityType.REGION:
        await context.regions.set_reported(entity_id, flag)
    elif entity_type == ReportEntityType.PLACE:
        await context.places.set_reported(entity_id, flag)


class CreateReportUseCase:
    """
    Use case for reporting content or a user.

    One report per reporter and entity. Active admins are notified by e-mail
    once the report is stored; delivery failures do not fail the report.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(
        self,
        reporter_id: str,
        entity_type: ReportEntityType,
        entity_id: str,
        report_type: ReportType,
        reason: str,
    ) -> Result[Report]:
        """
        Execute the create report use case.

        Args:
            reporter_id: Reporting user
            entity_type: Kind of entity reported
            entity_id: Reported entity
            report_type: Report category
            reason: Free text, 10 to 1000 characters

        Returns:
            Ok(pending report)
        """
        reporter = await require_active_user(self._context, reporter_id)
        if reporter.is_err():
            return reporter

        reason = (reason or "").strip()
        if not ReportLimits.MIN_REASON_LENGTH <= len(reason) <= ReportLimits.MAX_REASON_LENGTH:
            return validation_error(
                f"Reason must be between {ReportLimits.MIN_REASON_LENGTH} "
                f"and {ReportLimits.MAX_REASON_LENGTH} characters"
            )

        owner_id = await _resolve_owner(self._context, entity_type, entity_id)
        if owner_id is None:
            return not_found(entity_type.value.capitalize(), entity_id)
        if owner_id == reporter_id:
            return validation_error("You cannot report your own content")

        if await self._context.reports.check_duplicate(reporter_id, entity_type, entity_id):
            return conflict("You have already reported this content")

        report = Report(
            reporter_user_id=reporter_id,
            entity_type=entity_type,
            entity_id=entity_id,
            type=report_type,
            reason=reason,
        )

        async def create(tx: Context) -> Result[Report]:
            try:
                created = await tx.reports.create(report)
            except RepositoryError as exc:
                if exc.code == ErrorCode.CONFLICT:
                    return conflict(exc.message)
                raise
            await _set_reported(tx, entity_type, entity_id, True)
            return Ok(created)

        result = await self._context.with_transaction(create)
        if result.is_ok():
            logger.info(f"Report {report.id} created for {entity_type.value} {entity_id} by {reporter_id}")
            await self._notify_admins(result.unwrap())
        return result

    async def _notify_admins(self, report: Report) -> None:
        admins = await self._context.users.list(UserQuery(
            filter=UserFilter(role=UserRole.ADMIN, status=UserStatus.ACTIVE),
            pagination=Pagination(page=1, limit=PaginationLimits.MAX_PAGE_SIZE),
        ))
        for admin in admins.items:
            try:
                await self._context.email_service.send_report_notification_email(
                    admin.email, admin.name, report.id, report.entity_type.value, report.type.value,
                )
            except EmailDeliveryError as exc:
                logger.warning(f"Report notification to {admin.id} not sent: {exc}")


class ReviewReportUseCase:
    """
    Admin review steps.

    ``mark_under_review`` takes a pending report into review; ``review``
    closes a report under review as resolved or dismissed.
    """

    def __init__(self, context: Context):
        self._context = context

    async def mark_under_review(self, admin_id: str, report_id: str) -> Result[Report]:
        return await self.review(admin_id, report_id, ReportStatus.UNDER_REVIEW)

    async def review(self, admin_id: str, report_id: str, status: ReportStatus,
                     review_notes: Optional[str] = None) -> Result[Report]:
        """
        Move a report to ``status`` and record who reviewed it.

        Args:
            admin_id: Acting admin
            report_id: Report identifier
            status: Target status
            review_notes: Optional notes, at most 1000 characters

        Returns:
            Ok(updated report), or INVALID_TRANSITION when the status machine
            does not allow the step
        """
        actor = await authorize(self._context, admin_id, Capability.MODERATE_REPORTS)
        if actor.is_err():
            return actor

        if review_notes is not None and len(review_notes) > ReportLimits.MAX_REVIEW_NOTES_LENGTH:
            return validation_error(
                f"Review notes must be at most {ReportLimits.MAX_REVIEW_NOTES_LENGTH} characters"
            )

        report = await self._context.reports.find_by_id(report_id)
        if report is None:
            return not_found("Report", report_id)
        if not can_transition_report(report.status, status):
            return err(
                ErrorCode.INVALID_TRANSITION,
                f"Cannot move report from '{report.status.value}' to '{status.value}'",
            )

        async def apply(tx: Context) -> Result[Report]:
            updated = await tx.reports.update_status(report_id, status, admin_id, review_notes)
            if status.is_terminal and report.entity_type in MARKED_ENTITY_TYPES:
                if await tx.reports.count_open_for_entity(report.entity_type, report.entity_id) == 0:
                    await self._clear_marker(tx, report)
            return Ok(updated)

        result = await self._context.with_transaction(apply)
        if result.is_ok():
            logger.info(f"Report {report_id} moved to {status.value} by {admin_id}")
        return result

    @staticmethod
    async def _clear_marker(tx: Context, report: Report) -> None:
        # The reported entity may have been deleted in the meantime.
        if report.entity_type == ReportEntityType.REGION:
            if await tx.regions.find_by_id(report.entity_id) is None:
                return
        elif await tx.places.find_by_id(report.entity_id) is None:
            return
        await _set_reported(tx, report.entity_type, report.entity_id, False)


class ListReportsUseCase:
    """Admin listing of reports with filters, sort and pagination."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, admin_id: str, report_filter: Optional[ReportFilter] = None,
                      sort: Optional[SortSpec] = None,
                      pagination: Optional[Pagination] = None) -> Result[Page[Report]]:
        actor = await authorize(self._context, admin_id, Capability.MODERATE_REPORTS)
        if actor.is_err():
            return actor

        pagination = pagination or Pagination()
        message = pagination.validation_message() or sort_validation_message(sort, REPORT_SORT_FIELDS)
        if message:
            return validation_error(message)

        return Ok(await self._context.reports.list(ReportQuery(
            filter=report_filter or ReportFilter(),
            sort=sort,
            pagination=pagination,
        )))


class GetEntityReportsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, admin_id: str, entity_type: ReportEntityType,
                      entity_id: str) -> Result[List[Report]]:
        actor = await authorize(self._context, admin_id, Capability.MODERATE_REPORTS)
        if actor.is_err():
            return actor
        return Ok(await self._context.reports.find_by_entity(entity_type, entity_id))


class GetReportStatisticsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, admin_id: str) -> Result[ReportStats]:
        actor = await authorize(self._context, admin_id, Capability.VIEW_STATISTICS)
        if actor.is_err():
            return actor
        return Ok(await self._context.reports.get_stats())


class GetMyReportsUseCase:
    """Reports filed by the acting user, newest first."""

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str) -> Result[List[Report]]:
        actor = await require_active_user(self._context, user_id)
        if actor.is_err():
            return actor
        return Ok(await self._context.reports.find_by_reporter(user_id))
