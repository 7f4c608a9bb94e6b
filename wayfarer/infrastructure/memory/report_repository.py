"""In-memory ReportRepository."""
import copy
from collections import Counter
from datetime import timedelta
from typing import List, Optional

from wayfarer.domain.models.report import Report, ReportEntityType, ReportStats, ReportStatus
from wayfarer.domain.queries import Page, ReportFilter, ReportQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.report_repository import ReportRepository
from wayfarer.domain.search.engine import REPORT_SORT_FIELDS, in_date_range, paginate, sort_items
from wayfarer.infrastructure.memory.store import InMemoryRepository, newest_first
from wayfarer.utils.datetime_utils import now


def _matches(report: Report, flt: ReportFilter) -> bool:
    if flt.status is not None and report.status != flt.status:
        return False
    if flt.type is not None and report.type != flt.type:
        return False
    if flt.entity_type is not None and report.entity_type != flt.entity_type:
        return False
    if flt.entity_id is not None and report.entity_id != flt.entity_id:
        return False
    if flt.reporter_user_id is not None and report.reporter_user_id != flt.reporter_user_id:
        return False
    return in_date_range(report.created_at, flt.created_from, flt.created_to)


class InMemoryReportRepository(InMemoryRepository, ReportRepository):
    TABLE = "reports"
    ENTITY = "Report"

    def _duplicate(self, reporter_user_id: str, entity_type: ReportEntityType, entity_id: str) -> bool:
        return any(
            row.reporter_user_id == reporter_user_id
            and row.entity_type == entity_type
            and row.entity_id == entity_id
            for row in self._rows.values()
        )

    async def create(self, report: Report) -> Report:
        async with self._store.lock:
            if self._duplicate(report.reporter_user_id, report.entity_type, report.entity_id):
                raise RepositoryError.conflict("You have already reported this content")
            return self._put(report)

    async def find_by_id(self, report_id: str) -> Optional[Report]:
        return self._get(report_id)

    async def find_by_entity(self, entity_type: ReportEntityType, entity_id: str) -> List[Report]:
        return self._copies(newest_first(
            row for row in self._rows.values()
            if row.entity_type == entity_type and row.entity_id == entity_id
        ))

    async def find_by_reporter(self, reporter_user_id: str) -> List[Report]:
        return self._copies(newest_first(
            row for row in self._rows.values() if row.reporter_user_id == reporter_user_id
        ))

    async def check_duplicate(self, reporter_user_id: str, entity_type: ReportEntityType,
                              entity_id: str) -> bool:
        return self._duplicate(reporter_user_id, entity_type, entity_id)

    async def update_status(
        self,
        report_id: str,
        status: ReportStatus,
        reviewed_by: str,
        review_notes: Optional[str] = None,
    ) -> Report:
        async with self._store.lock:
            row = self._require(report_id)
            stamp = now()
            row.status = status
            row.reviewed_by = reviewed_by
            row.reviewed_at = stamp
            if review_notes is not None:
                row.review_notes = review_notes
            row.updated_at = stamp
            return copy.deepcopy(row)

    async def list(self, query: ReportQuery) -> Page[Report]:
        matched = [row for row in self._all() if _matches(row, query.filter)]
        return paginate(sort_items(matched, query.sort, REPORT_SORT_FIELDS), query.pagination)

    async def count_open_for_entity(self, entity_type: ReportEntityType, entity_id: str) -> int:
        return sum(
            1 for row in self._rows.values()
            if row.entity_type == entity_type and row.entity_id == entity_id and row.status.is_open
        )

    async def get_stats(self) -> ReportStats:
        rows = list(self._rows.values())
        current = now()
        by_status = Counter(row.status for row in rows)
        by_type = Counter(row.type for row in rows)
        return ReportStats(
            total_reports=len(rows),
            pending_reports=by_status[ReportStatus.PENDING],
            under_review_reports=by_status[ReportStatus.UNDER_REVIEW],
            resolved_reports=by_status[ReportStatus.RESOLVED],
            dismissed_reports=by_status[ReportStatus.DISMISSED],
            reports_this_week=sum(1 for row in rows if row.created_at >= current - timedelta(days=7)),
            reports_this_month=sum(1 for row in rows if row.created_at >= current - timedelta(days=30)),
            top_report_types=[
                {"type": report_type.value, "count": count}
                for report_type, count in by_type.most_common(5)
            ],
        )

    async def delete(self, report_id: str) -> None:
        async with self._store.lock:
            self._require(report_id)
            del self._rows[report_id]
