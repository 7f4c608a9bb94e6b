"""
MongoDB Report Repository
=========================

Concrete implementation of ReportRepository using MongoDB.
"""
from datetime import timedelta
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from wayfarer.domain.constants.fields import CommonFields, ReportFields
from wayfarer.domain.models.report import Report, ReportEntityType, ReportStats, ReportStatus, ReportType
from wayfarer.domain.queries import Page, ReportFilter, ReportQuery
from wayfarer.domain.repositories.report_repository import ReportRepository
from wayfarer.domain.search.engine import REPORT_SORT_FIELDS
from wayfarer.infrastructure.db.base import MongoRepository, mongo_errors, mongo_sort
from wayfarer.utils.datetime_utils import now

OPEN_STATUSES = [status.value for status in ReportStatus if status.is_open]


def report_filter_document(flt: ReportFilter) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if flt.status is not None:
        query[ReportFields.STATUS] = flt.status.value
    if flt.type is not None:
        query[ReportFields.TYPE] = flt.type.value
    if flt.entity_type is not None:
        query[ReportFields.ENTITY_TYPE] = flt.entity_type.value
    if flt.entity_id is not None:
        query[ReportFields.ENTITY_ID] = flt.entity_id
    if flt.reporter_user_id is not None:
        query[ReportFields.REPORTER_USER_ID] = flt.reporter_user_id

    created: Dict[str, Any] = {}
    if flt.created_from is not None:
        created["$gte"] = flt.created_from
    if flt.created_to is not None:
        created["$lte"] = flt.created_to
    if created:
        query[ReportFields.CREATED_AT] = created
    return query


class MongoReportRepository(MongoRepository, ReportRepository):
    """
    MongoDB implementation of ReportRepository.

    A unique (reporter_user_id, entity_type, entity_id) index rejects duplicate reports.
    """

    ENTITY = "Report"

    def _to_entity(self, doc: dict) -> Report:
        """Convert MongoDB document to Report entity."""
        return Report(
            id=doc[CommonFields.MONGO_ID],
            reporter_user_id=doc[ReportFields.REPORTER_USER_ID],
            entity_type=ReportEntityType(doc[ReportFields.ENTITY_TYPE]),
            entity_id=doc[ReportFields.ENTITY_ID],
            type=ReportType(doc[ReportFields.TYPE]),
            reason=doc[ReportFields.REASON],
            status=ReportStatus(doc.get(ReportFields.STATUS, ReportStatus.PENDING.value)),
            reviewed_by=doc.get(ReportFields.REVIEWED_BY),
            reviewed_at=doc.get(ReportFields.REVIEWED_AT),
            review_notes=doc.get(ReportFields.REVIEW_NOTES),
            created_at=doc[ReportFields.CREATED_AT],
            updated_at=doc[ReportFields.UPDATED_AT],
        )

    def _to_document(self, report: Report) -> dict:
        """Convert Report entity to MongoDB document."""
        return {
            CommonFields.MONGO_ID: report.id,
            ReportFields.REPORTER_USER_ID: report.reporter_user_id,
            ReportFields.ENTITY_TYPE: report.entity_type.value,
            ReportFields.ENTITY_ID: report.entity_id,
            ReportFields.TYPE: report.type.value,
            ReportFields.REASON: report.reason,
            ReportFields.STATUS: report.status.value,
            ReportFields.REVIEWED_BY: report.reviewed_by,
            ReportFields.REVIEWED_AT: report.reviewed_at,
            ReportFields.REVIEW_NOTES: report.review_notes,
            ReportFields.CREATED_AT: report.created_at,
            ReportFields.UPDATED_AT: report.updated_at,
        }

    async def create(self, report: Report) -> Report:
        with mongo_errors("create report", "You have already reported this content"):
            await self._collection.insert_one(self._to_document(report), session=self._session)
        return report

    async def find_by_id(self, report_id: str) -> Optional[Report]:
        return await self._find_one({CommonFields.MONGO_ID: report_id}, "find report")

    async def find_by_entity(self, entity_type: ReportEntityType, entity_id: str) -> List[Report]:
        return await self._find_many(
            {ReportFields.ENTITY_TYPE: entity_type.value, ReportFields.ENTITY_ID: entity_id},
            "list entity reports",
            sort=[(ReportFields.CREATED_AT, DESCENDING)],
        )

    async def find_by_reporter(self, reporter_user_id: str) -> List[Report]:
        return await self._find_many(
            {ReportFields.REPORTER_USER_ID: reporter_user_id},
            "list reporter reports",
            sort=[(ReportFields.CREATED_AT, DESCENDING)],
        )

    async def check_duplicate(self, reporter_user_id: str, entity_type: ReportEntityType,
                              entity_id: str) -> bool:
        with mongo_errors("check duplicate report"):
            count = await self._collection.count_documents(
                {
                    ReportFields.REPORTER_USER_ID: reporter_user_id,
                    ReportFields.ENTITY_TYPE: entity_type.value,
                    ReportFields.ENTITY_ID: entity_id,
                },
                limit=1,
                session=self._session,
            )
        return count > 0

    async def update_status(
        self,
        report_id: str,
        status: ReportStatus,
        reviewed_by: str,
        review_notes: Optional[str] = None,
    ) -> Report:
        stamp = now()
        changes = {
            ReportFields.STATUS: status.value,
            ReportFields.REVIEWED_BY: reviewed_by,
            ReportFields.REVIEWED_AT: stamp,
            ReportFields.UPDATED_AT: stamp,
        }
        if review_notes is not None:
            changes[ReportFields.REVIEW_NOTES] = review_notes
        return await self._update_by_id(report_id, {"$set": changes}, "update report status")

    async def list(self, query: ReportQuery) -> Page[Report]:
        return await self._find_page(
            report_filter_document(query.filter),
            mongo_sort(query.sort, REPORT_SORT_FIELDS),
            query.pagination,
            "list reports",
        )

    async def count_open_for_entity(self, entity_type: ReportEntityType, entity_id: str) -> int:
        with mongo_errors("count open reports"):
            return await self._collection.count_documents(
                {
                    ReportFields.ENTITY_TYPE: entity_type.value,
                    ReportFields.ENTITY_ID: entity_id,
                    ReportFields.STATUS: {"$in": OPEN_STATUSES},
                },
                session=self._session,
            )

    async def get_stats(self) -> ReportStats:
        current = now()
        with mongo_errors("compute report statistics"):
            status_cursor = await self._collection.aggregate(
                [{"$group": {"_id": f"${ReportFields.STATUS}", "count": {"$sum": 1}}}],
                session=self._session,
            )
            by_status = {row["_id"]: row["count"] for row in await status_cursor.to_list(length=None)}

            type_cursor = await self._collection.aggregate(
                [
                    {"$group": {"_id": f"${ReportFields.TYPE}", "count": {"$sum": 1}}},
                    {"$sort": {"count": -1, "_id": 1}},
                    {"$limit": 5},
                ],
                session=self._session,
            )
            top_types = await type_cursor.to_list(length=None)

            this_week = await self._collection.count_documents(
                {ReportFields.CREATED_AT: {"$gte": current - timedelta(days=7)}}, session=self._session,
            )
            this_month = await self._collection.count_documents(
                {ReportFields.CREATED_AT: {"$gte": current - timedelta(days=30)}}, session=self._session,
            )

        return ReportStats(
            total_reports=sum(by_status.values()),
            pending_reports=by_status.get(ReportStatus.PENDING.value, 0),
            under_review_reports=by_status.get(ReportStatus.UNDER_REVIEW.value, 0),
            resolved_reports=by_status.get(ReportStatus.RESOLVED.value, 0),
            dismissed_reports=by_status.get(ReportStatus.DISMISSED.value, 0),
            reports_this_week=this_week,
            reports_this_month=this_month,
            top_report_types=[{"type": row["_id"], "count": row["count"]} for row in top_types],
        )

    async def delete(self, report_id: str) -> None:
        await self._delete_by_id(report_id, "delete report")
