"""
Report Repository Interface
===========================

Abstract interface for moderation report data access.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from wayfarer.domain.models.report import Report, ReportEntityType, ReportStats, ReportStatus
from wayfarer.domain.queries import Page, ReportQuery


class ReportRepository(ABC):
    """
    Abstract repository for report persistence operations.

    At most one report exists per (reporter, entity type, entity id).
    """

    @abstractmethod
    async def create(self, report: Report) -> Report:
        """
        Create a new report.

        Args:
            report: Report entity to create

        Returns:
            Created report entity

        Raises:
            RepositoryError: CONFLICT if the reporter already reported the entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, report_id: str) -> Optional[Report]:
        pass

    @abstractmethod
    async def find_by_entity(self, entity_type: ReportEntityType, entity_id: str) -> List[Report]:
        pass

    @abstractmethod
    async def find_by_reporter(self, reporter_user_id: str) -> List[Report]:
        pass

    @abstractmethod
    async def check_duplicate(self, reporter_user_id: str, entity_type: ReportEntityType,
                              entity_id: str) -> bool:
        pass

    @abstractmethod
    async def update_status(
        self,
        report_id: str,
        status: ReportStatus,
        reviewed_by: str,
        review_notes: Optional[str] = None,
    ) -> Report:
        """
        Record a review step.

        Args:
            report_id: Report identifier
            status: New status (transition rules are enforced by the caller)
            reviewed_by: Admin user performing the step
            review_notes: Optional notes

        Returns:
            Updated report with ``reviewed_by`` and ``reviewed_at`` set
        """
        pass

    @abstractmethod
    async def list(self, query: ReportQuery) -> Page[Report]:
        pass

    @abstractmethod
    async def count_open_for_entity(self, entity_type: ReportEntityType, entity_id: str) -> int:
        """Number of pending or under-review reports for an entity."""
        pass

    @abstractmethod
    async def get_stats(self) -> ReportStats:
        pass

    @abstractmethod
    async def delete(self, report_id: str) -> None:
        pass
