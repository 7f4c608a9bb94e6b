"""
Report Model
============

User-submitted report against a user, place, region or check-in, moderated by
administrators through a strict status machine.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from wayfarer.utils.datetime_utils import now


class ReportStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"

    @property
    def is_terminal(self) -> bool:
        return self in (ReportStatus.RESOLVED, ReportStatus.DISMISSED)

    @property
    def is_open(self) -> bool:
        return not self.is_terminal


class ReportType(str, Enum):
    SPAM = "spam"
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    HARASSMENT = "harassment"
    FALSE_INFORMATION = "false_information"
    COPYRIGHT_VIOLATION = "copyright_violation"
    OTHER = "other"


class ReportEntityType(str, Enum):
    USER = "user"
    PLACE = "place"
    REGION = "region"
    CHECKIN = "checkin"


REPORT_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.UNDER_REVIEW}),
    ReportStatus.UNDER_REVIEW: frozenset({ReportStatus.RESOLVED, ReportStatus.DISMISSED}),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.DISMISSED: frozenset(),
}


def can_transition_report(current: ReportStatus, target: ReportStatus) -> bool:
    return target in REPORT_TRANSITIONS[current]


@dataclass
class Report:
    reporter_user_id: str
    entity_type: ReportEntityType
    entity_id: str
    type: ReportType
    reason: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: ReportStatus = ReportStatus.PENDING
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())


@dataclass
class ReportStats:
    total_reports: int = 0
    pending_reports: int = 0
    under_review_reports: int = 0
    resolved_reports: int = 0
    dismissed_reports: int = 0
    reports_this_week: int = 0
    reports_this_month: int = 0
    top_report_types: List[Dict[str, object]] = field(default_factory=list)
