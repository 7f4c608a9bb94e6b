"""
Query Objects
=============

Filter, sort and pagination values passed to repository ``list``/``search``
operations, and the ``Page`` they return.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from wayfarer.domain.constants.limits import PaginationLimits
from wayfarer.domain.models.common import (
    CheckinStatus,
    ContentStatus,
    Coordinates,
    PlaceCategory,
    SortDirection,
    UserRole,
    UserStatus,
)
from wayfarer.domain.models.report import ReportEntityType, ReportStatus, ReportType

T = TypeVar("T")


@dataclass(frozen=True)
class Pagination:
    """Page/limit window. ``page`` starts at 1."""
    page: int = 1
    limit: int = PaginationLimits.DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def validation_message(self) -> Optional[str]:
        """Return a message describing why the window is invalid, or None."""
        if self.page < 1:
            return "Page must be at least 1"
        if self.limit < 1 or self.limit > PaginationLimits.MAX_PAGE_SIZE:
            return f"Limit must be between 1 and {PaginationLimits.MAX_PAGE_SIZE}"
        return None


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class LocationFilter:
    coordinates: Coordinates
    radius_km: float


@dataclass
class RegionFilter:
    status: Optional[ContentStatus] = None
    created_by: Optional[str] = None
    keyword: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    location: Optional[LocationFilter] = None


@dataclass
class PlaceFilter:
    region_id: Optional[str] = None
    category: Optional[PlaceCategory] = None
    status: Optional[ContentStatus] = None
    created_by: Optional[str] = None
    keyword: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    location: Optional[LocationFilter] = None
    has_rating: Optional[bool] = None
    min_rating: Optional[float] = None


@dataclass
class RegionQuery:
    """
    Region listing/search query.

    ``viewer_id`` is the acting user for the visibility rule. Admin moderation
    listings set ``enforce_visibility=False``.
    """
    filter: RegionFilter = field(default_factory=RegionFilter)
    sort: Optional[SortSpec] = None
    pagination: Pagination = field(default_factory=Pagination)
    viewer_id: Optional[str] = None
    enforce_visibility: bool = True


@dataclass
class PlaceQuery:
    filter: PlaceFilter = field(default_factory=PlaceFilter)
    sort: Optional[SortSpec] = None
    pagination: Pagination = field(default_factory=Pagination)
    viewer_id: Optional[str] = None
    enforce_visibility: bool = True


@dataclass
class CheckinFilter:
    user_id: Optional[str] = None
    place_id: Optional[str] = None
    status: Optional[CheckinStatus] = None
    has_rating: Optional[bool] = None
    is_private: Optional[bool] = None
    include_deleted: bool = False


@dataclass
class CheckinQuery:
    filter: CheckinFilter = field(default_factory=CheckinFilter)
    sort: Optional[SortSpec] = None
    pagination: Pagination = field(default_factory=Pagination)


@dataclass
class ReportFilter:
    status: Optional[ReportStatus] = None
    type: Optional[ReportType] = None
    entity_type: Optional[ReportEntityType] = None
    entity_id: Optional[str] = None
    reporter_user_id: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


@dataclass
class ReportQuery:
    filter: ReportFilter = field(default_factory=ReportFilter)
    sort: Optional[SortSpec] = None
    pagination: Pagination = field(default_factory=Pagination)


@dataclass
class UserFilter:
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    keyword: Optional[str] = None


@dataclass
class UserQuery:
    filter: UserFilter = field(default_factory=UserFilter)
    sort: Optional[SortSpec] = None
    pagination: Pagination = field(default_factory=Pagination)


@dataclass
class Page(Generic[T]):
    """
    One page of results.

    ``total_count`` is the size of the filtered set before pagination.
    """
    items: List[T]
    total_count: int
    page: int = 1
    limit: int = PaginationLimits.DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total_count + self.limit - 1) // self.limit

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages
