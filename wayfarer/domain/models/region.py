"""
Region Model
============

Domain model representing a region: a named area that groups places.
This is a pure domain object with no infrastructure dependencies.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from wayfarer.domain.models.common import ContentStatus, Coordinates
from wayfarer.utils.datetime_utils import now

# Fields an owner edit may change. Status, counters and the reported flag
# have dedicated writers and are never overwritten by an edit.
REGION_EDITABLE_FIELDS = (
    "name",
    "description",
    "short_description",
    "coordinates",
    "address",
    "cover_image",
    "images",
    "tags",
)


@dataclass
class Region:
    """
    Region domain model.

    Counters (visit, favorite, place) are maintained by the service layer and
    never go below zero. ``is_reported`` is set while at least one open
    report targets the region.
    """
    name: str
    created_by: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: Optional[str] = None
    short_description: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    address: Optional[str] = None
    status: ContentStatus = ContentStatus.DRAFT
    cover_image: Optional[str] = None
    images: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    visit_count: int = 0
    favorite_count: int = 0
    place_count: int = 0
    is_reported: bool = False
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        """Check if the given user created this region."""
        return user_id is not None and self.created_by == user_id

    def is_visible_to(self, viewer_id: Optional[str]) -> bool:
        """Published regions are public; drafts are visible to their creator only."""
        if self.status == ContentStatus.PUBLISHED:
            return True
        return self.status == ContentStatus.DRAFT and self.is_owned_by(viewer_id)

    def touch(self) -> None:
        self.updated_at = now()


@dataclass
class RegionFavorite:
    user_id: str
    region_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: now())


@dataclass
class RegionPin:
    """A region pinned by a user. ``display_order`` is dense and zero-based per user."""
    user_id: str
    region_id: str
    display_order: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())


@dataclass
class RegionView:
    """Region annotated with the acting user's favorite and pin state."""
    region: Region
    is_favorited: bool = False
    is_pinned: bool = False
    pin_display_order: Optional[int] = None
