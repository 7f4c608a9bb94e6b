"""
Place Model
===========

Domain model representing a place inside a region, plus the favorite and
editor-permission records attached to it.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from wayfarer.domain.models.common import BusinessHours, ContentStatus, Coordinates, PlaceCategory
from wayfarer.utils.datetime_utils import now

PLACE_EDITABLE_FIELDS = (
    "name",
    "category",
    "region_id",
    "coordinates",
    "address",
    "description",
    "short_description",
    "phone",
    "website",
    "email",
    "cover_image",
    "images",
    "tags",
    "business_hours",
)


@dataclass
class Place:
    """
    Place domain model.

    Belongs to exactly one region. ``average_rating`` is None until the first
    rated check-in.
    """
    name: str
    category: PlaceCategory
    region_id: str
    coordinates: Coordinates
    address: str
    created_by: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: Optional[str] = None
    short_description: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    status: ContentStatus = ContentStatus.DRAFT
    cover_image: Optional[str] = None
    images: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    business_hours: List[BusinessHours] = field(default_factory=list)
    visit_count: int = 0
    favorite_count: int = 0
    checkin_count: int = 0
    average_rating: Optional[float] = None
    is_reported: bool = False
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.created_by == user_id

    def is_visible_to(self, viewer_id: Optional[str]) -> bool:
        if self.status == ContentStatus.PUBLISHED:
            return True
        return self.status == ContentStatus.DRAFT and self.is_owned_by(viewer_id)

    def is_published(self) -> bool:
        return self.status == ContentStatus.PUBLISHED

    def touch(self) -> None:
        self.updated_at = now()


@dataclass
class PlaceFavorite:
    user_id: str
    place_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: now())


@dataclass
class PlacePermission:
    """
    Editor permission granted on a place.

    An invitation is pending until ``accepted_at`` is set; pending
    permissions grant nothing.
    """
    place_id: str
    user_id: str
    invited_by: str
    can_edit: bool = True
    can_delete: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    invited_at: datetime = field(default_factory=lambda: now())
    accepted_at: Optional[datetime] = None

    def is_accepted(self) -> bool:
        return self.accepted_at is not None

    def accept(self) -> None:
        self.accepted_at = now()


@dataclass
class PlaceView:
    """Place annotated with the acting user's favorite and permission state."""
    place: Place
    is_favorited: bool = False
    has_edit_permission: bool = False
    has_delete_permission: bool = False


@dataclass
class MapLocation:
    """Minimal projection of a place for map rendering."""
    id: str
    name: str
    coordinates: Coordinates
    category: PlaceCategory
