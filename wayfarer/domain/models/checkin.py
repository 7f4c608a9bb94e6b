"""
Check-in Model
==============

A user's visit to a place, with optional rating and ordered photos.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from wayfarer.domain.models.common import CheckinStatus, Coordinates
from wayfarer.utils.datetime_utils import now


@dataclass
class Checkin:
    user_id: str
    place_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    comment: Optional[str] = None
    rating: Optional[int] = None
    photos: List[str] = field(default_factory=list)
    user_location: Optional[Coordinates] = None
    status: CheckinStatus = CheckinStatus.ACTIVE
    is_private: bool = False
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.user_id == user_id

    def is_deleted(self) -> bool:
        return self.status == CheckinStatus.DELETED


@dataclass
class CheckinPhoto:
    checkin_id: str
    url: str
    caption: Optional[str] = None
    display_order: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: now())


@dataclass(frozen=True)
class RatingStats:
    """Aggregate of rated, non-deleted check-ins for one place."""
    count: int
    average: Optional[float]
