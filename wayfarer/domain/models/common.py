"""
Common Domain Types
===================

Value objects and enumerations shared by several aggregates.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from wayfarer.domain.constants.limits import CoordinateLimits


class ContentStatus(str, Enum):
    """Lifecycle of a Region or Place."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (ContentStatus.ARCHIVED, ContentStatus.REJECTED)


# Allowed content transitions. archived and rejected have no exits.
CONTENT_TRANSITIONS: Dict[ContentStatus, FrozenSet[ContentStatus]] = {
    ContentStatus.DRAFT: frozenset({ContentStatus.PUBLISHED, ContentStatus.REJECTED}),
    ContentStatus.PUBLISHED: frozenset({ContentStatus.ARCHIVED, ContentStatus.REJECTED}),
    ContentStatus.ARCHIVED: frozenset(),
    ContentStatus.REJECTED: frozenset(),
}


def can_transition_content(current: ContentStatus, target: ContentStatus) -> bool:
    """Check whether a content status change is allowed."""
    return target in CONTENT_TRANSITIONS[current]


class UserRole(str, Enum):
    VISITOR = "visitor"
    EDITOR = "editor"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class PlaceCategory(str, Enum):
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    HOTEL = "hotel"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    CULTURE = "culture"
    NATURE = "nature"
    HISTORICAL = "historical"
    RELIGIOUS = "religious"
    TRANSPORTATION = "transportation"
    HOSPITAL = "hospital"
    EDUCATION = "education"
    OFFICE = "office"
    OTHER = "other"


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class CheckinStatus(str, Enum):
    ACTIVE = "active"
    HIDDEN = "hidden"
    REPORTED = "reported"
    DELETED = "deleted"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Coordinates:
    """WGS84 point."""
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not CoordinateLimits.MIN_LATITUDE <= self.latitude <= CoordinateLimits.MAX_LATITUDE:
            raise ValueError(f"Latitude {self.latitude} out of range")
        if not CoordinateLimits.MIN_LONGITUDE <= self.longitude <= CoordinateLimits.MAX_LONGITUDE:
            raise ValueError(f"Longitude {self.longitude} out of range")

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Coordinates"]:
        if not data:
            return None
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))


@dataclass(frozen=True)
class BusinessHours:
    """Opening hours for one day. Times are HH:MM strings."""
    day_of_week: DayOfWeek
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    is_closed: bool = False

    def to_dict(self) -> dict:
        return {
            "day_of_week": self.day_of_week.value,
            "open_time": self.open_time,
            "close_time": self.close_time,
            "is_closed": self.is_closed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BusinessHours":
        return cls(
            day_of_week=DayOfWeek(data["day_of_week"]),
            open_time=data.get("open_time"),
            close_time=data.get("close_time"),
            is_closed=bool(data.get("is_closed", False)),
        )
