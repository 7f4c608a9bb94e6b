"""
Check-in Repository Interface
=============================

Abstract interfaces for check-in and check-in photo data access.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from wayfarer.domain.models.checkin import Checkin, CheckinPhoto, RatingStats
from wayfarer.domain.models.common import CheckinStatus
from wayfarer.domain.queries import CheckinQuery, Page


class CheckinRepository(ABC):
    """Abstract repository for check-in persistence operations."""

    @abstractmethod
    async def create(self, checkin: Checkin) -> Checkin:
        pass

    @abstractmethod
    async def find_by_id(self, checkin_id: str) -> Optional[Checkin]:
        pass

    @abstractmethod
    async def update(self, checkin: Checkin) -> Checkin:
        pass

    @abstractmethod
    async def update_status(self, checkin_id: str, status: CheckinStatus) -> Checkin:
        pass

    @abstractmethod
    async def list(self, query: CheckinQuery) -> Page[Checkin]:
        """
        List check-ins matching a filter.

        Deleted check-ins are excluded unless ``include_deleted`` is set.
        """
        pass

    @abstractmethod
    async def has_recent_checkin(self, user_id: str, place_id: str, since: datetime) -> bool:
        """
        Check whether the user has a non-deleted check-in at the place created at or after ``since``.

        Args:
            user_id: User identifier
            place_id: Place identifier
            since: Start of the window

        Returns:
            True if such a check-in exists
        """
        pass

    @abstractmethod
    async def get_place_rating_stats(self, place_id: str) -> RatingStats:
        """Count and average of ratings over non-deleted check-ins of a place."""
        pass


class CheckinPhotoRepository(ABC):
    """Abstract repository for check-in photos, ordered by ``display_order``."""

    @abstractmethod
    async def add(self, checkin_id: str, photos: List[CheckinPhoto]) -> List[CheckinPhoto]:
        """
        Append photos after the existing ones.

        Args:
            checkin_id: Check-in identifier
            photos: Photos in the order they should appear

        Returns:
            Stored photos with their assigned ``display_order``
        """
        pass

    @abstractmethod
    async def find_by_checkin(self, checkin_id: str) -> List[CheckinPhoto]:
        pass

    @abstractmethod
    async def remove(self, photo_id: str) -> None:
        pass
