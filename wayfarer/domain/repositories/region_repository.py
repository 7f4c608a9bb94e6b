"""
Region Repository Interface
===========================

Abstract interfaces for region, region favorite and region pin data access.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import Region, RegionFavorite, RegionPin
from wayfarer.domain.queries import Page, RegionQuery


class RegionRepository(ABC):
    """
    Abstract repository for region persistence operations.

    Lookups that match nothing return None. Writes against a missing id raise
    RepositoryError(NOT_FOUND).
    """

    @abstractmethod
    async def create(self, region: Region) -> Region:
        """
        Create a new region.

        Args:
            region: Region entity to create

        Returns:
            Created region entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, region_id: str) -> Optional[Region]:
        """
        Find a region by its ID.

        Args:
            region_id: Unique region identifier

        Returns:
            Region entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, region: Region) -> Region:
        """
        Write the owner-editable fields of an existing region.

        Status, counters and the reported marker keep their stored values;
        they change only through their dedicated writers.

        Args:
            region: Region entity with updated data

        Returns:
            Updated region entity
        """
        pass

    @abstractmethod
    async def update_status(self, region_id: str, status: ContentStatus) -> Region:
        """
        Set the content status of a region.

        Args:
            region_id: Region identifier
            status: New status (transition rules are enforced by the caller)

        Returns:
            Updated region entity
        """
        pass

    @abstractmethod
    async def set_reported(self, region_id: str, is_reported: bool) -> None:
        """Set or clear the community "reported" marker."""
        pass

    @abstractmethod
    async def delete(self, region_id: str) -> None:
        """
        Delete a region permanently.

        Args:
            region_id: Region identifier
        """
        pass

    @abstractmethod
    async def list(self, query: RegionQuery) -> Page[Region]:
        """
        List regions matching a filter with sort and pagination.

        Args:
            query: Filter, sort, pagination and visibility settings

        Returns:
            Page of regions with the total size of the filtered set
        """
        pass

    @abstractmethod
    async def search(self, query: RegionQuery) -> Page[Region]:
        """
        Keyword/tag/location search. Same contract as ``list``.
        """
        pass

    @abstractmethod
    async def get_featured(self, limit: int) -> List[Region]:
        """Most visited published regions."""
        pass

    @abstractmethod
    async def get_by_creator(self, user_id: str, status: Optional[ContentStatus] = None) -> List[Region]:
        pass

    @abstractmethod
    async def increment_visit_count(self, region_id: str) -> None:
        pass

    @abstractmethod
    async def adjust_place_count(self, region_id: str, delta: int) -> None:
        """Add ``delta`` to the place counter, clamped at zero."""
        pass

    @abstractmethod
    async def adjust_favorite_count(self, region_id: str, delta: int) -> None:
        """Add ``delta`` to the favorite counter, clamped at zero."""
        pass


class RegionFavoriteRepository(ABC):
    """Abstract repository for region favorites. One row per (user, region)."""

    @abstractmethod
    async def add(self, favorite: RegionFavorite) -> RegionFavorite:
        """
        Insert a favorite.

        Raises:
            RepositoryError: CONFLICT if the pair is already favorited
        """
        pass

    @abstractmethod
    async def remove(self, user_id: str, region_id: str) -> None:
        """
        Delete a favorite.

        Raises:
            RepositoryError: NOT_FOUND if the pair is not favorited
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[RegionFavorite]:
        """Favorites of a user, most recent first. ``limit=None`` returns all."""
        pass

    @abstractmethod
    async def find_by_user_and_region(self, user_id: str, region_id: str) -> Optional[RegionFavorite]:
        pass

    @abstractmethod
    async def delete_by_region(self, region_id: str) -> int:
        """Remove every favorite of a region. Returns the number removed."""
        pass


class RegionPinRepository(ABC):
    """
    Abstract repository for pinned regions.

    Per user, ``display_order`` values are always exactly 0..n-1.
    """

    @abstractmethod
    async def add(self, user_id: str, region_id: str, display_order: Optional[int] = None) -> RegionPin:
        """
        Pin a region for a user.

        Args:
            user_id: User identifier
            region_id: Region identifier
            display_order: Position to insert at. None appends after the last pin.

        Returns:
            Created pin

        Raises:
            RepositoryError: CONFLICT if the region is already pinned
        """
        pass

    @abstractmethod
    async def remove(self, user_id: str, region_id: str) -> None:
        """
        Unpin a region and close the gap in the order.

        Raises:
            RepositoryError: NOT_FOUND if the region is not pinned
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str) -> List[RegionPin]:
        """Pins of a user ordered by ``display_order``."""
        pass

    @abstractmethod
    async def find_by_user_and_region(self, user_id: str, region_id: str) -> Optional[RegionPin]:
        pass

    @abstractmethod
    async def reorder(self, user_id: str, region_ids: List[str]) -> List[RegionPin]:
        """
        Apply a new order in one step.

        Listed regions take ``display_order = index``; unlisted pins keep their
        relative order after them.

        Raises:
            RepositoryError: NOT_FOUND if a listed region is not pinned
        """
        pass

    @abstractmethod
    async def get_max_display_order(self, user_id: str) -> Optional[int]:
        """Highest display order for the user, or None when nothing is pinned."""
        pass

    @abstractmethod
    async def delete_by_region(self, region_id: str) -> int:
        """
        Remove every pin of a region.

        The remaining pins of each affected user are renumbered to 0..n-1.

        Returns:
            Number of pins removed
        """
        pass
