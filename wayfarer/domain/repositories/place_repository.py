"""
Place Repository Interface
==========================

Abstract interfaces for place, place favorite and place permission data access.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.place import MapLocation, Place, PlaceFavorite, PlacePermission
from wayfarer.domain.queries import Page, PlaceQuery


class PlaceRepository(ABC):
    """
    Abstract repository for place persistence operations.

    This interface defines the contract for place data access.
    Concrete implementations should be in the infrastructure layer.
    """

    @abstractmethod
    async def create(self, place: Place) -> Place:
        """
        Create a new place.

        Args:
            place: Place entity to create

        Returns:
            Created place entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, place_id: str) -> Optional[Place]:
        """
        Find a place by its ID.

        Args:
            place_id: Unique place identifier

        Returns:
            Place entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, place: Place) -> Place:
        """
        Write the owner-editable fields of an existing place.

        Status, counters, rating and the reported marker keep their stored
        values. A changed ``region_id`` does not touch region counters.

        Args:
            place: Place entity with updated data

        Returns:
            Updated place entity
        """
        pass

    @abstractmethod
    async def update_status(self, place_id: str, status: ContentStatus) -> Place:
        pass

    @abstractmethod
    async def set_reported(self, place_id: str, is_reported: bool) -> None:
        pass

    @abstractmethod
    async def delete(self, place_id: str) -> None:
        pass

    @abstractmethod
    async def list(self, query: PlaceQuery) -> Page[Place]:
        """
        List places matching a filter with sort and pagination.

        Args:
            query: Filter, sort, pagination and visibility settings

        Returns:
            Page of places with the total size of the filtered set
        """
        pass

    @abstractmethod
    async def search(self, query: PlaceQuery) -> Page[Place]:
        pass

    @abstractmethod
    async def get_by_region(self, region_id: str) -> List[Place]:
        """All places of a region regardless of status, newest first."""
        pass

    @abstractmethod
    async def get_by_creator(self, user_id: str, status: Optional[ContentStatus] = None) -> List[Place]:
        pass

    @abstractmethod
    async def get_map_locations(self, region_id: str) -> List[MapLocation]:
        """Coordinates of the published places of a region."""
        pass

    @abstractmethod
    async def increment_visit_count(self, place_id: str) -> None:
        pass

    @abstractmethod
    async def adjust_checkin_count(self, place_id: str, delta: int) -> None:
        pass

    @abstractmethod
    async def adjust_favorite_count(self, place_id: str, delta: int) -> None:
        pass

    @abstractmethod
    async def update_rating(self, place_id: str, average_rating: Optional[float]) -> None:
        pass

    @abstractmethod
    async def count_by_region(self, region_id: str) -> int:
        pass


class PlaceFavoriteRepository(ABC):
    """Abstract repository for place favorites. One row per (user, place)."""

    @abstractmethod
    async def add(self, favorite: PlaceFavorite) -> PlaceFavorite:
        """
        Raises:
            RepositoryError: CONFLICT if the pair is already favorited
        """
        pass

    @abstractmethod
    async def remove(self, user_id: str, place_id: str) -> None:
        """
        Raises:
            RepositoryError: NOT_FOUND if the pair is not favorited
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[PlaceFavorite]:
        pass

    @abstractmethod
    async def find_by_user_and_place(self, user_id: str, place_id: str) -> Optional[PlaceFavorite]:
        pass

    @abstractmethod
    async def delete_by_place(self, place_id: str) -> int:
        """Remove every favorite of a place. Returns the number removed."""
        pass


class PlacePermissionRepository(ABC):
    """
    Abstract repository for editor permissions on places.

    At most one permission exists per (user, place).
    """

    @abstractmethod
    async def create(self, permission: PlacePermission) -> PlacePermission:
        """
        Store a new (pending) permission.

        Args:
            permission: Permission with ``accepted_at`` unset

        Returns:
            Created permission

        Raises:
            RepositoryError: CONFLICT if (user, place) already has a permission
        """
        pass

    @abstractmethod
    async def accept(self, permission_id: str) -> PlacePermission:
        """Set ``accepted_at`` to now. Accepting again re-sets the timestamp."""
        pass

    @abstractmethod
    async def update(self, permission_id: str, can_edit: Optional[bool] = None,
                     can_delete: Optional[bool] = None) -> PlacePermission:
        pass

    @abstractmethod
    async def remove(self, permission_id: str) -> None:
        pass

    @abstractmethod
    async def find_by_id(self, permission_id: str) -> Optional[PlacePermission]:
        pass

    @abstractmethod
    async def find_by_place(self, place_id: str) -> List[PlacePermission]:
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str) -> List[PlacePermission]:
        pass

    @abstractmethod
    async def find_by_user_and_place(self, user_id: str, place_id: str) -> Optional[PlacePermission]:
        pass
