"""
In-Memory Place Repositories
============================

Reference implementations of PlaceRepository, PlaceFavoriteRepository and
PlacePermissionRepository.
"""
import copy
from typing import List, Optional

from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.place import PLACE_EDITABLE_FIELDS, MapLocation, Place, PlaceFavorite, PlacePermission
from wayfarer.domain.queries import Page, PlaceQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.place_repository import (
    PlaceFavoriteRepository,
    PlacePermissionRepository,
    PlaceRepository,
)
from wayfarer.domain.search.engine import apply_place_query
from wayfarer.infrastructure.memory.store import InMemoryRepository, newest_first
from wayfarer.utils.datetime_utils import now


class InMemoryPlaceRepository(InMemoryRepository, PlaceRepository):
    TABLE = "places"
    ENTITY = "Place"

    async def create(self, place: Place) -> Place:
        async with self._store.lock:
            if place.id in self._rows:
                raise RepositoryError.conflict(f"Place '{place.id}' already exists")
            return self._put(place)

    async def find_by_id(self, place_id: str) -> Optional[Place]:
        return self._get(place_id)

    async def update(self, place: Place) -> Place:
        async with self._store.lock:
            return self._patch(place, PLACE_EDITABLE_FIELDS)

    async def update_status(self, place_id: str, status: ContentStatus) -> Place:
        async with self._store.lock:
            row = self._require(place_id)
            row.status = status
            row.updated_at = now()
            return copy.deepcopy(row)

    async def set_reported(self, place_id: str, is_reported: bool) -> None:
        async with self._store.lock:
            self._require(place_id).is_reported = is_reported

    async def delete(self, place_id: str) -> None:
        async with self._store.lock:
            self._require(place_id)
            del self._rows[place_id]

    async def list(self, query: PlaceQuery) -> Page[Place]:
        return apply_place_query(self._all(), query)

    async def search(self, query: PlaceQuery) -> Page[Place]:
        return apply_place_query(self._all(), query)

    async def get_by_region(self, region_id: str) -> List[Place]:
        return newest_first(p for p in self._all() if p.region_id == region_id)

    async def get_by_creator(self, user_id: str, status: Optional[ContentStatus] = None) -> List[Place]:
        return newest_first(
            p for p in self._all()
            if p.created_by == user_id and (status is None or p.status == status)
        )

    async def get_map_locations(self, region_id: str) -> List[MapLocation]:
        return [
            MapLocation(id=p.id, name=p.name, coordinates=p.coordinates, category=p.category)
            for p in self._all()
            if p.region_id == region_id and p.status == ContentStatus.PUBLISHED
        ]

    async def increment_visit_count(self, place_id: str) -> None:
        async with self._store.lock:
            self._require(place_id).visit_count += 1

    async def adjust_checkin_count(self, place_id: str, delta: int) -> None:
        async with self._store.lock:
            row = self._require(place_id)
            row.checkin_count = max(0, row.checkin_count + delta)

    async def adjust_favorite_count(self, place_id: str, delta: int) -> None:
        async with self._store.lock:
            row = self._require(place_id)
            row.favorite_count = max(0, row.favorite_count + delta)

    async def update_rating(self, place_id: str, average_rating: Optional[float]) -> None:
        async with self._store.lock:
            self._require(place_id).average_rating = average_rating

    async def count_by_region(self, region_id: str) -> int:
        return sum(1 for row in self._rows.values() if row.region_id == region_id)


class InMemoryPlaceFavoriteRepository(InMemoryRepository, PlaceFavoriteRepository):
    TABLE = "place_favorites"
    ENTITY = "Place favorite"

    def _find(self, user_id: str, place_id: str) -> Optional[PlaceFavorite]:
        for row in self._rows.values():
            if row.user_id == user_id and row.place_id == place_id:
                return row
        return None

    async def add(self, favorite: PlaceFavorite) -> PlaceFavorite:
        async with self._store.lock:
            if self._find(favorite.user_id, favorite.place_id) is not None:
                raise RepositoryError.conflict("Place is already in favorites")
            return self._put(favorite)

    async def remove(self, user_id: str, place_id: str) -> None:
        async with self._store.lock:
            row = self._find(user_id, place_id)
            if row is None:
                raise RepositoryError.not_found("Place favorite", place_id)
            del self._rows[row.id]

    async def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[PlaceFavorite]:
        rows = newest_first(row for row in self._rows.values() if row.user_id == user_id)
        if limit is not None:
            rows = rows[:limit]
        return self._copies(rows)

    async def find_by_user_and_place(self, user_id: str, place_id: str) -> Optional[PlaceFavorite]:
        row = self._find(user_id, place_id)
        return copy.deepcopy(row) if row is not None else None

    async def delete_by_place(self, place_id: str) -> int:
        async with self._store.lock:
            doomed = [row.id for row in self._rows.values() if row.place_id == place_id]
            for favorite_id in doomed:
                del self._rows[favorite_id]
            return len(doomed)


class InMemoryPlacePermissionRepository(InMemoryRepository, PlacePermissionRepository):
    TABLE = "place_permissions"
    ENTITY = "Permission"

    def _find(self, user_id: str, place_id: str) -> Optional[PlacePermission]:
        for row in self._rows.values():
            if row.user_id == user_id and row.place_id == place_id:
                return row
        return None

    async def create(self, permission: PlacePermission) -> PlacePermission:
        async with self._store.lock:
            if self._find(permission.user_id, permission.place_id) is not None:
                raise RepositoryError.conflict("User already has permission for this place")
            return self._put(permission)

    async def accept(self, permission_id: str) -> PlacePermission:
        async with self._store.lock:
            row = self._require(permission_id)
            row.accept()
            return copy.deepcopy(row)

    async def update(self, permission_id: str, can_edit: Optional[bool] = None,
                     can_delete: Optional[bool] = None) -> PlacePermission:
        async with self._store.lock:
            row = self._require(permission_id)
            if can_edit is not None:
                row.can_edit = can_edit
            if can_delete is not None:
                row.can_delete = can_delete
            return copy.deepcopy(row)

    async def remove(self, permission_id: str) -> None:
        async with self._store.lock:
            self._require(permission_id)
            del self._rows[permission_id]

    async def find_by_id(self, permission_id: str) -> Optional[PlacePermission]:
        return self._get(permission_id)

    async def find_by_place(self, place_id: str) -> List[PlacePermission]:
        return self._copies(row for row in self._rows.values() if row.place_id == place_id)

    async def find_by_user(self, user_id: str) -> List[PlacePermission]:
        return self._copies(row for row in self._rows.values() if row.user_id == user_id)

    async def find_by_user_and_place(self, user_id: str, place_id: str) -> Optional[PlacePermission]:
        row = self._find(user_id, place_id)
        return copy.deepcopy(row) if row is not None else None
