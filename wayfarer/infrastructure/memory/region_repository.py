"""
In-Memory Region Repositories
=============================

Reference implementations of RegionRepository, RegionFavoriteRepository and
RegionPinRepository.
"""
import copy
from typing import List, Optional

from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import REGION_EDITABLE_FIELDS, Region, RegionFavorite, RegionPin
from wayfarer.domain.queries import Page, RegionQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.region_repository import (
    RegionFavoriteRepository,
    RegionPinRepository,
    RegionRepository,
)
from wayfarer.domain.search.engine import apply_region_query
from wayfarer.infrastructure.memory.store import InMemoryRepository, newest_first
from wayfarer.utils.datetime_utils import now


class InMemoryRegionRepository(InMemoryRepository, RegionRepository):
    TABLE = "regions"
    ENTITY = "Region"

    async def create(self, region: Region) -> Region:
        async with self._store.lock:
            if region.id in self._rows:
                raise RepositoryError.conflict(f"Region '{region.id}' already exists")
            return self._put(region)

    async def find_by_id(self, region_id: str) -> Optional[Region]:
        return self._get(region_id)

    async def update(self, region: Region) -> Region:
        async with self._store.lock:
            return self._patch(region, REGION_EDITABLE_FIELDS)

    async def update_status(self, region_id: str, status: ContentStatus) -> Region:
        async with self._store.lock:
            row = self._require(region_id)
            row.status = status
            row.updated_at = now()
            return copy.deepcopy(row)

    async def set_reported(self, region_id: str, is_reported: bool) -> None:
        async with self._store.lock:
            self._require(region_id).is_reported = is_reported

    async def delete(self, region_id: str) -> None:
        async with self._store.lock:
            self._require(region_id)
            del self._rows[region_id]

    async def list(self, query: RegionQuery) -> Page[Region]:
        return apply_region_query(self._all(), query)

    async def search(self, query: RegionQuery) -> Page[Region]:
        return apply_region_query(self._all(), query)

    async def get_featured(self, limit: int) -> List[Region]:
        published = [r for r in self._all() if r.status == ContentStatus.PUBLISHED]
        published.sort(key=lambda r: (r.visit_count, r.favorite_count), reverse=True)
        return published[:limit]

    async def get_by_creator(self, user_id: str, status: Optional[ContentStatus] = None) -> List[Region]:
        regions = [
            r for r in self._all()
            if r.created_by == user_id and (status is None or r.status == status)
        ]
        regions.sort(key=lambda r: r.created_at, reverse=True)
        return regions

    async def increment_visit_count(self, region_id: str) -> None:
        async with self._store.lock:
            self._require(region_id).visit_count += 1

    async def adjust_place_count(self, region_id: str, delta: int) -> None:
        async with self._store.lock:
            row = self._require(region_id)
            row.place_count = max(0, row.place_count + delta)

    async def adjust_favorite_count(self, region_id: str, delta: int) -> None:
        async with self._store.lock:
            row = self._require(region_id)
            row.favorite_count = max(0, row.favorite_count + delta)


class InMemoryRegionFavoriteRepository(InMemoryRepository, RegionFavoriteRepository):
    TABLE = "region_favorites"
    ENTITY = "Region favorite"

    def _find(self, user_id: str, region_id: str) -> Optional[RegionFavorite]:
        for row in self._rows.values():
            if row.user_id == user_id and row.region_id == region_id:
                return row
        return None

    async def add(self, favorite: RegionFavorite) -> RegionFavorite:
        async with self._store.lock:
            if self._find(favorite.user_id, favorite.region_id) is not None:
                raise RepositoryError.conflict("Region is already in favorites")
            return self._put(favorite)

    async def remove(self, user_id: str, region_id: str) -> None:
        async with self._store.lock:
            row = self._find(user_id, region_id)
            if row is None:
                raise RepositoryError.not_found("Region favorite", region_id)
            del self._rows[row.id]

    async def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[RegionFavorite]:
        rows = newest_first(row for row in self._rows.values() if row.user_id == user_id)
        if limit is not None:
            rows = rows[:limit]
        return self._copies(rows)

    async def find_by_user_and_region(self, user_id: str, region_id: str) -> Optional[RegionFavorite]:
        row = self._find(user_id, region_id)
        return copy.deepcopy(row) if row is not None else None

    async def delete_by_region(self, region_id: str) -> int:
        async with self._store.lock:
            doomed = [row.id for row in self._rows.values() if row.region_id == region_id]
            for favorite_id in doomed:
                del self._rows[favorite_id]
            return len(doomed)


class InMemoryRegionPinRepository(InMemoryRepository, RegionPinRepository):
    TABLE = "region_pins"
    ENTITY = "Region pin"

    def _user_pins(self, user_id: str) -> List[RegionPin]:
        """Stored pins of a user ordered by display order (live rows, not copies)."""
        pins = [row for row in self._rows.values() if row.user_id == user_id]
        pins.sort(key=lambda row: row.display_order)
        return pins

    def _renumber(self, pins: List[RegionPin]) -> None:
        stamp = now()
        for index, pin in enumerate(pins):
            if pin.display_order != index:
                pin.display_order = index
                pin.updated_at = stamp

    async def add(self, user_id: str, region_id: str, display_order: Optional[int] = None) -> RegionPin:
        async with self._store.lock:
            pins = self._user_pins(user_id)
            if any(pin.region_id == region_id for pin in pins):
                raise RepositoryError.conflict("Region is already pinned")

            position = len(pins) if display_order is None else max(0, min(display_order, len(pins)))
            pin = RegionPin(user_id=user_id, region_id=region_id, display_order=position)
            pins.insert(position, pin)
            self._renumber(pins)
            self._rows[pin.id] = pin
            return copy.deepcopy(pin)

    async def remove(self, user_id: str, region_id: str) -> None:
        async with self._store.lock:
            pins = self._user_pins(user_id)
            target = next((pin for pin in pins if pin.region_id == region_id), None)
            if target is None:
                raise RepositoryError.not_found("Region pin", region_id)
            del self._rows[target.id]
            pins.remove(target)
            self._renumber(pins)

    async def find_by_user(self, user_id: str) -> List[RegionPin]:
        return self._copies(self._user_pins(user_id))

    async def find_by_user_and_region(self, user_id: str, region_id: str) -> Optional[RegionPin]:
        for pin in self._user_pins(user_id):
            if pin.region_id == region_id:
                return copy.deepcopy(pin)
        return None

    async def reorder(self, user_id: str, region_ids: List[str]) -> List[RegionPin]:
        async with self._store.lock:
            pins = self._user_pins(user_id)
            by_region = {pin.region_id: pin for pin in pins}
            for region_id in region_ids:
                if region_id not in by_region:
                    raise RepositoryError.not_found("Region pin", region_id)

            listed = [by_region[region_id] for region_id in region_ids]
            rest = [pin for pin in pins if pin.region_id not in set(region_ids)]
            ordered = listed + rest
            self._renumber(ordered)
            return self._copies(ordered)

    async def get_max_display_order(self, user_id: str) -> Optional[int]:
        pins = self._user_pins(user_id)
        return pins[-1].display_order if pins else None

    async def delete_by_region(self, region_id: str) -> int:
        async with self._store.lock:
            doomed = [row for row in self._rows.values() if row.region_id == region_id]
            for pin in doomed:
                del self._rows[pin.id]
            for user_id in {pin.user_id for pin in doomed}:
                self._renumber(self._user_pins(user_id))
            return len(doomed)
