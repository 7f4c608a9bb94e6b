"""In-memory CheckinRepository and CheckinPhotoRepository."""
import copy
from datetime import datetime
from typing import List, Optional

from wayfarer.domain.models.checkin import Checkin, CheckinPhoto, RatingStats
from wayfarer.domain.models.common import CheckinStatus
from wayfarer.domain.queries import CheckinFilter, CheckinQuery, Page
from wayfarer.domain.repositories.checkin_repository import CheckinPhotoRepository, CheckinRepository
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.search.engine import CHECKIN_SORT_FIELDS, paginate, sort_items
from wayfarer.infrastructure.memory.store import InMemoryRepository
from wayfarer.utils.datetime_utils import now


def _matches(checkin: Checkin, flt: CheckinFilter) -> bool:
    if not flt.include_deleted and checkin.status == CheckinStatus.DELETED and flt.status != CheckinStatus.DELETED:
        return False
    if flt.user_id is not None and checkin.user_id != flt.user_id:
        return False
    if flt.place_id is not None and checkin.place_id != flt.place_id:
        return False
    if flt.status is not None and checkin.status != flt.status:
        return False
    if flt.has_rating is not None and (checkin.rating is not None) != flt.has_rating:
        return False
    if flt.is_private is not None and checkin.is_private != flt.is_private:
        return False
    return True


class InMemoryCheckinRepository(InMemoryRepository, CheckinRepository):
    TABLE = "checkins"
    ENTITY = "Checkin"

    async def create(self, checkin: Checkin) -> Checkin:
        async with self._store.lock:
            if checkin.id in self._rows:
                raise RepositoryError.conflict(f"Checkin '{checkin.id}' already exists")
            return self._put(checkin)

    async def find_by_id(self, checkin_id: str) -> Optional[Checkin]:
        return self._get(checkin_id)

    async def update(self, checkin: Checkin) -> Checkin:
        async with self._store.lock:
            self._require(checkin.id)
            checkin.updated_at = now()
            return self._put(checkin)

    async def update_status(self, checkin_id: str, status: CheckinStatus) -> Checkin:
        async with self._store.lock:
            row = self._require(checkin_id)
            row.status = status
            row.updated_at = now()
            return copy.deepcopy(row)

    async def list(self, query: CheckinQuery) -> Page[Checkin]:
        matched = [row for row in self._all() if _matches(row, query.filter)]
        return paginate(sort_items(matched, query.sort, CHECKIN_SORT_FIELDS), query.pagination)

    async def has_recent_checkin(self, user_id: str, place_id: str, since: datetime) -> bool:
        return any(
            row.user_id == user_id
            and row.place_id == place_id
            and row.status != CheckinStatus.DELETED
            and row.created_at >= since
            for row in self._rows.values()
        )

    async def get_place_rating_stats(self, place_id: str) -> RatingStats:
        ratings = [
            row.rating for row in self._rows.values()
            if row.place_id == place_id and row.rating is not None and row.status != CheckinStatus.DELETED
        ]
        if not ratings:
            return RatingStats(count=0, average=None)
        return RatingStats(count=len(ratings), average=sum(ratings) / len(ratings))


class InMemoryCheckinPhotoRepository(InMemoryRepository, CheckinPhotoRepository):
    TABLE = "checkin_photos"
    ENTITY = "Checkin photo"

    def _for_checkin(self, checkin_id: str) -> List[CheckinPhoto]:
        photos = [row for row in self._rows.values() if row.checkin_id == checkin_id]
        photos.sort(key=lambda row: row.display_order)
        return photos

    async def add(self, checkin_id: str, photos: List[CheckinPhoto]) -> List[CheckinPhoto]:
        async with self._store.lock:
            existing = self._for_checkin(checkin_id)
            next_order = existing[-1].display_order + 1 if existing else 0
            stored = []
            for offset, photo in enumerate(photos):
                photo.checkin_id = checkin_id
                photo.display_order = next_order + offset
                stored.append(self._put(photo))
            return stored

    async def find_by_checkin(self, checkin_id: str) -> List[CheckinPhoto]:
        return self._copies(self._for_checkin(checkin_id))

    async def remove(self, photo_id: str) -> None:
        async with self._store.lock:
            self._require(photo_id)
            del self._rows[photo_id]
