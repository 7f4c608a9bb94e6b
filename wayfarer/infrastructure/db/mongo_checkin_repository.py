"""
MongoDB Check-in Repositories
=============================

Concrete implementations of CheckinRepository and CheckinPhotoRepository
using MongoDB.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING

from wayfarer.domain.constants.fields import CheckinFields, CheckinPhotoFields, CommonFields
from wayfarer.domain.models.checkin import Checkin, CheckinPhoto, RatingStats
from wayfarer.domain.models.common import CheckinStatus, Coordinates
from wayfarer.domain.queries import CheckinFilter, CheckinQuery, Page
from wayfarer.domain.repositories.checkin_repository import CheckinPhotoRepository, CheckinRepository
from wayfarer.domain.search.engine import CHECKIN_SORT_FIELDS
from wayfarer.infrastructure.db.base import MongoRepository, mongo_errors, mongo_sort
from wayfarer.utils.datetime_utils import now


def checkin_filter_document(flt: CheckinFilter) -> Dict[str, Any]:
    """Deleted check-ins are hidden unless asked for explicitly."""
    query: Dict[str, Any] = {}
    if flt.user_id is not None:
        query[CheckinFields.USER_ID] = flt.user_id
    if flt.place_id is not None:
        query[CheckinFields.PLACE_ID] = flt.place_id
    if flt.status is not None:
        query[CheckinFields.STATUS] = flt.status.value
    elif not flt.include_deleted:
        query[CheckinFields.STATUS] = {"$ne": CheckinStatus.DELETED.value}
    if flt.has_rating is not None:
        query[CheckinFields.RATING] = {"$ne": None} if flt.has_rating else None
    if flt.is_private is not None:
        query[CheckinFields.IS_PRIVATE] = flt.is_private
    return query


class MongoCheckinRepository(MongoRepository, CheckinRepository):
    """
    MongoDB implementation of CheckinRepository.

    Handles all check-in persistence operations using MongoDB.
    """

    ENTITY = "Checkin"

    def _to_entity(self, doc: dict) -> Checkin:
        """Convert MongoDB document to Checkin entity."""
        return Checkin(
            id=doc[CommonFields.MONGO_ID],
            user_id=doc[CheckinFields.USER_ID],
            place_id=doc[CheckinFields.PLACE_ID],
            comment=doc.get(CheckinFields.COMMENT),
            rating=doc.get(CheckinFields.RATING),
            photos=list(doc.get(CheckinFields.PHOTOS, [])),
            user_location=Coordinates.from_dict(doc.get(CheckinFields.USER_LOCATION)),
            status=CheckinStatus(doc.get(CheckinFields.STATUS, CheckinStatus.ACTIVE.value)),
            is_private=doc.get(CheckinFields.IS_PRIVATE, False),
            created_at=doc[CheckinFields.CREATED_AT],
            updated_at=doc[CheckinFields.UPDATED_AT],
        )

    def _to_document(self, checkin: Checkin) -> dict:
        """Convert Checkin entity to MongoDB document."""
        return {
            CommonFields.MONGO_ID: checkin.id,
            CheckinFields.USER_ID: checkin.user_id,
            CheckinFields.PLACE_ID: checkin.place_id,
            CheckinFields.COMMENT: checkin.comment,
            CheckinFields.RATING: checkin.rating,
            CheckinFields.PHOTOS: list(checkin.photos),
            CheckinFields.USER_LOCATION: checkin.user_location.to_dict() if checkin.user_location else None,
            CheckinFields.STATUS: checkin.status.value,
            CheckinFields.IS_PRIVATE: checkin.is_private,
            CheckinFields.CREATED_AT: checkin.created_at,
            CheckinFields.UPDATED_AT: checkin.updated_at,
        }

    async def create(self, checkin: Checkin) -> Checkin:
        with mongo_errors("create checkin", f"Checkin '{checkin.id}' already exists"):
            await self._collection.insert_one(self._to_document(checkin), session=self._session)
        return checkin

    async def find_by_id(self, checkin_id: str) -> Optional[Checkin]:
        return await self._find_one({CommonFields.MONGO_ID: checkin_id}, "find checkin")

    async def update(self, checkin: Checkin) -> Checkin:
        checkin.updated_at = now()
        doc = self._to_document(checkin)
        fields = {k: v for k, v in doc.items() if k not in (CommonFields.MONGO_ID, CheckinFields.CREATED_AT)}
        return await self._update_by_id(checkin.id, {"$set": fields}, "update checkin")

    async def update_status(self, checkin_id: str, status: CheckinStatus) -> Checkin:
        return await self._update_by_id(
            checkin_id,
            {"$set": {CheckinFields.STATUS: status.value, CheckinFields.UPDATED_AT: now()}},
            "update checkin status",
        )

    async def list(self, query: CheckinQuery) -> Page[Checkin]:
        return await self._find_page(
            checkin_filter_document(query.filter),
            mongo_sort(query.sort, CHECKIN_SORT_FIELDS),
            query.pagination,
            "list checkins",
        )

    async def has_recent_checkin(self, user_id: str, place_id: str, since: datetime) -> bool:
        with mongo_errors("check recent checkin"):
            count = await self._collection.count_documents(
                {
                    CheckinFields.USER_ID: user_id,
                    CheckinFields.PLACE_ID: place_id,
                    CheckinFields.STATUS: {"$ne": CheckinStatus.DELETED.value},
                    CheckinFields.CREATED_AT: {"$gte": since},
                },
                limit=1,
                session=self._session,
            )
        return count > 0

    async def get_place_rating_stats(self, place_id: str) -> RatingStats:
        pipeline = [
            {"$match": {
                CheckinFields.PLACE_ID: place_id,
                CheckinFields.RATING: {"$ne": None},
                CheckinFields.STATUS: {"$ne": CheckinStatus.DELETED.value},
            }},
            {"$group": {"_id": None, "count": {"$sum": 1}, "average": {"$avg": f"${CheckinFields.RATING}"}}},
        ]
        with mongo_errors("compute rating stats"):
            cursor = await self._collection.aggregate(pipeline, session=self._session)
            rows = await cursor.to_list(length=None)
        if not rows:
            return RatingStats(count=0, average=None)
        return RatingStats(count=rows[0]["count"], average=rows[0]["average"])


class MongoCheckinPhotoRepository(MongoRepository, CheckinPhotoRepository):
    """Check-in photos ordered by display_order within a check-in."""

    ENTITY = "Checkin photo"

    def _to_entity(self, doc: dict) -> CheckinPhoto:
        return CheckinPhoto(
            id=doc[CommonFields.MONGO_ID],
            checkin_id=doc[CheckinPhotoFields.CHECKIN_ID],
            url=doc[CheckinPhotoFields.URL],
            caption=doc.get(CheckinPhotoFields.CAPTION),
            display_order=doc.get(CheckinPhotoFields.DISPLAY_ORDER, 0),
            created_at=doc[CheckinPhotoFields.CREATED_AT],
        )

    def _to_document(self, photo: CheckinPhoto) -> dict:
        return {
            CommonFields.MONGO_ID: photo.id,
            CheckinPhotoFields.CHECKIN_ID: photo.checkin_id,
            CheckinPhotoFields.URL: photo.url,
            CheckinPhotoFields.CAPTION: photo.caption,
            CheckinPhotoFields.DISPLAY_ORDER: photo.display_order,
            CheckinPhotoFields.CREATED_AT: photo.created_at,
        }

    async def add(self, checkin_id: str, photos: List[CheckinPhoto]) -> List[CheckinPhoto]:
        if not photos:
            return []
        last = await self._find_many(
            {CheckinPhotoFields.CHECKIN_ID: checkin_id},
            "find last photo",
            sort=[(CheckinPhotoFields.DISPLAY_ORDER, DESCENDING)],
            limit=1,
        )
        next_order = last[0].display_order + 1 if last else 0
        for offset, photo in enumerate(photos):
            photo.checkin_id = checkin_id
            photo.display_order = next_order + offset
        with mongo_errors("add checkin photos"):
            await self._collection.insert_many(
                [self._to_document(photo) for photo in photos], session=self._session,
            )
        return photos

    async def find_by_checkin(self, checkin_id: str) -> List[CheckinPhoto]:
        return await self._find_many(
            {CheckinPhotoFields.CHECKIN_ID: checkin_id},
            "list checkin photos",
            sort=[(CheckinPhotoFields.DISPLAY_ORDER, ASCENDING)],
        )

    async def remove(self, photo_id: str) -> None:
        await self._delete_by_id(photo_id, "remove checkin photo")
