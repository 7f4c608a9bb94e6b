"""
MongoDB Region Repositories
===========================

Concrete implementations of RegionRepository, RegionFavoriteRepository and
RegionPinRepository using MongoDB.
"""
from typing import List, Optional

from pymongo import ASCENDING, DESCENDING

from wayfarer.domain.constants.fields import CommonFields, FavoriteFields, PinFields, RegionFields
from wayfarer.domain.models.common import ContentStatus, Coordinates
from wayfarer.domain.models.region import REGION_EDITABLE_FIELDS, Region, RegionFavorite, RegionPin
from wayfarer.domain.queries import Page, RegionQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.region_repository import (
    RegionFavoriteRepository,
    RegionPinRepository,
    RegionRepository,
)
from wayfarer.domain.search.engine import REGION_SORT_FIELDS, apply_region_query
from wayfarer.infrastructure.db.base import MongoRepository, clamped_increment, mongo_errors, mongo_sort
from wayfarer.infrastructure.db.content_filters import region_filter_document
from wayfarer.utils.datetime_utils import now


class MongoRegionRepository(MongoRepository, RegionRepository):
    """
    MongoDB implementation of RegionRepository.

    Queries with a location filter load the non-geographic matches and finish
    radius filtering, sorting and paging in process.
    """

    ENTITY = "Region"

    def _to_entity(self, doc: dict) -> Region:
        """Convert MongoDB document to Region entity."""
        return Region(
            id=doc[CommonFields.MONGO_ID],
            name=doc[RegionFields.NAME],
            created_by=doc[RegionFields.CREATED_BY],
            description=doc.get(RegionFields.DESCRIPTION),
            short_description=doc.get(RegionFields.SHORT_DESCRIPTION),
            coordinates=Coordinates.from_dict(doc.get(RegionFields.COORDINATES)),
            address=doc.get(RegionFields.ADDRESS),
            status=ContentStatus(doc.get(RegionFields.STATUS, ContentStatus.DRAFT.value)),
            cover_image=doc.get(RegionFields.COVER_IMAGE),
            images=list(doc.get(RegionFields.IMAGES, [])),
            tags=list(doc.get(RegionFields.TAGS, [])),
            visit_count=doc.get(RegionFields.VISIT_COUNT, 0),
            favorite_count=doc.get(RegionFields.FAVORITE_COUNT, 0),
            place_count=doc.get(RegionFields.PLACE_COUNT, 0),
            is_reported=doc.get(RegionFields.IS_REPORTED, False),
            created_at=doc[RegionFields.CREATED_AT],
            updated_at=doc[RegionFields.UPDATED_AT],
        )

    def _to_document(self, region: Region) -> dict:
        """Convert Region entity to MongoDB document."""
        return {
            CommonFields.MONGO_ID: region.id,
            RegionFields.NAME: region.name,
            RegionFields.CREATED_BY: region.created_by,
            RegionFields.DESCRIPTION: region.description,
            RegionFields.SHORT_DESCRIPTION: region.short_description,
            RegionFields.COORDINATES: region.coordinates.to_dict() if region.coordinates else None,
            RegionFields.ADDRESS: region.address,
            RegionFields.STATUS: region.status.value,
            RegionFields.COVER_IMAGE: region.cover_image,
            RegionFields.IMAGES: list(region.images),
            RegionFields.TAGS: list(region.tags),
            RegionFields.VISIT_COUNT: region.visit_count,
            RegionFields.FAVORITE_COUNT: region.favorite_count,
            RegionFields.PLACE_COUNT: region.place_count,
            RegionFields.IS_REPORTED: region.is_reported,
            RegionFields.CREATED_AT: region.created_at,
            RegionFields.UPDATED_AT: region.updated_at,
        }

    async def create(self, region: Region) -> Region:
        with mongo_errors("create region", f"Region '{region.id}' already exists"):
            await self._collection.insert_one(self._to_document(region), session=self._session)
        return region

    async def find_by_id(self, region_id: str) -> Optional[Region]:
        return await self._find_one({CommonFields.MONGO_ID: region_id}, "find region")

    async def update(self, region: Region) -> Region:
        region.updated_at = now()
        doc = self._to_document(region)
        fields = {name: doc[name] for name in REGION_EDITABLE_FIELDS}
        fields[RegionFields.UPDATED_AT] = region.updated_at
        return await self._update_by_id(region.id, {"$set": fields}, "update region")

    async def update_status(self, region_id: str, status: ContentStatus) -> Region:
        return await self._update_by_id(
            region_id,
            {"$set": {RegionFields.STATUS: status.value, RegionFields.UPDATED_AT: now()}},
            "update region status",
        )

    async def set_reported(self, region_id: str, is_reported: bool) -> None:
        await self._update_by_id(region_id, {"$set": {RegionFields.IS_REPORTED: is_reported}}, "mark region")

    async def delete(self, region_id: str) -> None:
        await self._delete_by_id(region_id, "delete region")

    async def list(self, query: RegionQuery) -> Page[Region]:
        document = region_filter_document(query)
        if query.filter.location is not None:
            candidates = await self._find_many(document, "list regions")
            return apply_region_query(candidates, query)
        return await self._find_page(
            document, mongo_sort(query.sort, REGION_SORT_FIELDS), query.pagination, "list regions",
        )

    async def search(self, query: RegionQuery) -> Page[Region]:
        return await self.list(query)

    async def get_featured(self, limit: int) -> List[Region]:
        return await self._find_many(
            {RegionFields.STATUS: ContentStatus.PUBLISHED.value},
            "get featured regions",
            sort=[(RegionFields.VISIT_COUNT, DESCENDING), (RegionFields.FAVORITE_COUNT, DESCENDING)],
            limit=limit,
        )

    async def get_by_creator(self, user_id: str, status: Optional[ContentStatus] = None) -> List[Region]:
        query = {RegionFields.CREATED_BY: user_id}
        if status is not None:
            query[RegionFields.STATUS] = status.value
        return await self._find_many(query, "get regions by creator", sort=[(RegionFields.CREATED_AT, DESCENDING)])

    async def increment_visit_count(self, region_id: str) -> None:
        await self._update_by_id(region_id, {"$inc": {RegionFields.VISIT_COUNT: 1}}, "count region visit")

    async def adjust_place_count(self, region_id: str, delta: int) -> None:
        await self._update_by_id(region_id, clamped_increment(RegionFields.PLACE_COUNT, delta), "count places")

    async def adjust_favorite_count(self, region_id: str, delta: int) -> None:
        await self._update_by_id(
            region_id, clamped_increment(RegionFields.FAVORITE_COUNT, delta), "count region favorites",
        )


class MongoRegionFavoriteRepository(MongoRepository, RegionFavoriteRepository):
    """Region favorites; a unique (user_id, region_id) index enforces one row per pair."""

    ENTITY = "Region favorite"

    def _to_entity(self, doc: dict) -> RegionFavorite:
        return RegionFavorite(
            id=doc[CommonFields.MONGO_ID],
            user_id=doc[FavoriteFields.USER_ID],
            region_id=doc[FavoriteFields.REGION_ID],
            created_at=doc[FavoriteFields.CREATED_AT],
        )

    def _to_document(self, favorite: RegionFavorite) -> dict:
        return {
            CommonFields.MONGO_ID: favorite.id,
            FavoriteFields.USER_ID: favorite.user_id,
            FavoriteFields.REGION_ID: favorite.region_id,
            FavoriteFields.CREATED_AT: favorite.created_at,
        }

    async def add(self, favorite: RegionFavorite) -> RegionFavorite:
        with mongo_errors("add region favorite", "Region is already in favorites"):
            await self._collection.insert_one(self._to_document(favorite), session=self._session)
        return favorite

    async def remove(self, user_id: str, region_id: str) -> None:
        with mongo_errors("remove region favorite"):
            result = await self._collection.delete_one(
                {FavoriteFields.USER_ID: user_id, FavoriteFields.REGION_ID: region_id}, session=self._session,
            )
        if result.deleted_count == 0:
            raise RepositoryError.not_found(self.ENTITY, region_id)

    async def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[RegionFavorite]:
        return await self._find_many(
            {FavoriteFields.USER_ID: user_id},
            "list region favorites",
            sort=[(FavoriteFields.CREATED_AT, DESCENDING), (CommonFields.MONGO_ID, DESCENDING)],
            limit=limit,
        )

    async def find_by_user_and_region(self, user_id: str, region_id: str) -> Optional[RegionFavorite]:
        return await self._find_one(
            {FavoriteFields.USER_ID: user_id, FavoriteFields.REGION_ID: region_id}, "find region favorite",
        )

    async def delete_by_region(self, region_id: str) -> int:
        with mongo_errors("remove region favorites"):
            result = await self._collection.delete_many({FavoriteFields.REGION_ID: region_id}, session=self._session)
        return result.deleted_count


class MongoRegionPinRepository(MongoRepository, RegionPinRepository):
    """
    Pinned regions.

    Inserts and renumbering are several writes; callers that need them to be
    atomic run them inside a transaction.
    """

    ENTITY = "Region pin"

    def _to_entity(self, doc: dict) -> RegionPin:
        return RegionPin(
            id=doc[CommonFields.MONGO_ID],
            user_id=doc[PinFields.USER_ID],
            region_id=doc[PinFields.REGION_ID],
            display_order=doc[PinFields.DISPLAY_ORDER],
            created_at=doc[PinFields.CREATED_AT],
            updated_at=doc[PinFields.UPDATED_AT],
        )

    def _to_document(self, pin: RegionPin) -> dict:
        return {
            CommonFields.MONGO_ID: pin.id,
            PinFields.USER_ID: pin.user_id,
            PinFields.REGION_ID: pin.region_id,
            PinFields.DISPLAY_ORDER: pin.display_order,
            PinFields.CREATED_AT: pin.created_at,
            PinFields.UPDATED_AT: pin.updated_at,
        }

    async def _renumber(self, pins: List[RegionPin]) -> None:
        """Write display_order = index for every pin whose position changed."""
        stamp = now()
        for index, pin in enumerate(pins):
            if pin.display_order == index:
                continue
            pin.display_order = index
            pin.updated_at = stamp
            with mongo_errors("reorder pins"):
                await self._collection.update_one(
                    {CommonFields.MONGO_ID: pin.id},
                    {"$set": {PinFields.DISPLAY_ORDER: index, PinFields.UPDATED_AT: stamp}},
                    session=self._session,
                )

    async def add(self, user_id: str, region_id: str, display_order: Optional[int] = None) -> RegionPin:
        pins = await self.find_by_user(user_id)
        if any(pin.region_id == region_id for pin in pins):
            raise RepositoryError.conflict("Region is already pinned")

        position = len(pins) if display_order is None else max(0, min(display_order, len(pins)))
        pin = RegionPin(user_id=user_id, region_id=region_id, display_order=position)
        with mongo_errors("pin region", "Region is already pinned"):
            await self._collection.insert_one(self._to_document(pin), session=self._session)

        pins.insert(position, pin)
        await self._renumber(pins)
        return pin

    async def remove(self, user_id: str, region_id: str) -> None:
        pins = await self.find_by_user(user_id)
        target = next((pin for pin in pins if pin.region_id == region_id), None)
        if target is None:
            raise RepositoryError.not_found(self.ENTITY, region_id)
        await self._delete_by_id(target.id, "unpin region")
        pins.remove(target)
        await self._renumber(pins)

    async def find_by_user(self, user_id: str) -> List[RegionPin]:
        return await self._find_many(
            {PinFields.USER_ID: user_id},
            "list pinned regions",
            sort=[(PinFields.DISPLAY_ORDER, ASCENDING)],
        )

    async def find_by_user_and_region(self, user_id: str, region_id: str) -> Optional[RegionPin]:
        return await self._find_one({PinFields.USER_ID: user_id, PinFields.REGION_ID: region_id}, "find pin")

    async def reorder(self, user_id: str, region_ids: List[str]) -> List[RegionPin]:
        pins = await self.find_by_user(user_id)
        by_region = {pin.region_id: pin for pin in pins}
        for region_id in region_ids:
            if region_id not in by_region:
                raise RepositoryError.not_found(self.ENTITY, region_id)

        listed = [by_region[region_id] for region_id in region_ids]
        rest = [pin for pin in pins if pin.region_id not in set(region_ids)]
        ordered = listed + rest
        await self._renumber(ordered)
        return ordered

    async def get_max_display_order(self, user_id: str) -> Optional[int]:
        pins = await self._find_many(
            {PinFields.USER_ID: user_id},
            "get max pin order",
            sort=[(PinFields.DISPLAY_ORDER, DESCENDING)],
            limit=1,
        )
        return pins[0].display_order if pins else None

    async def delete_by_region(self, region_id: str) -> int:
        doomed = await self._find_many({PinFields.REGION_ID: region_id}, "find region pins")
        with mongo_errors("remove region pins"):
            result = await self._collection.delete_many({PinFields.REGION_ID: region_id}, session=self._session)
        for user_id in {pin.user_id for pin in doomed}:
            await self._renumber(await self.find_by_user(user_id))
        return result.deleted_count
