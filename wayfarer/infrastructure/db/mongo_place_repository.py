"""
MongoDB Place Repositories
==========================

Concrete implementations of PlaceRepository, PlaceFavoriteRepository and
PlacePermissionRepository using MongoDB.
"""
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from wayfarer.domain.constants.fields import CommonFields, FavoriteFields, PermissionFields, PlaceFields
from wayfarer.domain.models.common import BusinessHours, ContentStatus, Coordinates, PlaceCategory
from wayfarer.domain.models.place import PLACE_EDITABLE_FIELDS, MapLocation, Place, PlaceFavorite, PlacePermission
from wayfarer.domain.queries import Page, PlaceQuery
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.repositories.place_repository import (
    PlaceFavoriteRepository,
    PlacePermissionRepository,
    PlaceRepository,
)
from wayfarer.domain.search.engine import PLACE_SORT_FIELDS, apply_place_query
from wayfarer.infrastructure.db.base import MongoRepository, clamped_increment, mongo_errors, mongo_sort
from wayfarer.infrastructure.db.content_filters import place_filter_document
from wayfarer.utils.datetime_utils import now


class MongoPlaceRepository(MongoRepository, PlaceRepository):
    """
    MongoDB implementation of PlaceRepository.

    Handles all place persistence operations using MongoDB.
    """

    ENTITY = "Place"

    def _to_entity(self, doc: dict) -> Place:
        """Convert MongoDB document to Place entity."""
        return Place(
            id=doc[CommonFields.MONGO_ID],
            name=doc[PlaceFields.NAME],
            category=PlaceCategory(doc[PlaceFields.CATEGORY]),
            region_id=doc[PlaceFields.REGION_ID],
            coordinates=Coordinates.from_dict(doc[PlaceFields.COORDINATES]),
            address=doc[PlaceFields.ADDRESS],
            created_by=doc[PlaceFields.CREATED_BY],
            description=doc.get(PlaceFields.DESCRIPTION),
            short_description=doc.get(PlaceFields.SHORT_DESCRIPTION),
            phone=doc.get(PlaceFields.PHONE),
            website=doc.get(PlaceFields.WEBSITE),
            email=doc.get(PlaceFields.EMAIL),
            status=ContentStatus(doc.get(PlaceFields.STATUS, ContentStatus.DRAFT.value)),
            cover_image=doc.get(PlaceFields.COVER_IMAGE),
            images=list(doc.get(PlaceFields.IMAGES, [])),
            tags=list(doc.get(PlaceFields.TAGS, [])),
            business_hours=[BusinessHours.from_dict(item) for item in doc.get(PlaceFields.BUSINESS_HOURS, [])],
            visit_count=doc.get(PlaceFields.VISIT_COUNT, 0),
            favorite_count=doc.get(PlaceFields.FAVORITE_COUNT, 0),
            checkin_count=doc.get(PlaceFields.CHECKIN_COUNT, 0),
            average_rating=doc.get(PlaceFields.AVERAGE_RATING),
            is_reported=doc.get(PlaceFields.IS_REPORTED, False),
            created_at=doc[PlaceFields.CREATED_AT],
            updated_at=doc[PlaceFields.UPDATED_AT],
        )

    def _to_document(self, place: Place) -> dict:
        """Convert Place entity to MongoDB document."""
        return {
            CommonFields.MONGO_ID: place.id,
            PlaceFields.NAME: place.name,
            PlaceFields.CATEGORY: place.category.value,
            PlaceFields.REGION_ID: place.region_id,
            PlaceFields.COORDINATES: place.coordinates.to_dict(),
            PlaceFields.ADDRESS: place.address,
            PlaceFields.CREATED_BY: place.created_by,
            PlaceFields.DESCRIPTION: place.description,
            PlaceFields.SHORT_DESCRIPTION: place.short_description,
            PlaceFields.PHONE: place.phone,
            PlaceFields.WEBSITE: place.website,
            PlaceFields.EMAIL: place.email,
            PlaceFields.STATUS: place.status.value,
            PlaceFields.COVER_IMAGE: place.cover_image,
            PlaceFields.IMAGES: list(place.images),
            PlaceFields.TAGS: list(place.tags),
            PlaceFields.BUSINESS_HOURS: [hours.to_dict() for hours in place.business_hours],
            PlaceFields.VISIT_COUNT: place.visit_count,
            PlaceFields.FAVORITE_COUNT: place.favorite_count,
            PlaceFields.CHECKIN_COUNT: place.checkin_count,
            PlaceFields.AVERAGE_RATING: place.average_rating,
            PlaceFields.IS_REPORTED: place.is_reported,
            PlaceFields.CREATED_AT: place.created_at,
            PlaceFields.UPDATED_AT: place.updated_at,
        }

    async def create(self, place: Place) -> Place:
        with mongo_errors("create place", f"Place '{place.id}' already exists"):
            await self._collection.insert_one(self._to_document(place), session=self._session)
        return place

    async def find_by_id(self, place_id: str) -> Optional[Place]:
        return await self._find_one({CommonFields.MONGO_ID: place_id}, "find place")

    async def update(self, place: Place) -> Place:
        place.updated_at = now()
        doc = self._to_document(place)
        fields = {name: doc[name] for name in PLACE_EDITABLE_FIELDS}
        fields[PlaceFields.UPDATED_AT] = place.updated_at
        return await self._update_by_id(place.id, {"$set": fields}, "update place")

    async def update_status(self, place_id: str, status: ContentStatus) -> Place:
        return await self._update_by_id(
            place_id,
            {"$set": {PlaceFields.STATUS: status.value, PlaceFields.UPDATED_AT: now()}},
            "update place status",
        )

    async def set_reported(self, place_id: str, is_reported: bool) -> None:
        await self._update_by_id(place_id, {"$set": {PlaceFields.IS_REPORTED: is_reported}}, "mark place")

    async def delete(self, place_id: str) -> None:
        await self._delete_by_id(place_id, "delete place")

    async def list(self, query: PlaceQuery) -> Page[Place]:
        document = place_filter_document(query)
        if query.filter.location is not None:
            candidates = await self._find_many(document, "list places")
            return apply_place_query(candidates, query)
        return await self._find_page(
            document, mongo_sort(query.sort, PLACE_SORT_FIELDS), query.pagination, "list places",
        )

    async def search(self, query: PlaceQuery) -> Page[Place]:
        return await self.list(query)

    async def get_by_region(self, region_id: str) -> List[Place]:
        return await self._find_many(
            {PlaceFields.REGION_ID: region_id}, "get places by region", sort=[(PlaceFields.CREATED_AT, DESCENDING)],
        )

    async def get_by_creator(self, user_id: str, status: Optional[ContentStatus] = None) -> List[Place]:
        query: Dict[str, Any] = {PlaceFields.CREATED_BY: user_id}
        if status is not None:
            query[PlaceFields.STATUS] = status.value
        return await self._find_many(query, "get places by creator", sort=[(PlaceFields.CREATED_AT, DESCENDING)])

    async def get_map_locations(self, region_id: str) -> List[MapLocation]:
        places = await self._find_many(
            {PlaceFields.REGION_ID: region_id, PlaceFields.STATUS: ContentStatus.PUBLISHED.value},
            "get map locations",
        )
        return [
            MapLocation(id=place.id, name=place.name, coordinates=place.coordinates, category=place.category)
            for place in places
        ]

    async def increment_visit_count(self, place_id: str) -> None:
        await self._update_by_id(place_id, {"$inc": {PlaceFields.VISIT_COUNT: 1}}, "count place visit")

    async def adjust_checkin_count(self, place_id: str, delta: int) -> None:
        await self._update_by_id(place_id, clamped_increment(PlaceFields.CHECKIN_COUNT, delta), "count checkins")

    async def adjust_favorite_count(self, place_id: str, delta: int) -> None:
        await self._update_by_id(
            place_id, clamped_increment(PlaceFields.FAVORITE_COUNT, delta), "count place favorites",
        )

    async def update_rating(self, place_id: str, average_rating: Optional[float]) -> None:
        await self._update_by_id(place_id, {"$set": {PlaceFields.AVERAGE_RATING: average_rating}}, "update rating")

    async def count_by_region(self, region_id: str) -> int:
        with mongo_errors("count places"):
            return await self._collection.count_documents(
                {PlaceFields.REGION_ID: region_id}, session=self._session,
            )


class MongoPlaceFavoriteRepository(MongoRepository, PlaceFavoriteRepository):
    """Place favorites; a unique (user_id, place_id) index enforces one row per pair."""

    ENTITY = "Place favorite"

    def _to_entity(self, doc: dict) -> PlaceFavorite:
        return PlaceFavorite(
            id=doc[CommonFields.MONGO_ID],
            user_id=doc[FavoriteFields.USER_ID],
            place_id=doc[FavoriteFields.PLACE_ID],
            created_at=doc[FavoriteFields.CREATED_AT],
        )

    def _to_document(self, favorite: PlaceFavorite) -> dict:
        return {
            CommonFields.MONGO_ID: favorite.id,
            FavoriteFields.USER_ID: favorite.user_id,
            FavoriteFields.PLACE_ID: favorite.place_id,
            FavoriteFields.CREATED_AT: favorite.created_at,
        }

    async def add(self, favorite: PlaceFavorite) -> PlaceFavorite:
        with mongo_errors("add place favorite", "Place is already in favorites"):
            await self._collection.insert_one(self._to_document(favorite), session=self._session)
        return favorite

    async def remove(self, user_id: str, place_id: str) -> None:
        with mongo_errors("remove place favorite"):
            result = await self._collection.delete_one(
                {FavoriteFields.USER_ID: user_id, FavoriteFields.PLACE_ID: place_id}, session=self._session,
            )
        if result.deleted_count == 0:
            raise RepositoryError.not_found(self.ENTITY, place_id)

    async def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[PlaceFavorite]:
        return await self._find_many(
            {FavoriteFields.USER_ID: user_id},
            "list place favorites",
            sort=[(FavoriteFields.CREATED_AT, DESCENDING), (CommonFields.MONGO_ID, DESCENDING)],
            limit=limit,
        )

    async def find_by_user_and_place(self, user_id: str, place_id: str) -> Optional[PlaceFavorite]:
        return await self._find_one(
            {FavoriteFields.USER_ID: user_id, FavoriteFields.PLACE_ID: place_id}, "find place favorite",
        )

    async def delete_by_place(self, place_id: str) -> int:
        with mongo_errors("remove place favorites"):
            result = await self._collection.delete_many({FavoriteFields.PLACE_ID: place_id}, session=self._session)
        return result.deleted_count


class MongoPlacePermissionRepository(MongoRepository, PlacePermissionRepository):
    """Editor permissions; a unique (user_id, place_id) index allows one per pair."""

    ENTITY = "Permission"

    def _to_entity(self, doc: dict) -> PlacePermission:
        return PlacePermission(
            id=doc[CommonFields.MONGO_ID],
            place_id=doc[PermissionFields.PLACE_ID],
            user_id=doc[PermissionFields.USER_ID],
            invited_by=doc[PermissionFields.INVITED_BY],
            can_edit=doc.get(PermissionFields.CAN_EDIT, True),
            can_delete=doc.get(PermissionFields.CAN_DELETE, False),
            invited_at=doc[PermissionFields.INVITED_AT],
            accepted_at=doc.get(PermissionFields.ACCEPTED_AT),
        )

    def _to_document(self, permission: PlacePermission) -> dict:
        return {
            CommonFields.MONGO_ID: permission.id,
            PermissionFields.PLACE_ID: permission.place_id,
            PermissionFields.USER_ID: permission.user_id,
            PermissionFields.INVITED_BY: permission.invited_by,
            PermissionFields.CAN_EDIT: permission.can_edit,
            PermissionFields.CAN_DELETE: permission.can_delete,
            PermissionFields.INVITED_AT: permission.invited_at,
            PermissionFields.ACCEPTED_AT: permission.accepted_at,
        }

    async def create(self, permission: PlacePermission) -> PlacePermission:
        with mongo_errors("create permission", "User already has permission for this place"):
            await self._collection.insert_one(self._to_document(permission), session=self._session)
        return permission

    async def accept(self, permission_id: str) -> PlacePermission:
        return await self._update_by_id(
            permission_id, {"$set": {PermissionFields.ACCEPTED_AT: now()}}, "accept invitation",
        )

    async def update(self, permission_id: str, can_edit: Optional[bool] = None,
                     can_delete: Optional[bool] = None) -> PlacePermission:
        changes: Dict[str, Any] = {}
        if can_edit is not None:
            changes[PermissionFields.CAN_EDIT] = can_edit
        if can_delete is not None:
            changes[PermissionFields.CAN_DELETE] = can_delete
        if not changes:
            permission = await self.find_by_id(permission_id)
            if permission is None:
                raise RepositoryError.not_found(self.ENTITY, permission_id)
            return permission
        return await self._update_by_id(permission_id, {"$set": changes}, "update permission")

    async def remove(self, permission_id: str) -> None:
        await self._delete_by_id(permission_id, "remove permission")

    async def find_by_id(self, permission_id: str) -> Optional[PlacePermission]:
        return await self._find_one({CommonFields.MONGO_ID: permission_id}, "find permission")

    async def find_by_place(self, place_id: str) -> List[PlacePermission]:
        return await self._find_many({PermissionFields.PLACE_ID: place_id}, "list place permissions")

    async def find_by_user(self, user_id: str) -> List[PlacePermission]:
        return await self._find_many({PermissionFields.USER_ID: user_id}, "list user permissions")

    async def find_by_user_and_place(self, user_id: str, place_id: str) -> Optional[PlacePermission]:
        return await self._find_one(
            {PermissionFields.USER_ID: user_id, PermissionFields.PLACE_ID: place_id}, "find permission",
        )
