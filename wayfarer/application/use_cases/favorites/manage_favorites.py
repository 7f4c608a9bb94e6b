"""
Manage Favorites Use Cases
==========================

Adding, removing and listing favorite regions and places. The favorite row
and the entity's ``favorite_count`` change together in one transaction.
"""
from typing import List, Optional

from wayfarer.application.context import Context
from wayfarer.application.use_cases.permissions.place_access import build_place_views
from wayfarer.application.use_cases.region.region_views import build_region_views
from wayfarer.domain.models.place import PlaceFavorite, PlaceView
from wayfarer.domain.models.region import RegionFavorite, RegionView
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import ErrorCode, Ok, Result, conflict, err, not_found


class AddRegionFavoriteUseCase:
    """
    Use case for favoriting a region.

    Duplicates are rejected before the write and again by the repository's
    uniqueness check, so a concurrent second add also ends in CONFLICT.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str) -> Result[RegionFavorite]:
        if await self._context.regions.find_by_id(region_id) is None:
            return not_found("Region", region_id)
        if await self._context.region_favorites.find_by_user_and_region(user_id, region_id):
            return conflict("Region is already in favorites")

        async def add(tx: Context) -> Result[RegionFavorite]:
            try:
                favorite = await tx.region_favorites.add(RegionFavorite(user_id=user_id, region_id=region_id))
            except RepositoryError as exc:
                if exc.code == ErrorCode.CONFLICT:
                    return conflict(exc.message)
                raise
            await tx.regions.adjust_favorite_count(region_id, 1)
            return Ok(favorite)

        return await self._context.with_transaction(add)


class RemoveRegionFavoriteUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str) -> Result[bool]:
        if await self._context.region_favorites.find_by_user_and_region(user_id, region_id) is None:
            return not_found("Region favorite", region_id)

        async def remove(tx: Context) -> Result[bool]:
            try:
                await tx.region_favorites.remove(user_id, region_id)
            except RepositoryError as exc:
                if exc.code == ErrorCode.NOT_FOUND:
                    return err(ErrorCode.NOT_FOUND, exc.message)
                raise
            # The region may already be gone; the favorite row is still removed.
            if await tx.regions.find_by_id(region_id) is not None:
                await tx.regions.adjust_favorite_count(region_id, -1)
            return Ok(True)

        return await self._context.with_transaction(remove)


class ListFavoriteRegionsUseCase:
    """
    Favorite regions of a user, most recently favorited first.

    ``limit=None`` returns all, ``limit=0`` returns nothing.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, limit: Optional[int] = None) -> Result[List[RegionView]]:
        if limit is not None and limit <= 0:
            return Ok([])

        favorites = await self._context.region_favorites.find_by_user(user_id, limit)
        regions = []
        for favorite in favorites:
            region = await self._context.regions.find_by_id(favorite.region_id)
            if region is not None:
                regions.append(region)

        views = await build_region_views(self._context, regions, user_id)
        for view in views:
            view.is_favorited = True
        return Ok(views)


class AddPlaceFavoriteUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, place_id: str) -> Result[PlaceFavorite]:
        if await self._context.places.find_by_id(place_id) is None:
            return not_found("Place", place_id)
        if await self._context.place_favorites.find_by_user_and_place(user_id, place_id):
            return conflict("Place is already in favorites")

        async def add(tx: Context) -> Result[PlaceFavorite]:
            try:
                favorite = await tx.place_favorites.add(PlaceFavorite(user_id=user_id, place_id=place_id))
            except RepositoryError as exc:
                if exc.code == ErrorCode.CONFLICT:
                    return conflict(exc.message)
                raise
            await tx.places.adjust_favorite_count(place_id, 1)
            return Ok(favorite)

        return await self._context.with_transaction(add)


class RemovePlaceFavoriteUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, place_id: str) -> Result[bool]:
        if await self._context.place_favorites.find_by_user_and_place(user_id, place_id) is None:
            return not_found("Place favorite", place_id)

        async def remove(tx: Context) -> Result[bool]:
            try:
                await tx.place_favorites.remove(user_id, place_id)
            except RepositoryError as exc:
                if exc.code == ErrorCode.NOT_FOUND:
                    return err(ErrorCode.NOT_FOUND, exc.message)
                raise
            if await tx.places.find_by_id(place_id) is not None:
                await tx.places.adjust_favorite_count(place_id, -1)
            return Ok(True)

        return await self._context.with_transaction(remove)


class ListFavoritePlacesUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, limit: Optional[int] = None) -> Result[List[PlaceView]]:
        if limit is not None and limit <= 0:
            return Ok([])

        favorites = await self._context.place_favorites.find_by_user(user_id, limit)
        places = []
        for favorite in favorites:
            place = await self._context.places.find_by_id(favorite.place_id)
            if place is not None:
                places.append(place)

        views = await build_place_views(self._context, places, user_id)
        for view in views:
            view.is_favorited = True
        return Ok(views)
