"""
Favorite Service
================

Application service for favorite regions and places, and pinned regions.
"""
from typing import List, Optional

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.region_dto import PinRegionRequest, ReorderPinsRequest
from wayfarer.application.use_cases.favorites.manage_favorites import (
    AddPlaceFavoriteUseCase,
    AddRegionFavoriteUseCase,
    ListFavoritePlacesUseCase,
    ListFavoriteRegionsUseCase,
    RemovePlaceFavoriteUseCase,
    RemoveRegionFavoriteUseCase,
)
from wayfarer.application.use_cases.pins.manage_pins import (
    ListPinnedRegionsUseCase,
    PinRegionUseCase,
    ReorderPinnedRegionsUseCase,
    UnpinRegionUseCase,
)
from wayfarer.domain.models.place import PlaceFavorite, PlaceView
from wayfarer.domain.models.region import RegionFavorite, RegionPin, RegionView
from wayfarer.domain.result import ErrorCode, Result


class FavoriteService:
    """
    Application service for favorites.

    Adding and removing a favorite updates the entity's favorite counter in
    the same transaction.
    """

    def __init__(self, context: Context):
        self._add_region_use_case = AddRegionFavoriteUseCase(context)
        self._remove_region_use_case = RemoveRegionFavoriteUseCase(context)
        self._list_regions_use_case = ListFavoriteRegionsUseCase(context)
        self._add_place_use_case = AddPlaceFavoriteUseCase(context)
        self._remove_place_use_case = RemovePlaceFavoriteUseCase(context)
        self._list_places_use_case = ListFavoritePlacesUseCase(context)

    @service_boundary("add region to favorites", ErrorCode.QUERY_FAILED)
    async def add_region_favorite(self, user_id: str, region_id: str) -> Result[RegionFavorite]:
        return await self._add_region_use_case.execute(user_id, region_id)

    @service_boundary("remove region from favorites", ErrorCode.QUERY_FAILED)
    async def remove_region_favorite(self, user_id: str, region_id: str) -> Result[bool]:
        return await self._remove_region_use_case.execute(user_id, region_id)

    @service_boundary("list favorite regions")
    async def list_favorite_regions(self, user_id: str, limit: Optional[int] = None) -> Result[List[RegionView]]:
        """
        Favorite regions, most recently favorited first.

        Args:
            user_id: Owner of the favorites
            limit: Maximum number of regions; None for all, 0 for none

        Returns:
            Ok(list of region views marked as favorited)
        """
        return await self._list_regions_use_case.execute(user_id, limit)

    @service_boundary("add place to favorites", ErrorCode.QUERY_FAILED)
    async def add_place_favorite(self, user_id: str, place_id: str) -> Result[PlaceFavorite]:
        return await self._add_place_use_case.execute(user_id, place_id)

    @service_boundary("remove place from favorites", ErrorCode.QUERY_FAILED)
    async def remove_place_favorite(self, user_id: str, place_id: str) -> Result[bool]:
        return await self._remove_place_use_case.execute(user_id, place_id)

    @service_boundary("list favorite places")
    async def list_favorite_places(self, user_id: str, limit: Optional[int] = None) -> Result[List[PlaceView]]:
        return await self._list_places_use_case.execute(user_id, limit)


class PinService:
    """Application service for pinned regions and their order."""

    def __init__(self, context: Context):
        self._pin_use_case = PinRegionUseCase(context)
        self._unpin_use_case = UnpinRegionUseCase(context)
        self._reorder_use_case = ReorderPinnedRegionsUseCase(context)
        self._list_use_case = ListPinnedRegionsUseCase(context)

    @service_boundary("pin region", ErrorCode.QUERY_FAILED)
    async def pin_region(self, user_id: str, region_id: str,
                         data: Optional[Input] = None) -> Result[RegionPin]:
        request = parse_input(PinRegionRequest, data or {})
        return await self._pin_use_case.execute(user_id, region_id, request.display_order)

    @service_boundary("unpin region", ErrorCode.QUERY_FAILED)
    async def unpin_region(self, user_id: str, region_id: str) -> Result[bool]:
        return await self._unpin_use_case.execute(user_id, region_id)

    @service_boundary("reorder pinned regions", ErrorCode.QUERY_FAILED)
    async def reorder_pinned_regions(self, user_id: str, data: Input) -> Result[List[RegionPin]]:
        request = parse_input(ReorderPinsRequest, data)
        return await self._reorder_use_case.execute(user_id, request.region_ids)

    @service_boundary("list pinned regions")
    async def list_pinned_regions(self, user_id: str) -> Result[List[RegionView]]:
        return await self._list_use_case.execute(user_id)
