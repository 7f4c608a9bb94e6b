"""
Place Service
=============

Application service that coordinates place operations.
"""
from typing import List, Optional, Union

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.common_dto import PaginationDTO
from wayfarer.application.dto.media_dto import UploadImagesRequest
from wayfarer.application.dto.place_dto import (
    CreatePlaceRequest,
    PlaceAdvancedSearchRequest,
    PlaceListRequest,
    PlaceSearchRequest,
    UpdatePlaceRequest,
)
from wayfarer.application.use_cases.media.manage_images import PlaceImagesUseCase
from wayfarer.application.use_cases.place.manage_place import (
    CreatePlaceUseCase,
    DeletePlaceUseCase,
    GetMapLocationsUseCase,
    GetPlaceUseCase,
    GetPlacesByRegionUseCase,
    PublishPlaceUseCase,
    UpdatePlaceUseCase,
)
from wayfarer.application.use_cases.place.search_places import (
    AdvancedSearchPlacesUseCase,
    GetPlaceSuggestionsUseCase,
    ListPlacesUseCase,
    SearchPlacesByCategoryUseCase,
    SearchPlacesUseCase,
)
from wayfarer.domain.constants.limits import SearchLimits
from wayfarer.domain.models.common import PlaceCategory
from wayfarer.domain.models.place import MapLocation, Place, PlaceView
from wayfarer.domain.queries import Page, PlaceFilter
from wayfarer.domain.result import ErrorCode, Result, validation_error


class PlaceService:
    """
    Application service for place operations.

    Creation, moves between regions and deletion keep region place counters
    consistent through the transaction coordinator.
    """

    def __init__(self, context: Context):
        self._context = context
        self._create_use_case = CreatePlaceUseCase(context)
        self._update_use_case = UpdatePlaceUseCase(context)
        self._delete_use_case = DeletePlaceUseCase(context)
        self._get_use_case = GetPlaceUseCase(context)
        self._publish_use_case = PublishPlaceUseCase(context)
        self._map_use_case = GetMapLocationsUseCase(context)
        self._by_region_use_case = GetPlacesByRegionUseCase(context)
        self._search_use_case = SearchPlacesUseCase(context)
        self._advanced_search_use_case = AdvancedSearchPlacesUseCase(context)
        self._list_use_case = ListPlacesUseCase(context)
        self._by_category_use_case = SearchPlacesByCategoryUseCase(context)
        self._suggestions_use_case = GetPlaceSuggestionsUseCase(context)
        self._images_use_case = PlaceImagesUseCase(context)

    @service_boundary("create place", ErrorCode.QUERY_FAILED)
    async def create_place(self, user_id: str, data: Input) -> Result[Place]:
        return await self._create_use_case.execute(user_id, parse_input(CreatePlaceRequest, data))

    @service_boundary("update place", ErrorCode.QUERY_FAILED)
    async def update_place(self, user_id: str, place_id: str, data: Input) -> Result[Place]:
        """
        Update a place. A new ``region_id`` moves it to that region.

        Args:
            user_id: Acting user with edit permission
            place_id: Place to update
            data: UpdatePlaceRequest or an equivalent mapping

        Returns:
            Ok(updated place) or Err
        """
        return await self._update_use_case.execute(user_id, place_id, parse_input(UpdatePlaceRequest, data))

    @service_boundary("delete place", ErrorCode.QUERY_FAILED)
    async def delete_place(self, user_id: str, place_id: str) -> Result[bool]:
        return await self._delete_use_case.execute(user_id, place_id)

    @service_boundary("get place")
    async def get_place(self, place_id: str, user_id: Optional[str] = None) -> Result[PlaceView]:
        return await self._get_use_case.execute(place_id, user_id)

    @service_boundary("publish place", ErrorCode.QUERY_FAILED)
    async def publish_place(self, user_id: str, place_id: str) -> Result[Place]:
        return await self._publish_use_case.execute(user_id, place_id)

    @service_boundary("get map locations")
    async def get_map_locations(self, region_id: str) -> Result[List[MapLocation]]:
        return await self._map_use_case.execute(region_id)

    @service_boundary("get places by region")
    async def get_places_by_region(self, region_id: str, user_id: Optional[str] = None) -> Result[List[PlaceView]]:
        return await self._by_region_use_case.execute(region_id, user_id)

    @service_boundary("search places")
    async def search_places(self, data: Input, user_id: Optional[str] = None) -> Result[Page[Place]]:
        request = parse_input(PlaceSearchRequest, data)
        return await self._search_use_case.execute(
            keyword=request.keyword,
            region_id=request.region_id,
            category=request.category,
            location=request.location.to_domain() if request.location else None,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
            user_id=user_id,
        )

    @service_boundary("search places")
    async def advanced_search_places(self, data: Input, user_id: Optional[str] = None) -> Result[Page[Place]]:
        request = parse_input(PlaceAdvancedSearchRequest, data)
        return await self._advanced_search_use_case.execute(
            keyword=request.keyword,
            region_id=request.region_id,
            category=request.category,
            tags=request.tags,
            location=request.location.to_domain() if request.location else None,
            sort=request.sort.to_domain() if request.sort else None,
            has_rating=request.has_rating,
            min_rating=request.min_rating,
            pagination=request.pagination.to_domain(),
            user_id=user_id,
        )

    @service_boundary("list places")
    async def list_places(self, data: Optional[Input] = None, user_id: Optional[str] = None) -> Result[Page[Place]]:
        request = parse_input(PlaceListRequest, data or {})
        place_filter = PlaceFilter(
            region_id=request.region_id,
            category=request.category,
            status=request.status,
            created_by=request.created_by,
            keyword=request.keyword,
            tags=request.tags,
            location=request.location.to_domain() if request.location else None,
        )
        return await self._list_use_case.execute(
            place_filter=place_filter,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
            user_id=user_id,
        )

    @service_boundary("search places by category")
    async def search_places_by_category(self, region_id: str, category: Union[PlaceCategory, str],
                                        pagination: Optional[Input] = None,
                                        user_id: Optional[str] = None) -> Result[Page[Place]]:
        try:
            category = PlaceCategory(category)
        except ValueError:
            return validation_error(f"Invalid category '{category}'")
        window = parse_input(PaginationDTO, pagination or {})
        return await self._by_category_use_case.execute(region_id, category, window.to_domain(), user_id)

    @service_boundary("get place suggestions")
    async def get_place_suggestions(self, partial_keyword: Optional[str], region_id: Optional[str] = None,
                                    limit: int = SearchLimits.DEFAULT_SUGGESTION_LIMIT) -> Result[List[str]]:
        return await self._suggestions_use_case.execute(partial_keyword, region_id, limit)

    @service_boundary("upload place images", ErrorCode.QUERY_FAILED)
    async def upload_place_images(self, user_id: str, place_id: str, data: Input) -> Result[Place]:
        return await self._images_use_case.upload(user_id, place_id, parse_input(UploadImagesRequest, data))

    @service_boundary("delete place image", ErrorCode.QUERY_FAILED)
    async def delete_place_image(self, user_id: str, place_id: str, image_url: str) -> Result[Place]:
        return await self._images_use_case.delete_image(user_id, place_id, image_url)

    @service_boundary("set place cover image", ErrorCode.QUERY_FAILED)
    async def set_place_cover_image(self, user_id: str, place_id: str, image_url: str) -> Result[Place]:
        return await self._images_use_case.set_cover_image(user_id, place_id, image_url)
