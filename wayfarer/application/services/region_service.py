"""
Region Service
==============

Application service that coordinates region operations.
Every method returns a Result and never raises.
"""
from typing import List, Optional

from wayfarer.application.boundary import Input, parse_input, service_boundary
from wayfarer.application.context import Context
from wayfarer.application.dto.media_dto import UploadImagesRequest
from wayfarer.application.dto.region_dto import (
    CreateRegionRequest,
    RegionAdvancedSearchRequest,
    RegionListRequest,
    RegionSearchRequest,
    UpdateRegionRequest,
)
from wayfarer.application.use_cases.media.manage_images import RegionImagesUseCase
from wayfarer.application.use_cases.region.manage_region import (
    CreateRegionUseCase,
    DeleteRegionUseCase,
    GetFeaturedRegionsUseCase,
    GetRegionsByCreatorUseCase,
    GetRegionUseCase,
    PublishRegionUseCase,
    UpdateRegionUseCase,
)
from wayfarer.application.use_cases.region.search_regions import (
    AdvancedSearchRegionsUseCase,
    GetRegionSuggestionsUseCase,
    ListRegionsUseCase,
    SearchRegionsUseCase,
)
from wayfarer.domain.constants.limits import SearchLimits
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import Region, RegionView
from wayfarer.domain.queries import Page, RegionFilter
from wayfarer.domain.result import ErrorCode, Result


class RegionService:
    """
    Application service for region operations.

    This service coordinates the region use cases and provides a high-level
    interface for region management and discovery.
    """

    def __init__(self, context: Context):
        """
        Initialize service with the application context.

        Args:
            context: Repositories and collaborators
        """
        self._context = context
        self._create_use_case = CreateRegionUseCase(context)
        self._update_use_case = UpdateRegionUseCase(context)
        self._delete_use_case = DeleteRegionUseCase(context)
        self._get_use_case = GetRegionUseCase(context)
        self._publish_use_case = PublishRegionUseCase(context)
        self._featured_use_case = GetFeaturedRegionsUseCase(context)
        self._by_creator_use_case = GetRegionsByCreatorUseCase(context)
        self._search_use_case = SearchRegionsUseCase(context)
        self._advanced_search_use_case = AdvancedSearchRegionsUseCase(context)
        self._list_use_case = ListRegionsUseCase(context)
        self._suggestions_use_case = GetRegionSuggestionsUseCase(context)
        self._images_use_case = RegionImagesUseCase(context)

    @service_boundary("create region", ErrorCode.QUERY_FAILED)
    async def create_region(self, user_id: str, data: Input) -> Result[Region]:
        """
        Create a draft region.

        Args:
            user_id: Acting user (editor or admin)
            data: CreateRegionRequest or an equivalent mapping

        Returns:
            Ok(region) or Err
        """
        return await self._create_use_case.execute(user_id, parse_input(CreateRegionRequest, data))

    @service_boundary("update region", ErrorCode.QUERY_FAILED)
    async def update_region(self, user_id: str, region_id: str, data: Input) -> Result[Region]:
        return await self._update_use_case.execute(user_id, region_id, parse_input(UpdateRegionRequest, data))

    @service_boundary("delete region", ErrorCode.QUERY_FAILED)
    async def delete_region(self, user_id: str, region_id: str) -> Result[bool]:
        return await self._delete_use_case.execute(user_id, region_id)

    @service_boundary("get region")
    async def get_region(self, region_id: str, user_id: Optional[str] = None) -> Result[RegionView]:
        return await self._get_use_case.execute(region_id, user_id)

    @service_boundary("publish region", ErrorCode.QUERY_FAILED)
    async def publish_region(self, user_id: str, region_id: str) -> Result[Region]:
        return await self._publish_use_case.execute(user_id, region_id)

    @service_boundary("search regions")
    async def search_regions(self, data: Input, user_id: Optional[str] = None) -> Result[Page[Region]]:
        """
        Strict keyword search.

        Args:
            data: RegionSearchRequest or an equivalent mapping
            user_id: Acting user, for draft visibility

        Returns:
            Ok(page of regions); VALIDATION_ERROR for a blank or wildcard keyword
        """
        request = parse_input(RegionSearchRequest, data)
        return await self._search_use_case.execute(
            keyword=request.keyword,
            location=request.location.to_domain() if request.location else None,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
            user_id=user_id,
        )

    @service_boundary("search regions")
    async def advanced_search_regions(self, data: Input, user_id: Optional[str] = None) -> Result[Page[Region]]:
        request = parse_input(RegionAdvancedSearchRequest, data)
        return await self._advanced_search_use_case.execute(
            keyword=request.keyword,
            tags=request.tags,
            location=request.location.to_domain() if request.location else None,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
            user_id=user_id,
        )

    @service_boundary("list regions")
    async def list_regions(self, data: Optional[Input] = None, user_id: Optional[str] = None) -> Result[Page[Region]]:
        request = parse_input(RegionListRequest, data or {})
        region_filter = RegionFilter(
            status=request.status,
            created_by=request.created_by,
            keyword=request.keyword,
            tags=request.tags,
            location=request.location.to_domain() if request.location else None,
        )
        return await self._list_use_case.execute(
            region_filter=region_filter,
            sort=request.sort.to_domain() if request.sort else None,
            pagination=request.pagination.to_domain(),
            user_id=user_id,
        )

    @service_boundary("get region suggestions")
    async def get_region_suggestions(self, partial_keyword: Optional[str],
                                     limit: int = SearchLimits.DEFAULT_SUGGESTION_LIMIT) -> Result[List[str]]:
        return await self._suggestions_use_case.execute(partial_keyword, limit)

    @service_boundary("get featured regions")
    async def get_featured_regions(self, limit: int = SearchLimits.DEFAULT_FEATURED_LIMIT) -> Result[List[Region]]:
        return await self._featured_use_case.execute(limit)

    @service_boundary("get regions by creator")
    async def get_regions_by_creator(self, creator_id: str, user_id: Optional[str] = None,
                                     status: Optional[ContentStatus] = None) -> Result[List[Region]]:
        return await self._by_creator_use_case.execute(creator_id, user_id, status)

    @service_boundary("upload region images", ErrorCode.QUERY_FAILED)
    async def upload_region_images(self, user_id: str, region_id: str, data: Input) -> Result[Region]:
        """
        Store images and add them to the region gallery.

        Args:
            user_id: Region owner or an admin
            region_id: Region to extend
            data: UploadImagesRequest or an equivalent mapping

        Returns:
            Ok(updated region) or Err
        """
        return await self._images_use_case.upload(user_id, region_id, parse_input(UploadImagesRequest, data))

    @service_boundary("delete region image", ErrorCode.QUERY_FAILED)
    async def delete_region_image(self, user_id: str, region_id: str, image_url: str) -> Result[Region]:
        return await self._images_use_case.delete_image(user_id, region_id, image_url)

    @service_boundary("set region cover image", ErrorCode.QUERY_FAILED)
    async def set_region_cover_image(self, user_id: str, region_id: str, image_url: str) -> Result[Region]:
        return await self._images_use_case.set_cover_image(user_id, region_id, image_url)
