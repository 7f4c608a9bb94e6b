"""
Region Controller
=================

FastAPI controller for region endpoints.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from wayfarer.api.v1.dependencies import (
    get_current_user_id,
    get_optional_user_id,
    get_region_service,
    location_query,
    pagination_query,
    sort_query,
)
from wayfarer.api.v1.errors import to_page_response, unwrap
from wayfarer.application.dto.common_dto import PageResponse
from wayfarer.application.dto.media_dto import Base64UploadImagesRequest, ImageUrlRequest
from wayfarer.application.dto.region_dto import (
    CreateRegionRequest,
    RegionAdvancedSearchRequest,
    RegionResponse,
    RegionSearchRequest,
    UpdateRegionRequest,
)
from wayfarer.application.services.region_service import RegionService
from wayfarer.domain.constants.limits import SearchLimits
from wayfarer.domain.models.common import ContentStatus

router = APIRouter(tags=["regions"])


@router.post(
    "",
    response_model=RegionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a region",
    description="Create a new draft region. Only editors and admins may author content.",
)
async def create_region(
    request: CreateRegionRequest,
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    region = unwrap(await service.create_region(user_id, request))
    return RegionResponse.from_domain(region)


@router.get(
    "",
    response_model=PageResponse[RegionResponse],
    summary="List regions",
    description="List visible regions with optional filters, sort and pagination.",
)
async def list_regions(
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    created_by: Optional[str] = None,
    keyword: Optional[str] = None,
    tags: List[str] = Query(default_factory=list),
    location: Optional[Dict[str, Any]] = Depends(location_query),
    sort: Optional[Dict[str, Any]] = Depends(sort_query),
    pagination: Dict[str, Any] = Depends(pagination_query),
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RegionService = Depends(get_region_service),
) -> PageResponse[RegionResponse]:
    data = {
        "status": status_filter,
        "created_by": created_by,
        "keyword": keyword,
        "tags": tags,
        "location": location,
        "sort": sort,
        "pagination": pagination,
    }
    page = unwrap(await service.list_regions(data, user_id))
    return to_page_response(page, RegionResponse.from_domain)


@router.post(
    "/search",
    response_model=PageResponse[RegionResponse],
    summary="Search regions",
    description="Strict keyword search. A blank keyword or the wildcard '*' is rejected.",
)
async def search_regions(
    request: RegionSearchRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RegionService = Depends(get_region_service),
) -> PageResponse[RegionResponse]:
    page = unwrap(await service.search_regions(request, user_id))
    return to_page_response(page, RegionResponse.from_domain)


@router.post(
    "/search/advanced",
    response_model=PageResponse[RegionResponse],
    summary="Advanced region search",
    description="Search by keyword, tags and location. At least one criterion is required; '*' matches all.",
)
async def advanced_search_regions(
    request: RegionAdvancedSearchRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RegionService = Depends(get_region_service),
) -> PageResponse[RegionResponse]:
    page = unwrap(await service.advanced_search_regions(request, user_id))
    return to_page_response(page, RegionResponse.from_domain)


@router.get("/suggestions", response_model=List[str], summary="Region name suggestions")
async def get_region_suggestions(
    q: Optional[str] = None,
    limit: int = SearchLimits.DEFAULT_SUGGESTION_LIMIT,
    service: RegionService = Depends(get_region_service),
) -> List[str]:
    return unwrap(await service.get_region_suggestions(q, limit))


@router.get("/featured", response_model=List[RegionResponse], summary="Most visited published regions")
async def get_featured_regions(
    limit: int = SearchLimits.DEFAULT_FEATURED_LIMIT,
    service: RegionService = Depends(get_region_service),
) -> List[RegionResponse]:
    regions = unwrap(await service.get_featured_regions(limit))
    return [RegionResponse.from_domain(region) for region in regions]


@router.get("/creator/{creator_id}", response_model=List[RegionResponse], summary="Regions by creator")
async def get_regions_by_creator(
    creator_id: str,
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RegionService = Depends(get_region_service),
) -> List[RegionResponse]:
    regions = unwrap(await service.get_regions_by_creator(creator_id, user_id, status_filter))
    return [RegionResponse.from_domain(region) for region in regions]


@router.get(
    "/{region_id}",
    response_model=RegionResponse,
    summary="Get region by ID",
    description="Drafts are visible to their creator only.",
)
async def get_region(
    region_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    view = unwrap(await service.get_region(region_id, user_id))
    return RegionResponse.from_view(view)


@router.patch("/{region_id}", response_model=RegionResponse, summary="Update a region")
async def update_region(
    region_id: str,
    request: UpdateRegionRequest,
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    region = unwrap(await service.update_region(user_id, region_id, request))
    return RegionResponse.from_domain(region)


@router.delete(
    "/{region_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a region",
    description="Only empty regions can be deleted.",
)
async def delete_region(
    region_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> Response:
    unwrap(await service.delete_region(user_id, region_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{region_id}/publish", response_model=RegionResponse, summary="Publish a draft region")
async def publish_region(
    region_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    region = unwrap(await service.publish_region(user_id, region_id))
    return RegionResponse.from_domain(region)


@router.post(
    "/{region_id}/images",
    response_model=RegionResponse,
    summary="Upload region images",
    description="Base64 encoded JPEG, PNG, WebP or GIF files, at most 10 per request and 10MB each.",
)
async def upload_region_images(
    region_id: str,
    request: Base64UploadImagesRequest,
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    region = unwrap(await service.upload_region_images(user_id, region_id, request.to_request()))
    return RegionResponse.from_domain(region)


@router.delete("/{region_id}/images", response_model=RegionResponse, summary="Remove a region image")
async def delete_region_image(
    region_id: str,
    image_url: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    region = unwrap(await service.delete_region_image(user_id, region_id, image_url))
    return RegionResponse.from_domain(region)


@router.put("/{region_id}/cover-image", response_model=RegionResponse, summary="Choose the region cover image")
async def set_region_cover_image(
    region_id: str,
    request: ImageUrlRequest,
    user_id: str = Depends(get_current_user_id),
    service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    region = unwrap(await service.set_region_cover_image(user_id, region_id, request.image_url))
    return RegionResponse.from_domain(region)
