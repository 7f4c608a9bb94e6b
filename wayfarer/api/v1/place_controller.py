"""
Place Controller
================

FastAPI controller for place endpoints.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from wayfarer.api.v1.dependencies import (
    get_current_user_id,
    get_optional_user_id,
    get_place_service,
    location_query,
    pagination_query,
    sort_query,
)
from wayfarer.api.v1.errors import to_page_response, unwrap
from wayfarer.application.dto.common_dto import PageResponse
from wayfarer.application.dto.media_dto import Base64UploadImagesRequest, ImageUrlRequest
from wayfarer.application.dto.place_dto import (
    CreatePlaceRequest,
    MapLocationResponse,
    PlaceAdvancedSearchRequest,
    PlaceResponse,
    PlaceSearchRequest,
    UpdatePlaceRequest,
)
from wayfarer.application.services.place_service import PlaceService
from wayfarer.domain.constants.limits import SearchLimits
from wayfarer.domain.models.common import ContentStatus, PlaceCategory

router = APIRouter(tags=["places"])


@router.post(
    "",
    response_model=PlaceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a place",
    description="Create a new draft place inside a region the author owns.",
)
async def create_place(
    request: CreatePlaceRequest,
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    place = unwrap(await service.create_place(user_id, request))
    return PlaceResponse.from_domain(place)


@router.get("", response_model=PageResponse[PlaceResponse], summary="List places")
async def list_places(
    region_id: Optional[str] = None,
    category: Optional[PlaceCategory] = None,
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    created_by: Optional[str] = None,
    keyword: Optional[str] = None,
    tags: List[str] = Query(default_factory=list),
    location: Optional[Dict[str, Any]] = Depends(location_query),
    sort: Optional[Dict[str, Any]] = Depends(sort_query),
    pagination: Dict[str, Any] = Depends(pagination_query),
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PageResponse[PlaceResponse]:
    data = {
        "region_id": region_id,
        "category": category,
        "status": status_filter,
        "created_by": created_by,
        "keyword": keyword,
        "tags": tags,
        "location": location,
        "sort": sort,
        "pagination": pagination,
    }
    page = unwrap(await service.list_places(data, user_id))
    return to_page_response(page, PlaceResponse.from_domain)


@router.post("/search", response_model=PageResponse[PlaceResponse], summary="Search places")
async def search_places(
    request: PlaceSearchRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PageResponse[PlaceResponse]:
    page = unwrap(await service.search_places(request, user_id))
    return to_page_response(page, PlaceResponse.from_domain)


@router.post(
    "/search/advanced",
    response_model=PageResponse[PlaceResponse],
    summary="Advanced place search",
    description="Search by keyword, tags, location and rating filters.",
)
async def advanced_search_places(
    request: PlaceAdvancedSearchRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PageResponse[PlaceResponse]:
    page = unwrap(await service.advanced_search_places(request, user_id))
    return to_page_response(page, PlaceResponse.from_domain)


@router.get("/suggestions", response_model=List[str], summary="Place name suggestions")
async def get_place_suggestions(
    q: Optional[str] = None,
    region_id: Optional[str] = None,
    limit: int = SearchLimits.DEFAULT_SUGGESTION_LIMIT,
    service: PlaceService = Depends(get_place_service),
) -> List[str]:
    return unwrap(await service.get_place_suggestions(q, region_id, limit))


@router.get(
    "/map/{region_id}",
    response_model=List[MapLocationResponse],
    summary="Map pins for a region",
    description="Published places of a region reduced to name, coordinates and category.",
)
async def get_map_locations(
    region_id: str,
    service: PlaceService = Depends(get_place_service),
) -> List[MapLocationResponse]:
    locations = unwrap(await service.get_map_locations(region_id))
    return [MapLocationResponse.from_domain(location) for location in locations]


@router.get(
    "/region/{region_id}",
    response_model=List[PlaceResponse],
    summary="Places of a region",
    description="Every place of the region the caller may see, newest first.",
)
async def get_places_by_region(
    region_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: PlaceService = Depends(get_place_service),
) -> List[PlaceResponse]:
    views = unwrap(await service.get_places_by_region(region_id, user_id))
    return [PlaceResponse.from_view(view) for view in views]


@router.get(
    "/category/{region_id}/{category}",
    response_model=PageResponse[PlaceResponse],
    summary="Places of one category in a region",
)
async def search_places_by_category(
    region_id: str,
    category: str,
    pagination: Dict[str, Any] = Depends(pagination_query),
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PageResponse[PlaceResponse]:
    page = unwrap(await service.search_places_by_category(region_id, category, pagination, user_id))
    return to_page_response(page, PlaceResponse.from_domain)


@router.get("/{place_id}", response_model=PlaceResponse, summary="Get place by ID")
async def get_place(
    place_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    view = unwrap(await service.get_place(place_id, user_id))
    return PlaceResponse.from_view(view)


@router.patch(
    "/{place_id}",
    response_model=PlaceResponse,
    summary="Update a place",
    description="The creator and invited editors with edit rights may update. "
                "Changing region_id moves the place and its counters.",
)
async def update_place(
    place_id: str,
    request: UpdatePlaceRequest,
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    place = unwrap(await service.update_place(user_id, place_id, request))
    return PlaceResponse.from_domain(place)


@router.delete(
    "/{place_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a place",
)
async def delete_place(
    place_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> Response:
    unwrap(await service.delete_place(user_id, place_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{place_id}/publish", response_model=PlaceResponse, summary="Publish a draft place")
async def publish_place(
    place_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    place = unwrap(await service.publish_place(user_id, place_id))
    return PlaceResponse.from_domain(place)


@router.post(
    "/{place_id}/images",
    response_model=PlaceResponse,
    summary="Upload place images",
    description="Base64 encoded JPEG, PNG, WebP or GIF files, at most 10 per request and 10MB each.",
)
async def upload_place_images(
    place_id: str,
    request: Base64UploadImagesRequest,
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    place = unwrap(await service.upload_place_images(user_id, place_id, request.to_request()))
    return PlaceResponse.from_domain(place)


@router.delete("/{place_id}/images", response_model=PlaceResponse, summary="Remove a place image")
async def delete_place_image(
    place_id: str,
    image_url: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    place = unwrap(await service.delete_place_image(user_id, place_id, image_url))
    return PlaceResponse.from_domain(place)


@router.put("/{place_id}/cover-image", response_model=PlaceResponse, summary="Choose the place cover image")
async def set_place_cover_image(
    place_id: str,
    request: ImageUrlRequest,
    user_id: str = Depends(get_current_user_id),
    service: PlaceService = Depends(get_place_service),
) -> PlaceResponse:
    place = unwrap(await service.set_place_cover_image(user_id, place_id, request.image_url))
    return PlaceResponse.from_domain(place)
