"""
Favorites and Pins Controller
=============================

Endpoints scoped to the acting user: favorites, pinned regions and places
shared with them.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from wayfarer.api.v1.dependencies import (
    get_current_user_id,
    get_favorite_service,
    get_permission_service,
    get_pin_service,
)
from wayfarer.api.v1.errors import unwrap
from wayfarer.application.dto.place_dto import PlaceFavoriteResponse, PlaceResponse
from wayfarer.application.dto.region_dto import (
    PinRegionRequest,
    RegionFavoriteResponse,
    RegionPinResponse,
    RegionResponse,
    ReorderPinsRequest,
)
from wayfarer.application.services.favorite_service import FavoriteService, PinService
from wayfarer.application.services.permission_service import PermissionService

router = APIRouter(tags=["me"])


@router.get("/favorites/regions", response_model=List[RegionResponse], summary="Favorite regions")
async def list_favorite_regions(
    limit: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service),
) -> List[RegionResponse]:
    views = unwrap(await service.list_favorite_regions(user_id, limit))
    return [RegionResponse.from_view(view) for view in views]


@router.post(
    "/favorites/regions/{region_id}",
    response_model=RegionFavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Favorite a region",
)
async def add_region_favorite(
    region_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service),
) -> RegionFavoriteResponse:
    favorite = unwrap(await service.add_region_favorite(user_id, region_id))
    return RegionFavoriteResponse.from_domain(favorite)


@router.delete(
    "/favorites/regions/{region_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove a region favorite",
)
async def remove_region_favorite(
    region_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service),
) -> Response:
    unwrap(await service.remove_region_favorite(user_id, region_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/favorites/places", response_model=List[PlaceResponse], summary="Favorite places")
async def list_favorite_places(
    limit: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service),
) -> List[PlaceResponse]:
    views = unwrap(await service.list_favorite_places(user_id, limit))
    return [PlaceResponse.from_view(view) for view in views]


@router.post(
    "/favorites/places/{place_id}",
    response_model=PlaceFavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Favorite a place",
)
async def add_place_favorite(
    place_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service),
) -> PlaceFavoriteResponse:
    favorite = unwrap(await service.add_place_favorite(user_id, place_id))
    return PlaceFavoriteResponse.from_domain(favorite)


@router.delete(
    "/favorites/places/{place_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove a place favorite",
)
async def remove_place_favorite(
    place_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service),
) -> Response:
    unwrap(await service.remove_place_favorite(user_id, place_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/pins",
    response_model=List[RegionResponse],
    summary="Pinned regions",
    description="Pinned regions in display order.",
)
async def list_pinned_regions(
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service),
) -> List[RegionResponse]:
    views = unwrap(await service.list_pinned_regions(user_id))
    return [RegionResponse.from_view(view) for view in views]


@router.put(
    "/pins/order",
    response_model=List[RegionPinResponse],
    summary="Reorder pinned regions",
    description="Listed regions move to the front in the given order; unlisted pins follow.",
)
async def reorder_pinned_regions(
    request: ReorderPinsRequest,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service),
) -> List[RegionPinResponse]:
    pins = unwrap(await service.reorder_pinned_regions(user_id, request))
    return [RegionPinResponse.from_domain(pin) for pin in pins]


@router.post(
    "/pins/{region_id}",
    response_model=RegionPinResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pin a region",
)
async def pin_region(
    region_id: str,
    request: Optional[PinRegionRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service),
) -> RegionPinResponse:
    pin = unwrap(await service.pin_region(user_id, region_id, request))
    return RegionPinResponse.from_domain(pin)


@router.delete(
    "/pins/{region_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Unpin a region",
)
async def unpin_region(
    region_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service),
) -> Response:
    unwrap(await service.unpin_region(user_id, region_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/shared-places", response_model=List[PlaceResponse], summary="Places shared with me")
async def get_shared_places(
    user_id: str = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service),
) -> List[PlaceResponse]:
    views = unwrap(await service.get_shared_places(user_id))
    return [PlaceResponse.from_view(view) for view in views]
