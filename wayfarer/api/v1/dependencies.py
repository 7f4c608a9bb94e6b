"""
Dependency Container
====================

FastAPI dependencies: the acting user and the application services, resolved
through the DI container.
"""
from typing import Any, Dict, Optional

from fastapi import Header, Query

from wayfarer.api.v1.errors import ApiError
from wayfarer.application.services.admin_service import AdminService
from wayfarer.application.services.checkin_service import CheckinService
from wayfarer.application.services.favorite_service import FavoriteService, PinService
from wayfarer.application.services.permission_service import PermissionService
from wayfarer.application.services.place_service import PlaceService
from wayfarer.application.services.region_service import RegionService
from wayfarer.application.services.report_service import ReportService
from wayfarer.application.services.user_service import UserService
from wayfarer.di.container import get_container
from wayfarer.domain.constants.limits import PaginationLimits
from wayfarer.domain.models.common import SortDirection
from wayfarer.domain.result import ErrorCode, ServiceError


def get_optional_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Acting user from the X-User-Id header, or None for anonymous callers."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Acting user from the X-User-Id header.

    Raises:
        ApiError: PERMISSION_REQUIRED when the header is missing
    """
    user_id = get_optional_user_id(x_user_id)
    if user_id is None:
        raise ApiError(ServiceError(ErrorCode.PERMISSION_REQUIRED, "X-User-Id header is required"))
    return user_id


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise ApiError(ServiceError(ErrorCode.PERMISSION_REQUIRED, "Bearer token is required"))
    return authorization[len("bearer "):].strip()


def get_region_service() -> RegionService:
    """
    Get region service instance (singleton).

    Returns:
        RegionService instance
    """
    return get_container().get(RegionService)


def get_place_service() -> PlaceService:
    """
    Get place service instance (singleton).

    Returns:
        PlaceService instance
    """
    return get_container().get(PlaceService)


def get_favorite_service() -> FavoriteService:
    return get_container().get(FavoriteService)


def get_pin_service() -> PinService:
    return get_container().get(PinService)


def get_permission_service() -> PermissionService:
    return get_container().get(PermissionService)


def get_report_service() -> ReportService:
    return get_container().get(ReportService)


def get_admin_service() -> AdminService:
    return get_container().get(AdminService)


def get_checkin_service() -> CheckinService:
    return get_container().get(CheckinService)


def get_user_service() -> UserService:
    return get_container().get(UserService)


def pagination_query(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(PaginationLimits.DEFAULT_PAGE_SIZE, description="Page size"),
) -> Dict[str, Any]:
    return {"page": page, "limit": limit}


def sort_query(
    sort_by: Optional[str] = Query(None, description="Sort field, e.g. createdAt or visitCount"),
    direction: SortDirection = Query(SortDirection.DESC),
) -> Optional[Dict[str, Any]]:
    if sort_by is None:
        return None
    return {"field": sort_by, "direction": direction}


def location_query(
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    radius_km: Optional[float] = Query(None),
) -> Optional[Dict[str, Any]]:
    """Location filter from query parameters; all three must be present to apply."""
    if latitude is None or longitude is None or radius_km is None:
        return None
    return {"latitude": latitude, "longitude": longitude, "radius_km": radius_km}
