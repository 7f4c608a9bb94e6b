"""
Common DTOs
===========

Pydantic models shared by several request and response DTOs.
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from wayfarer.domain.constants.limits import CoordinateLimits, LocationLimits, PaginationLimits
from wayfarer.domain.models.common import Coordinates, SortDirection
from wayfarer.domain.queries import LocationFilter, Pagination, SortSpec

T = TypeVar("T")


class CoordinatesDTO(BaseModel):
    """WGS84 coordinates."""
    latitude: float = Field(..., ge=CoordinateLimits.MIN_LATITUDE, le=CoordinateLimits.MAX_LATITUDE)
    longitude: float = Field(..., ge=CoordinateLimits.MIN_LONGITUDE, le=CoordinateLimits.MAX_LONGITUDE)

    def to_domain(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def from_domain(cls, coordinates: Optional[Coordinates]) -> Optional["CoordinatesDTO"]:
        if coordinates is None:
            return None
        return cls(latitude=coordinates.latitude, longitude=coordinates.longitude)


class LocationFilterDTO(BaseModel):
    """Center point and radius. The allowed radius depends on the aggregate searched."""
    latitude: float = Field(..., ge=CoordinateLimits.MIN_LATITUDE, le=CoordinateLimits.MAX_LATITUDE)
    longitude: float = Field(..., ge=CoordinateLimits.MIN_LONGITUDE, le=CoordinateLimits.MAX_LONGITUDE)
    radius_km: float = Field(..., ge=LocationLimits.MIN_SEARCH_RADIUS_KM,
                             le=LocationLimits.MAX_REGION_SEARCH_RADIUS_KM)

    def to_domain(self) -> LocationFilter:
        return LocationFilter(
            coordinates=Coordinates(latitude=self.latitude, longitude=self.longitude),
            radius_km=self.radius_km,
        )


class PaginationDTO(BaseModel):
    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(PaginationLimits.DEFAULT_PAGE_SIZE, ge=1, le=PaginationLimits.MAX_PAGE_SIZE)

    def to_domain(self) -> Pagination:
        return Pagination(page=self.page, limit=self.limit)


class SortDTO(BaseModel):
    field: str = Field(..., description="Sort field, e.g. createdAt or visitCount")
    direction: SortDirection = SortDirection.DESC

    def to_domain(self) -> SortSpec:
        return SortSpec(field=self.field, direction=self.direction)


class PageResponse(BaseModel, Generic[T]):
    """One page of results with the size of the whole filtered set."""
    items: List[T]
    total_count: int
    page: int
    limit: int
    total_pages: int


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""
    code: str
    message: str
