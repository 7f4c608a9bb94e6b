"""
Region DTO
==========

Pydantic models for region requests and responses.
"""
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from wayfarer.application.dto.common_dto import CoordinatesDTO, LocationFilterDTO, PaginationDTO, SortDTO
from wayfarer.domain.constants.limits import ContentLimits
from wayfarer.domain.models.common import ContentStatus
from wayfarer.domain.models.region import Region, RegionFavorite, RegionPin, RegionView

Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=ContentLimits.MAX_TAG_LENGTH)]


class CreateRegionRequest(BaseModel):
    """DTO for creating a region. New regions start as drafts."""
    name: str = Field(..., min_length=ContentLimits.MIN_NAME_LENGTH, max_length=ContentLimits.MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=ContentLimits.MAX_DESCRIPTION_LENGTH)
    short_description: Optional[str] = Field(None, max_length=ContentLimits.MAX_SHORT_DESCRIPTION_LENGTH)
    coordinates: Optional[CoordinatesDTO] = None
    address: Optional[str] = Field(None, max_length=ContentLimits.MAX_ADDRESS_LENGTH)
    cover_image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Old Town",
                "short_description": "Cobbled streets and cafes",
                "coordinates": {"latitude": 60.1675, "longitude": 24.9525},
                "tags": ["history", "walking"],
            }
        }
    )


class UpdateRegionRequest(BaseModel):
    """DTO for a partial region update. Omitted fields stay unchanged."""
    name: Optional[str] = Field(None, min_length=ContentLimits.MIN_NAME_LENGTH,
                                max_length=ContentLimits.MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=ContentLimits.MAX_DESCRIPTION_LENGTH)
    short_description: Optional[str] = Field(None, max_length=ContentLimits.MAX_SHORT_DESCRIPTION_LENGTH)
    coordinates: Optional[CoordinatesDTO] = None
    address: Optional[str] = Field(None, max_length=ContentLimits.MAX_ADDRESS_LENGTH)
    cover_image: Optional[str] = None
    images: Optional[List[str]] = None
    tags: Optional[List[Tag]] = None


class RegionListRequest(BaseModel):
    status: Optional[ContentStatus] = None
    created_by: Optional[str] = None
    keyword: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    location: Optional[LocationFilterDTO] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class RegionSearchRequest(BaseModel):
    """Strict keyword search. Blank keywords and the wildcard are rejected by the service."""
    keyword: str
    location: Optional[LocationFilterDTO] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class RegionAdvancedSearchRequest(BaseModel):
    """At least one of keyword, tags or location must be given."""
    keyword: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    location: Optional[LocationFilterDTO] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class RegionResponse(BaseModel):
    """DTO for region data, annotated with the caller's favorite/pin state."""
    id: str
    name: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    coordinates: Optional[CoordinatesDTO] = None
    address: Optional[str] = None
    status: ContentStatus
    created_by: str
    cover_image: Optional[str] = None
    images: List[str]
    tags: List[str]
    visit_count: int
    favorite_count: int
    place_count: int
    is_reported: bool
    is_favorited: bool = False
    is_pinned: bool = False
    pin_display_order: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, region: Region, view: Optional[RegionView] = None) -> "RegionResponse":
        return cls(
            id=region.id,
            name=region.name,
            description=region.description,
            short_description=region.short_description,
            coordinates=CoordinatesDTO.from_domain(region.coordinates),
            address=region.address,
            status=region.status,
            created_by=region.created_by,
            cover_image=region.cover_image,
            images=list(region.images),
            tags=list(region.tags),
            visit_count=region.visit_count,
            favorite_count=region.favorite_count,
            place_count=region.place_count,
            is_reported=region.is_reported,
            is_favorited=view.is_favorited if view else False,
            is_pinned=view.is_pinned if view else False,
            pin_display_order=view.pin_display_order if view else None,
            created_at=region.created_at,
            updated_at=region.updated_at,
        )

    @classmethod
    def from_view(cls, view: RegionView) -> "RegionResponse":
        return cls.from_domain(view.region, view)


class PinRegionRequest(BaseModel):
    display_order: Optional[int] = Field(None, ge=0, description="Insert position; omitted appends")


class ReorderPinsRequest(BaseModel):
    region_ids: List[str] = Field(..., description="Pinned region ids in the desired order")


class RegionPinResponse(BaseModel):
    region_id: str
    display_order: int
    updated_at: datetime

    @classmethod
    def from_domain(cls, pin: RegionPin) -> "RegionPinResponse":
        return cls(region_id=pin.region_id, display_order=pin.display_order, updated_at=pin.updated_at)


class RegionFavoriteResponse(BaseModel):
    region_id: str
    created_at: datetime

    @classmethod
    def from_domain(cls, favorite: RegionFavorite) -> "RegionFavoriteResponse":
        return cls(region_id=favorite.region_id, created_at=favorite.created_at)
