"""
Place DTO
=========

Pydantic models for place, editor permission and sharing requests and responses.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wayfarer.application.dto.common_dto import CoordinatesDTO, LocationFilterDTO, PaginationDTO, SortDTO
from wayfarer.application.dto.region_dto import Tag
from wayfarer.domain.constants.limits import CheckinLimits, ContentLimits
from wayfarer.domain.models.common import BusinessHours, ContentStatus, DayOfWeek, PlaceCategory
from wayfarer.domain.models.place import MapLocation, Place, PlaceFavorite, PlacePermission, PlaceView

TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class BusinessHoursDTO(BaseModel):
    day_of_week: DayOfWeek
    open_time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="HH:MM")
    close_time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="HH:MM")
    is_closed: bool = False

    def to_domain(self) -> BusinessHours:
        return BusinessHours(
            day_of_week=self.day_of_week,
            open_time=self.open_time,
            close_time=self.close_time,
            is_closed=self.is_closed,
        )

    @classmethod
    def from_domain(cls, hours: BusinessHours) -> "BusinessHoursDTO":
        return cls(
            day_of_week=hours.day_of_week,
            open_time=hours.open_time,
            close_time=hours.close_time,
            is_closed=hours.is_closed,
        )


class CreatePlaceRequest(BaseModel):
    """DTO for creating a place inside a region."""
    name: str = Field(..., min_length=ContentLimits.MIN_NAME_LENGTH, max_length=ContentLimits.MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=ContentLimits.MAX_DESCRIPTION_LENGTH)
    short_description: Optional[str] = Field(None, max_length=ContentLimits.MAX_SHORT_DESCRIPTION_LENGTH)
    category: PlaceCategory
    region_id: str
    coordinates: CoordinatesDTO
    address: str = Field(..., max_length=ContentLimits.MAX_ADDRESS_LENGTH)
    phone: Optional[str] = Field(None, max_length=ContentLimits.MAX_PHONE_LENGTH)
    website: Optional[str] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    cover_image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)
    business_hours: List[BusinessHoursDTO] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Harbour Cafe",
                "category": "cafe",
                "region_id": "0b8f3c2e-7d1a-4c36-9a53-2f1d7f0c9e11",
                "coordinates": {"latitude": 60.1669, "longitude": 24.9561},
                "address": "Market Square 1",
                "tags": ["coffee"],
            }
        }
    )


class UpdatePlaceRequest(BaseModel):
    """
    DTO for a partial place update.

    Setting ``region_id`` moves the place to another region.
    """
    name: Optional[str] = Field(None, min_length=ContentLimits.MIN_NAME_LENGTH,
                                max_length=ContentLimits.MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=ContentLimits.MAX_DESCRIPTION_LENGTH)
    short_description: Optional[str] = Field(None, max_length=ContentLimits.MAX_SHORT_DESCRIPTION_LENGTH)
    category: Optional[PlaceCategory] = None
    region_id: Optional[str] = None
    coordinates: Optional[CoordinatesDTO] = None
    address: Optional[str] = Field(None, max_length=ContentLimits.MAX_ADDRESS_LENGTH)
    phone: Optional[str] = Field(None, max_length=ContentLimits.MAX_PHONE_LENGTH)
    website: Optional[str] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    cover_image: Optional[str] = None
    images: Optional[List[str]] = None
    tags: Optional[List[Tag]] = None
    business_hours: Optional[List[BusinessHoursDTO]] = None


class PlaceListRequest(BaseModel):
    region_id: Optional[str] = None
    category: Optional[PlaceCategory] = None
    status: Optional[ContentStatus] = None
    created_by: Optional[str] = None
    keyword: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    location: Optional[LocationFilterDTO] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class PlaceSearchRequest(BaseModel):
    """Strict keyword search over places."""
    keyword: str
    region_id: Optional[str] = None
    category: Optional[PlaceCategory] = None
    location: Optional[LocationFilterDTO] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class PlaceAdvancedSearchRequest(BaseModel):
    """At least one criterion must be given."""
    keyword: Optional[str] = None
    region_id: Optional[str] = None
    category: Optional[PlaceCategory] = None
    tags: List[str] = Field(default_factory=list)
    location: Optional[LocationFilterDTO] = None
    has_rating: Optional[bool] = None
    min_rating: Optional[float] = Field(None, ge=CheckinLimits.MIN_RATING, le=CheckinLimits.MAX_RATING)
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class PlaceResponse(BaseModel):
    """DTO for place data, annotated with the caller's favorite and permission state."""
    id: str
    name: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    category: PlaceCategory
    region_id: str
    coordinates: CoordinatesDTO
    address: str
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    status: ContentStatus
    created_by: str
    cover_image: Optional[str] = None
    images: List[str]
    tags: List[str]
    business_hours: List[BusinessHoursDTO]
    visit_count: int
    favorite_count: int
    checkin_count: int
    average_rating: Optional[float] = None
    is_reported: bool
    is_favorited: bool = False
    has_edit_permission: bool = False
    has_delete_permission: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, place: Place, view: Optional[PlaceView] = None) -> "PlaceResponse":
        return cls(
            id=place.id,
            name=place.name,
            description=place.description,
            short_description=place.short_description,
            category=place.category,
            region_id=place.region_id,
            coordinates=CoordinatesDTO.from_domain(place.coordinates),
            address=place.address,
            phone=place.phone,
            website=place.website,
            email=place.email,
            status=place.status,
            created_by=place.created_by,
            cover_image=place.cover_image,
            images=list(place.images),
            tags=list(place.tags),
            business_hours=[BusinessHoursDTO.from_domain(h) for h in place.business_hours],
            visit_count=place.visit_count,
            favorite_count=place.favorite_count,
            checkin_count=place.checkin_count,
            average_rating=place.average_rating,
            is_reported=place.is_reported,
            is_favorited=view.is_favorited if view else False,
            has_edit_permission=view.has_edit_permission if view else False,
            has_delete_permission=view.has_delete_permission if view else False,
            created_at=place.created_at,
            updated_at=place.updated_at,
        )

    @classmethod
    def from_view(cls, view: PlaceView) -> "PlaceResponse":
        return cls.from_domain(view.place, view)


class MapLocationResponse(BaseModel):
    id: str
    name: str
    coordinates: CoordinatesDTO
    category: PlaceCategory

    @classmethod
    def from_domain(cls, location: MapLocation) -> "MapLocationResponse":
        return cls(
            id=location.id,
            name=location.name,
            coordinates=CoordinatesDTO.from_domain(location.coordinates),
            category=location.category,
        )


class InviteEditorRequest(BaseModel):
    """DTO for inviting a user, by e-mail, to co-edit a place."""
    email: str = Field(..., pattern=EMAIL_PATTERN)
    can_edit: bool = True
    can_delete: bool = False


class UpdatePermissionRequest(BaseModel):
    can_edit: Optional[bool] = None
    can_delete: Optional[bool] = None


class PermissionResponse(BaseModel):
    id: str
    place_id: str
    user_id: str
    can_edit: bool
    can_delete: bool
    invited_by: str
    invited_at: datetime
    accepted_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, permission: PlacePermission) -> "PermissionResponse":
        return cls(
            id=permission.id,
            place_id=permission.place_id,
            user_id=permission.user_id,
            can_edit=permission.can_edit,
            can_delete=permission.can_delete,
            invited_by=permission.invited_by,
            invited_at=permission.invited_at,
            accepted_at=permission.accepted_at,
        )


class ContentStatusRequest(BaseModel):
    """Admin request to move a region or place to another status."""
    status: ContentStatus


class ContentStatisticsResponse(BaseModel):
    total_regions: int
    published_regions: int
    draft_regions: int
    reported_regions: int
    total_places: int
    published_places: int
    draft_places: int
    reported_places: int
    total_users: int


class PlaceFavoriteResponse(BaseModel):
    place_id: str
    created_at: datetime

    @classmethod
    def from_domain(cls, favorite: PlaceFavorite) -> "PlaceFavoriteResponse":
        return cls(place_id=favorite.place_id, created_at=favorite.created_at)
