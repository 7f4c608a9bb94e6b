"""
Check-in DTO
============

Pydantic models for check-in requests and responses.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from wayfarer.application.dto.common_dto import CoordinatesDTO, PaginationDTO, SortDTO
from wayfarer.domain.constants.limits import CheckinLimits
from wayfarer.domain.models.checkin import Checkin, CheckinPhoto
from wayfarer.domain.models.common import CheckinStatus


class CheckinPhotoRequest(BaseModel):
    url: str
    caption: Optional[str] = Field(None, max_length=CheckinLimits.MAX_CAPTION_LENGTH)


class CreateCheckinRequest(BaseModel):
    """DTO for checking in at a place. The user must stand near the place."""
    place_id: str
    comment: Optional[str] = Field(None, max_length=CheckinLimits.MAX_COMMENT_LENGTH)
    rating: Optional[int] = Field(None, ge=CheckinLimits.MIN_RATING, le=CheckinLimits.MAX_RATING)
    user_location: CoordinatesDTO
    is_private: bool = False
    photos: List[CheckinPhotoRequest] = Field(default_factory=list,
                                              max_length=CheckinLimits.MAX_PHOTOS_PER_CHECKIN)


class UpdateCheckinRequest(BaseModel):
    comment: Optional[str] = Field(None, max_length=CheckinLimits.MAX_COMMENT_LENGTH)
    rating: Optional[int] = Field(None, ge=CheckinLimits.MIN_RATING, le=CheckinLimits.MAX_RATING)
    is_private: Optional[bool] = None


class UploadCheckinPhotosRequest(BaseModel):
    photos: List[CheckinPhotoRequest] = Field(..., min_length=1)


class CheckinListRequest(BaseModel):
    place_id: Optional[str] = None
    status: Optional[CheckinStatus] = None
    has_rating: Optional[bool] = None
    sort: Optional[SortDTO] = None
    pagination: PaginationDTO = Field(default_factory=PaginationDTO)


class CheckinPhotoResponse(BaseModel):
    id: str
    checkin_id: str
    url: str
    caption: Optional[str] = None
    display_order: int

    @classmethod
    def from_domain(cls, photo: CheckinPhoto) -> "CheckinPhotoResponse":
        return cls(
            id=photo.id,
            checkin_id=photo.checkin_id,
            url=photo.url,
            caption=photo.caption,
            display_order=photo.display_order,
        )


class CheckinResponse(BaseModel):
    id: str
    user_id: str
    place_id: str
    comment: Optional[str] = None
    rating: Optional[int] = None
    photos: List[str]
    user_location: Optional[CoordinatesDTO] = None
    status: CheckinStatus
    is_private: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, checkin: Checkin) -> "CheckinResponse":
        return cls(
            id=checkin.id,
            user_id=checkin.user_id,
            place_id=checkin.place_id,
            comment=checkin.comment,
            rating=checkin.rating,
            photos=list(checkin.photos),
            user_location=CoordinatesDTO.from_domain(checkin.user_location),
            status=checkin.status,
            is_private=checkin.is_private,
            created_at=checkin.created_at,
            updated_at=checkin.updated_at,
        )
