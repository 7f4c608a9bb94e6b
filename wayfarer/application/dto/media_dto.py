"""
Media DTO
=========

Pydantic models for region and place image uploads and check-in photo uploads.
"""
from typing import List

from pydantic import Base64Bytes, BaseModel, Field

from wayfarer.domain.constants.limits import MediaLimits


class ImageFile(BaseModel):
    """One uploaded image as raw bytes."""
    content: bytes
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., pattern=MediaLimits.IMAGE_CONTENT_TYPE_PATTERN)


class UploadImagesRequest(BaseModel):
    files: List[ImageFile] = Field(..., min_length=1, max_length=MediaLimits.MAX_FILES_PER_UPLOAD)
    set_cover_image: bool = Field(False, description="Use the first uploaded image as cover")


class Base64ImageFile(BaseModel):
    """JSON form of an image upload; ``content`` is base64 encoded."""
    content: Base64Bytes
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., pattern=MediaLimits.IMAGE_CONTENT_TYPE_PATTERN)

    def to_image_file(self) -> ImageFile:
        return ImageFile(content=self.content, filename=self.filename, content_type=self.content_type)


class Base64UploadImagesRequest(BaseModel):
    files: List[Base64ImageFile] = Field(..., min_length=1, max_length=MediaLimits.MAX_FILES_PER_UPLOAD)
    set_cover_image: bool = False

    def to_request(self) -> UploadImagesRequest:
        return UploadImagesRequest(
            files=[image.to_image_file() for image in self.files],
            set_cover_image=self.set_cover_image,
        )


class ImageUrlRequest(BaseModel):
    image_url: str = Field(..., min_length=1)


class UploadPhotosRequest(BaseModel):
    """Check-in photo upload; photos have no cover."""
    files: List[ImageFile] = Field(..., min_length=1, max_length=MediaLimits.MAX_FILES_PER_UPLOAD)


class Base64UploadPhotosRequest(BaseModel):
    files: List[Base64ImageFile] = Field(..., min_length=1, max_length=MediaLimits.MAX_FILES_PER_UPLOAD)

    def to_request(self) -> UploadPhotosRequest:
        return UploadPhotosRequest(files=[image.to_image_file() for image in self.files])
