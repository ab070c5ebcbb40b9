"""Pydantic models for registering a directly uploaded image."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationInfo, field_validator

from core.models.image import ImageRecord
from core.utils.constants import DEFAULT_IMAGE_CONTENT_TYPE


class SaveImageRequest(BaseModel):
    """Record fields reported by the browser after a direct upload."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    original_filename: str = Field(..., alias="originalFilename", min_length=1)
    remote_url: str = Field(..., alias="cloudinaryUrl", min_length=1)
    remote_object_id: str = Field(..., alias="cloudinaryPublicId", min_length=1)
    file_size_bytes: NonNegativeInt = Field(0, alias="fileSize")
    content_type: str = Field(DEFAULT_IMAGE_CONTENT_TYPE, alias="fileType")

    @field_validator("file_size_bytes", "content_type", mode="before")
    @classmethod
    def default_when_blank(cls, value: Any, info: ValidationInfo) -> Any:
        """Missing, null, zero and empty values fall back to the defaults."""
        if value in (None, "", 0):
            return cls.model_fields[info.field_name].default
        return value

    def to_record(self) -> ImageRecord:
        return ImageRecord(
            original_filename=self.original_filename,
            remote_url=self.remote_url,
            remote_object_id=self.remote_object_id,
            file_size_bytes=self.file_size_bytes,
            content_type=self.content_type,
        )


class SaveImageResponse(BaseModel):
    """Response model for a registered image."""

    success: bool = True
    data: dict[str, Any] = Field(..., description="Persisted image record")
