"""Shared image record model."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    StrictStr,
    field_serializer,
    field_validator,
    model_validator,
)

from core.utils.constants import DEFAULT_IMAGE_CONTENT_TYPE
from core.utils.time import ensure_utc, truncate_to_millis, utc_now


class ImageRecord(BaseModel):
    """Persisted description of one uploaded image.

    Field aliases match the stored document and JSON field names, so records
    round-trip between MongoDB, the API and existing clients unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: StrictStr | None = Field(None, alias="_id", description="Repository-assigned identifier")
    original_filename: StrictStr = Field(
        ...,
        alias="originalFilename",
        min_length=1,
        description="File name supplied by the uploading client",
    )
    remote_url: StrictStr = Field(
        ...,
        alias="cloudinaryUrl",
        min_length=1,
        description="Public URL served by the media store",
    )
    remote_object_id: StrictStr = Field(
        ...,
        alias="cloudinaryPublicId",
        min_length=1,
        description="Media store identifier, required for deletion",
    )
    upload_timestamp: datetime = Field(
        default_factory=utc_now,
        alias="uploadDate",
        description="UTC upload instant",
    )
    file_size_bytes: NonNegativeInt = Field(0, alias="fileSize", description="Image size in bytes")
    content_type: StrictStr = Field(
        DEFAULT_IMAGE_CONTENT_TYPE,
        alias="fileType",
        min_length=1,
        description="MIME type of the image (e.g. image/jpeg)",
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        """Render MongoDB ObjectIds as plain strings."""
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("upload_timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return truncate_to_millis(ensure_utc(value))

    @model_validator(mode="after")
    def validate_remote_pair(self) -> "ImageRecord":
        """URL and remote id are only meaningful together."""
        if not self.remote_url.strip() or not self.remote_object_id.strip():
            raise ValueError("cloudinaryUrl and cloudinaryPublicId must both be set")
        return self

    @field_serializer("upload_timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.isoformat()

    def to_document(self) -> dict[str, Any]:
        """Build the MongoDB document for this record (without `_id`)."""
        return {
            "originalFilename": self.original_filename,
            "cloudinaryUrl": self.remote_url,
            "cloudinaryPublicId": self.remote_object_id,
            "uploadDate": self.upload_timestamp,
            "fileSize": self.file_size_bytes,
            "fileType": self.content_type,
        }

    def to_response(self) -> dict[str, Any]:
        """JSON-ready representation used in API bodies."""
        return self.model_dump(by_alias=True)


class ImageListResponse(BaseModel):
    """Response body for the catalog listing."""

    success: bool = True
    count: int = Field(..., description="Number of records returned")
    data: list[dict[str, Any]] = Field(..., description="Image records, newest first")


class RemoteImage(BaseModel):
    """Location of an uploaded object in the media store."""

    model_config = ConfigDict(frozen=True)

    url: StrictStr = Field(..., min_length=1, description="Public (https) URL")
    object_id: StrictStr = Field(..., min_length=1, description="Media store public id")
    size_bytes: NonNegativeInt | None = Field(None, description="Size reported by the media store")
