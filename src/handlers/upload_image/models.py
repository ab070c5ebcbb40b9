"""Pydantic models for image upload request/response."""

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import ImageRecord
from core.utils.constants import FOLDER_PATTERN


class UploadOptions(BaseModel):
    """Validation model for the non-file form fields of an upload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    folder: str | None = Field(
        None,
        min_length=1,
        max_length=255,
        pattern=FOLDER_PATTERN,
        description="Media store folder (letters, digits, underscore, hyphen, slash)",
    )


class FailedUpload(BaseModel):
    """One file of a batch that did not end up persisted."""

    filename: str = Field(..., description="Client-supplied file name")
    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable reason")
    details: dict[str, Any] | None = Field(None, description="Extra context (e.g. orphaned remote id)")


class ImageUploadResponse(BaseModel):
    """Response model for a successful single upload."""

    success: bool = True
    data: dict[str, Any] = Field(..., description="Persisted image record")

    @classmethod
    def from_record(cls, record: ImageRecord) -> "ImageUploadResponse":
        return cls(data=record.to_response())


class BatchUploadResponse(BaseModel):
    """Aggregated outcome of a batch upload.

    ``data`` only ever lists records whose metadata write completed;
    ``failed`` is present once any file did not make it.
    """

    records: list[ImageRecord] = Field(default_factory=list, exclude=True)
    failed: list[FailedUpload] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def status(self) -> HTTPStatus:
        if self.success:
            return HTTPStatus.OK
        if self.records:
            return HTTPStatus.MULTI_STATUS
        return HTTPStatus.INTERNAL_SERVER_ERROR

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "success": self.success,
            "count": len(self.records),
            "data": [record.to_response() for record in self.records],
        }

        if self.failed:
            body["failed"] = [item.model_dump(exclude_none=True) for item in self.failed]
            body["message"] = f"{len(self.failed)} of {len(self.records) + len(self.failed)} uploads failed"

        return body
