"""Pydantic models for direct-upload signing."""

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import DEFAULT_DIRECT_UPLOAD_FOLDER, FOLDER_PATTERN


class SignUploadRequest(BaseModel):
    """Validation model for a signing request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    folder: str = Field(
        DEFAULT_DIRECT_UPLOAD_FOLDER,
        min_length=1,
        max_length=255,
        pattern=FOLDER_PATTERN,
        description="Folder the browser will upload into",
    )


class SignUploadResponse(BaseModel):
    """Signed parameters a browser needs to upload straight to the media store."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    cloud_name: str = Field(..., alias="cloudName")
    api_key: str = Field(..., alias="apiKey")
    signature: str
    timestamp: int
    folder: str
