"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_NO_FILES_UPLOADED = "NO_FILES_UPLOADED"
ERROR_CODE_MALFORMED_BODY = "MALFORMED_BODY"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Media Store (Cloudinary) Errors
ERROR_CODE_MEDIA_STORE = "MEDIA_STORE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Metadata / MongoDB Errors
ERROR_CODE_MONGODB = "MONGODB_ERROR"
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"

# Export Errors
ERROR_CODE_EXPORT_FAILED = "EXPORT_FAILED"

# Internal / Unexpected
ERROR_CODE_CONFIGURATION = "CONFIGURATION_ERROR"
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

DEFAULT_MAX_UPLOAD_SIZE = 100 * 1024 * 1024  # 100MB in bytes
DEFAULT_UPLOAD_MAX_WORKERS = 4

IMAGE_MIME_PREFIX = "image/"
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"
DEFAULT_UPLOAD_FILENAME = "upload"

# Multipart field names
SINGLE_FILE_FIELD = "image"
MULTIPLE_FILE_FIELDS: Final[tuple[str, ...]] = ("images", "images[]")
FOLDER_FIELD = "folder"

FOLDER_PATTERN = r"^[A-Za-z0-9_\-/]+$"

# Literal segments under /api that are routes of their own, never image ids
RESERVED_API_SEGMENTS: Final[frozenset[str]] = frozenset(
    {"images", "upload", "export", "cloudinary-sign", "save-image"}
)

# ============================================================================
# Media Store (Cloudinary)
# ============================================================================

DEFAULT_UPLOAD_FOLDER = "image-to-link"
DEFAULT_DIRECT_UPLOAD_FOLDER = "image-to-link-direct"
DEFAULT_RESOURCE_TYPE = "auto"
DEFAULT_CLOUDINARY_TIMEOUT_SECONDS = 60

CLOUDINARY_DESTROY_OK = "ok"
CLOUDINARY_DESTROY_NOT_FOUND = "not found"

# ============================================================================
# Metadata Store (MongoDB)
# ============================================================================

DEFAULT_MONGO_DB_NAME = "image_catalog"
DEFAULT_MONGO_COLLECTION_NAME = "simpleimages"
DEFAULT_MONGO_TIMEOUT_MS = 10000

# ============================================================================
# Export
# ============================================================================

EXPORT_SHEET_TITLE = "Image URLs"
EXPORT_HEADERS: Final[tuple[str, ...]] = (
    "Image Name",
    "Image URL",
    "Upload Date",
    "File Size (MB)",
    "File Type",
)
EXPORT_HEADER_FILL = "FFE0E0E0"
EXPORT_EMPTY_CELL_WIDTH = 10
EXPORT_FILENAME_TEMPLATE = "image-urls-{date}.xlsx"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# ============================================================================
# Date / Time Formats
# ============================================================================

DATE_FORMAT = "%Y-%m-%d"

# ============================================================================
# HTTP / CORS Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,OPTIONS,PATCH,DELETE,POST,PUT"
CORS_HEADERS = (
    "X-CSRF-Token,X-Requested-With,Accept,Accept-Version,Content-Length,"
    "Content-MD5,Content-Type,Date,X-Api-Version"
)
EXPOSE_HEADERS = "Content-Type,Content-Length,Content-Disposition"
DEFAULT_CONTENT_TYPE = "application/json"

SERVICE_VERSION = "1.0.0"
SERVICE_MESSAGE = "Image Catalog API"
DEFAULT_PORT = 5003

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_MONGO_URI = "MONGO_URI"
ENV_MONGO_DB_NAME = "MONGO_DB_NAME"
ENV_MONGO_COLLECTION_NAME = "MONGO_COLLECTION_NAME"
ENV_MONGO_TIMEOUT_MS = "MONGO_TIMEOUT_MS"
ENV_CLOUDINARY_CLOUD_NAME = "CLOUDINARY_CLOUD_NAME"
ENV_CLOUDINARY_API_KEY = "CLOUDINARY_API_KEY"
ENV_CLOUDINARY_API_SECRET = "CLOUDINARY_API_SECRET"
ENV_CLOUDINARY_UPLOAD_FOLDER = "CLOUDINARY_UPLOAD_FOLDER"
ENV_CLOUDINARY_TIMEOUT_SECONDS = "CLOUDINARY_TIMEOUT_SECONDS"
ENV_MAX_UPLOAD_SIZE_BYTES = "MAX_UPLOAD_SIZE_BYTES"
ENV_UPLOAD_MAX_WORKERS = "UPLOAD_MAX_WORKERS"
ENV_PORT = "PORT"

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    ENV_MONGO_URI,
    ENV_CLOUDINARY_CLOUD_NAME,
    ENV_CLOUDINARY_API_KEY,
    ENV_CLOUDINARY_API_SECRET,
)

# ============================================================================
# Helper Functions
# ============================================================================


def bytes_to_megabytes(size_bytes: int) -> str:
    """Render a byte count as megabytes with two decimals (3145728 -> '3.00')."""
    return f"{size_bytes / 1024 / 1024:.2f}"
