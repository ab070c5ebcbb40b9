"""Environment-driven configuration helpers.

Values are read on every call so tests and long-running processes pick up
changes to the environment without re-importing modules.
"""

import os

from core.models.errors import ConfigurationError
from core.utils.constants import (
    DEFAULT_CLOUDINARY_TIMEOUT_SECONDS,
    DEFAULT_MAX_UPLOAD_SIZE,
    DEFAULT_MONGO_COLLECTION_NAME,
    DEFAULT_MONGO_TIMEOUT_MS,
    DEFAULT_PORT,
    DEFAULT_UPLOAD_FOLDER,
    DEFAULT_UPLOAD_MAX_WORKERS,
    ENV_CLOUDINARY_TIMEOUT_SECONDS,
    ENV_CLOUDINARY_UPLOAD_FOLDER,
    ENV_MAX_UPLOAD_SIZE_BYTES,
    ENV_MONGO_COLLECTION_NAME,
    ENV_MONGO_DB_NAME,
    ENV_MONGO_TIMEOUT_MS,
    ENV_PORT,
    ENV_UPLOAD_MAX_WORKERS,
    REQUIRED_ENV_VARS,
)


def _int_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            message=f"{name} must be an integer",
            details={"variable": name, "value": raw},
        ) from exc

    if value < minimum:
        raise ConfigurationError(
            message=f"{name} must be at least {minimum}",
            details={"variable": name, "value": raw},
        )

    return value


def require_env(name: str) -> str:
    """Return a required environment variable or raise ConfigurationError."""
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(
            message=f"{name} environment variable is not set",
            details={"variable": name},
        )
    return value


def get_max_upload_size() -> int | None:
    """Per-file upload limit in bytes; None when the limit is disabled (0)."""
    limit = _int_env(ENV_MAX_UPLOAD_SIZE_BYTES, DEFAULT_MAX_UPLOAD_SIZE)
    return limit or None


def get_upload_folder() -> str:
    return os.getenv(ENV_CLOUDINARY_UPLOAD_FOLDER) or DEFAULT_UPLOAD_FOLDER


def get_upload_max_workers() -> int:
    return _int_env(ENV_UPLOAD_MAX_WORKERS, DEFAULT_UPLOAD_MAX_WORKERS, minimum=1)


def get_cloudinary_timeout() -> int:
    return _int_env(ENV_CLOUDINARY_TIMEOUT_SECONDS, DEFAULT_CLOUDINARY_TIMEOUT_SECONDS, minimum=1)


def get_mongo_db_name() -> str | None:
    return os.getenv(ENV_MONGO_DB_NAME) or None


def get_mongo_collection_name() -> str:
    return os.getenv(ENV_MONGO_COLLECTION_NAME) or DEFAULT_MONGO_COLLECTION_NAME


def get_mongo_timeout_ms() -> int:
    return _int_env(ENV_MONGO_TIMEOUT_MS, DEFAULT_MONGO_TIMEOUT_MS, minimum=1)


def get_port() -> int:
    return _int_env(ENV_PORT, DEFAULT_PORT, minimum=1)


def environment_status() -> dict[str, bool]:
    """Report which required variables are configured."""
    return {name: bool(os.getenv(name)) for name in REQUIRED_ENV_VARS}
