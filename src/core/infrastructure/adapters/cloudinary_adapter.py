"""Thin adapter for interacting with Cloudinary."""

import time
from typing import Any, BinaryIO, Protocol

import cloudinary.uploader
import cloudinary.utils

from core.utils.constants import (
    ENV_CLOUDINARY_API_KEY,
    ENV_CLOUDINARY_API_SECRET,
    ENV_CLOUDINARY_CLOUD_NAME,
)
from core.utils.settings import get_cloudinary_timeout, require_env


class CloudinaryAdapterProtocol(Protocol):
    """Minimal Cloudinary adapter protocol (repository-facing)."""

    cloud_name: str
    api_key: str

    def upload(
        self,
        *,
        file: BinaryIO | str,
        folder: str,
        resource_type: str,
    ) -> dict[str, Any]: ...

    def destroy(self, *, public_id: str) -> dict[str, Any]: ...

    def sign(self, *, params: dict[str, Any]) -> tuple[str, int]: ...


class CloudinaryAdapter:
    """Low-level Cloudinary operations (mechanical, no error handling).

    This adapter:
    - Wraps the cloudinary SDK uploader and signing utilities
    - Passes credentials per call instead of mutating global SDK config
    - Does NOT handle errors (lets them bubble up)
    """

    def __init__(self) -> None:
        """Read Cloudinary credentials from the environment."""
        self.cloud_name = require_env(ENV_CLOUDINARY_CLOUD_NAME)
        self.api_key = require_env(ENV_CLOUDINARY_API_KEY)
        self._api_secret = require_env(ENV_CLOUDINARY_API_SECRET)
        self._timeout = get_cloudinary_timeout()

    def _credentials(self) -> dict[str, Any]:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self._api_secret,
            "secure": True,
        }

    def upload(
        self,
        *,
        file: BinaryIO | str,
        folder: str,
        resource_type: str,
    ) -> dict[str, Any]:
        """Upload a file path or stream.
        Raises cloudinary exceptions - caught by domain implementation.
        """
        return cloudinary.uploader.upload(
            file,
            folder=folder,
            resource_type=resource_type,
            timeout=self._timeout,
            **self._credentials(),
        )

    def destroy(self, *, public_id: str) -> dict[str, Any]:
        """Delete an uploaded asset by public id.
        Raises cloudinary exceptions - caught by domain implementation.
        """
        return cloudinary.uploader.destroy(
            public_id,
            timeout=self._timeout,
            **self._credentials(),
        )

    def sign(self, *, params: dict[str, Any]) -> tuple[str, int]:
        """Sign ``params`` plus a fresh timestamp; returns (signature, timestamp)."""
        timestamp = int(time.time())
        signature = cloudinary.utils.api_sign_request(
            {**params, "timestamp": timestamp},
            self._api_secret,
        )
        return signature, timestamp
