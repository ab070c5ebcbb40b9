"""Cloudinary-backed implementation of MediaStoreRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from cloudinary.exceptions import Error as CloudinaryError

from core.infrastructure.adapters.cloudinary_adapter import (
    CloudinaryAdapter,
    CloudinaryAdapterProtocol,
)
from core.models.errors import ImageDeletionFailedError, ImageUploadFailedError
from core.models.image import RemoteImage
from core.models.upload import UploadedFile
from core.repositories.storage_repository import MediaStoreRepository
from core.utils.constants import (
    CLOUDINARY_DESTROY_NOT_FOUND,
    CLOUDINARY_DESTROY_OK,
    DEFAULT_RESOURCE_TYPE,
)

logger = Logger(UTC=True)


class CloudinaryMediaStore(MediaStoreRepository):
    """Image storage implementation backed by Cloudinary."""

    def __init__(self, adapter: CloudinaryAdapterProtocol | None = None) -> None:
        """Create storage using the provided Cloudinary adapter."""
        self._cloudinary: CloudinaryAdapterProtocol = adapter or CloudinaryAdapter()

    def upload_image(self, *, file: UploadedFile, folder: str) -> RemoteImage:
        """Upload image bytes with auto-detected resource type."""
        logger.debug(
            "Uploading image",
            extra={"file_name": file.filename, "folder": folder, "size": file.size},
        )

        try:
            result = self._cloudinary.upload(
                file=file.open(),
                folder=folder,
                resource_type=DEFAULT_RESOURCE_TYPE,
            )
        except CloudinaryError as exc:
            logger.error(
                "Cloudinary upload rejected",
                extra={"file_name": file.filename, "error": str(exc)},
            )
            raise ImageUploadFailedError(
                message=f"Unable to upload image: {exc}",
                details={"filename": file.filename},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise ImageUploadFailedError(
                message=f"Unable to upload image: {exc}",
                details={"filename": file.filename},
            ) from exc

        url = result.get("secure_url") or result.get("url")
        object_id = result.get("public_id")
        if not url or not object_id:
            logger.error(
                "Cloudinary response missing url or public_id",
                extra={"file_name": file.filename},
            )
            raise ImageUploadFailedError(
                message="Media store returned an incomplete upload result",
                details={"filename": file.filename},
            )

        logger.info(
            "Image uploaded to media store",
            extra={"file_name": file.filename, "remote_object_id": object_id},
        )
        return RemoteImage(url=url, object_id=object_id, size_bytes=result.get("bytes"))

    def remove_image(self, *, object_id: str) -> bool:
        """Delete an image; 'not found' counts as already deleted."""
        logger.debug("Deleting image", extra={"remote_object_id": object_id})

        try:
            result = self._cloudinary.destroy(public_id=object_id)
        except CloudinaryError as exc:
            logger.error(
                "Cloudinary deletion failed",
                extra={"remote_object_id": object_id, "error": str(exc)},
            )
            raise ImageDeletionFailedError(
                message=f"Unable to delete image from media store: {exc}",
                details={"remote_object_id": object_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise ImageDeletionFailedError(
                message=f"Unable to delete image from media store: {exc}",
                details={"remote_object_id": object_id},
            ) from exc

        outcome = (result or {}).get("result")

        if outcome == CLOUDINARY_DESTROY_OK:
            logger.info("Image deleted from media store", extra={"remote_object_id": object_id})
            return True

        if outcome == CLOUDINARY_DESTROY_NOT_FOUND:
            logger.warning(
                "Image already absent from media store",
                extra={"remote_object_id": object_id},
            )
            return False

        logger.error(
            "Unexpected Cloudinary destroy result",
            extra={"remote_object_id": object_id, "result": outcome},
        )
        raise ImageDeletionFailedError(
            message="Unable to delete image from media store",
            details={"remote_object_id": object_id, "result": outcome},
        )

    def sign_upload(self, *, folder: str) -> dict[str, Any]:
        """Sign a direct-upload request for ``folder``."""
        signature, timestamp = self._cloudinary.sign(
            params={"folder": folder, "resource_type": DEFAULT_RESOURCE_TYPE},
        )

        logger.info("Generated direct upload signature", extra={"folder": folder})

        return {
            "cloudName": self._cloudinary.cloud_name,
            "apiKey": self._cloudinary.api_key,
            "signature": signature,
            "timestamp": timestamp,
            "folder": folder,
        }
