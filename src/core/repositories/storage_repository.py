"""Abstract contract for remote image storage (the media store)."""

from abc import ABC, abstractmethod
from typing import Any

from core.models.image import RemoteImage
from core.models.upload import UploadedFile


class MediaStoreRepository(ABC):
    """Contract for storing and deleting image files in a media host.

    Implementations could be Cloudinary, S3, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def upload_image(self, *, file: UploadedFile, folder: str) -> RemoteImage:
        """Upload image bytes and return where they live.

        Args:
            file: Staged or in-memory upload
            folder: Destination folder in the media store

        Returns:
            Public URL and remote object id

        Raises:
            ImageUploadFailedError: If the upload is rejected or the store is unreachable
        """

    @abstractmethod
    def remove_image(self, *, object_id: str) -> bool:
        """Delete a remote image.

        Args:
            object_id: Remote object id returned by ``upload_image``

        Returns:
            True if the object was deleted, False if it was already gone

        Raises:
            ImageDeletionFailedError: On any other failure
        """

    @abstractmethod
    def sign_upload(self, *, folder: str) -> dict[str, Any]:
        """Sign parameters for a client-side direct upload.

        Returns:
            Dict with cloud name, API key, signature, timestamp and folder
        """
