"""Business logic for image deletion.

The remote object is removed first and the record second, so a record
never outlives knowledge of where its bytes live.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.providers.cloudinary_media_store import CloudinaryMediaStore
from core.infrastructure.providers.mongodb_metadata import MongoDBMetadata
from core.models.errors import NotFoundError
from core.repositories.metadata_repository import ImageMetadataRepository
from core.repositories.storage_repository import MediaStoreRepository
from core.utils.constants import ERROR_CODE_IMAGE_NOT_FOUND

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Validation that the record exists
    - Deletion of the remote object from the media store
    - Removal of the record from the database
    """

    def __init__(
        self,
        storage: MediaStoreRepository | None = None,
        metadata: ImageMetadataRepository | None = None,
    ) -> None:
        """Initialize the delete service with required infrastructure dependencies."""
        self.storage = storage or CloudinaryMediaStore()
        self.metadata = metadata or MongoDBMetadata()

    def delete_image(self, image_id: str) -> None:
        """Delete an image and its record.

        The deletion flow is:
        1. Fetch the record to confirm it exists and obtain the remote id
        2. Delete the remote object ("not found" remotely is accepted)
        3. Delete the record

        Raises:
            NotFoundError: If no record exists (malformed ids included)
            ImageDeletionFailedError: If the media store refuses the delete; the record is kept
            MetadataOperationFailedError: If the record cannot be removed
        """
        logger.debug("Starting image deletion", extra={"image_id": image_id})

        record = self.metadata.fetch_record(image_id=image_id)

        if record is None:
            logger.warning("Image not found", extra={"image_id": image_id})
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id},
            )

        removed = self.storage.remove_image(object_id=record.remote_object_id)

        self.metadata.remove_record(image_id=image_id)

        logger.info(
            "Image deleted successfully",
            extra={
                "image_id": image_id,
                "remote_object_id": record.remote_object_id,
                "remote_removed": removed,
            },
        )
