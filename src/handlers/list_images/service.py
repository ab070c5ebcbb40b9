"""Business logic for listing the image catalog."""

from aws_lambda_powertools import Logger

from core.infrastructure.providers.mongodb_metadata import MongoDBMetadata
from core.models.image import ImageListResponse, ImageRecord
from core.repositories.metadata_repository import ImageMetadataRepository

logger = Logger(UTC=True)


class ListService:
    """Reads the whole catalog, newest upload first.

    NOTE:
    - No pagination; the collection is scanned in full.
    """

    def __init__(self, metadata: ImageMetadataRepository | None = None) -> None:
        self.metadata = metadata or MongoDBMetadata()

    def list_images(self) -> list[ImageRecord]:
        records = self.metadata.list_records()
        logger.debug("Catalog listed", extra={"count": len(records)})
        return records

    def list_response(self) -> ImageListResponse:
        records = self.list_images()
        return ImageListResponse(
            count=len(records),
            data=[record.to_response() for record in records],
        )
