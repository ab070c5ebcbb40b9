"""Business logic for registering images uploaded directly to the media store."""

from aws_lambda_powertools import Logger

from core.infrastructure.providers.mongodb_metadata import MongoDBMetadata
from core.repositories.metadata_repository import ImageMetadataRepository

from .models import SaveImageRequest, SaveImageResponse

logger = Logger(UTC=True)


class SaveImageService:
    """Persists the record that completes a client-side direct upload."""

    def __init__(self, metadata: ImageMetadataRepository | None = None) -> None:
        self.metadata = metadata or MongoDBMetadata()

    def save(self, request: SaveImageRequest) -> SaveImageResponse:
        record = self.metadata.create_record(record=request.to_record())

        logger.info(
            "Direct upload registered",
            extra={"image_id": record.id, "remote_object_id": record.remote_object_id},
        )
        return SaveImageResponse(data=record.to_response())
