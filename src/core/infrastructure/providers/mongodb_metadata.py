"""MongoDB-backed implementation of ImageMetadataRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from core.infrastructure.adapters.mongodb_adapter import MongoDBAdapter, MongoDBAdapterProtocol
from core.models.errors import ConfigurationError, MongoDBError
from core.models.image import ImageRecord
from core.repositories.metadata_repository import ImageMetadataRepository
from core.utils.constants import (
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_METADATA_LIST_FAILED,
)

logger = Logger(UTC=True)


def _to_object_id(image_id: str) -> ObjectId | None:
    try:
        return ObjectId(image_id)
    except (InvalidId, TypeError):
        return None


class MongoDBMetadata(ImageMetadataRepository):
    """MongoDB-backed metadata storage with error handling.

    All pymongo errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: MongoDBAdapterProtocol | None = None) -> None:
        """Initialize with MongoDB adapter."""
        self._db: MongoDBAdapterProtocol = adapter or MongoDBAdapter()

    @staticmethod
    def _to_record(document: dict[str, Any]) -> ImageRecord:
        try:
            return ImageRecord.model_validate(document)
        except PydanticValidationError as exc:
            logger.error(
                "Stored document is not a valid image record",
                extra={"image_id": str(document.get("_id"))},
            )
            raise MongoDBError(
                message="Invalid image metadata format",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
                details={"image_id": str(document.get("_id"))},
            ) from exc

    def create_record(self, *, record: ImageRecord) -> ImageRecord:
        """Insert a record and return it with its generated id.

        Raises:
            MongoDBError: If creation fails
        """
        logger.debug(
            "Creating metadata",
            extra={"remote_object_id": record.remote_object_id},
        )

        try:
            inserted_id = self._db.insert_one(document=record.to_document())

        except ConfigurationError:
            raise

        except PyMongoError as exc:
            logger.error(
                "MongoDB insert_one failed",
                extra={"remote_object_id": record.remote_object_id, "error": str(exc)},
            )
            raise MongoDBError(
                message=f"Unable to save image metadata: {exc}",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"remote_object_id": record.remote_object_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating metadata")
            raise MongoDBError(
                message=f"Unable to save image metadata: {exc}",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"remote_object_id": record.remote_object_id},
            ) from exc

        created = record.model_copy(update={"id": str(inserted_id)})
        logger.info(
            "Metadata created",
            extra={"image_id": created.id, "remote_object_id": created.remote_object_id},
        )
        return created

    def fetch_record(self, *, image_id: str) -> ImageRecord | None:
        """Fetch a single record; malformed ids are treated as missing.

        Raises:
            MongoDBError: If fetch fails
        """
        logger.debug("Fetching metadata", extra={"image_id": image_id})

        object_id = _to_object_id(image_id)
        if object_id is None:
            logger.warning("Malformed image id", extra={"image_id": image_id})
            return None

        try:
            document = self._db.find_one(query={"_id": object_id})

        except ConfigurationError:
            raise

        except PyMongoError as exc:
            logger.error("MongoDB find_one failed", extra={"image_id": image_id})
            raise MongoDBError(
                message=f"Unable to retrieve image metadata: {exc}",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching metadata")
            raise MongoDBError(
                message=f"Unable to retrieve image metadata: {exc}",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        if document is None:
            return None

        return self._to_record(document)

    def list_records(self) -> list[ImageRecord]:
        """List every record, newest first.

        NOTE:
        - Full collection scan, no pagination.
        - Malformed documents are skipped and logged.
        """
        logger.debug("Listing images")

        try:
            documents = self._db.find_sorted(sort_field="uploadDate")

        except ConfigurationError:
            raise

        except PyMongoError as exc:
            logger.error("MongoDB find failed", extra={"error": str(exc)})
            raise MongoDBError(
                message=f"Unable to list images: {exc}",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing images")
            raise MongoDBError(
                message=f"Unable to list images: {exc}",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
            ) from exc

        records: list[ImageRecord] = []
        for document in documents:
            try:
                records.append(self._to_record(document))
            except MongoDBError:
                logger.warning("Skipping malformed item", extra={"image_id": str(document.get("_id"))})

        logger.info("Images listed", extra={"count": len(records)})
        return records

    def remove_record(self, *, image_id: str) -> None:
        """Remove a single record.

        Raises:
            MongoDBError: If deletion fails
        """
        logger.debug("Removing metadata", extra={"image_id": image_id})

        object_id = _to_object_id(image_id)
        if object_id is None:
            return

        try:
            deleted = self._db.delete_one(query={"_id": object_id})

        except ConfigurationError:
            raise

        except PyMongoError as exc:
            logger.error("MongoDB delete_one failed", extra={"image_id": image_id})
            raise MongoDBError(
                message=f"Unable to delete image metadata: {exc}",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing metadata")
            raise MongoDBError(
                message=f"Unable to delete image metadata: {exc}",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info("Metadata removed", extra={"image_id": image_id, "deleted": deleted})
