"""Abstract contract for image metadata persistence."""

from abc import ABC, abstractmethod

from core.models.image import ImageRecord


class ImageMetadataRepository(ABC):
    """Contract for storing and retrieving image records.

    Implementations could be MongoDB, DynamoDB, PostgreSQL, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def create_record(self, *, record: ImageRecord) -> ImageRecord:
        """Persist a new record.

        Args:
            record: Record without an id

        Returns:
            The stored record, carrying its repository-assigned id

        Raises:
            MongoDBError: If creation fails
        """

    @abstractmethod
    def fetch_record(self, *, image_id: str) -> ImageRecord | None:
        """Fetch one record.

        Returns:
            The record, or None if it does not exist (including malformed ids)

        Raises:
            MongoDBError: If the lookup fails
        """

    @abstractmethod
    def list_records(self) -> list[ImageRecord]:
        """Return every record, newest upload first.

        Raises:
            MongoDBError: If the query fails
        """

    @abstractmethod
    def remove_record(self, *, image_id: str) -> None:
        """Delete one record.

        Raises:
            MongoDBError: If deletion fails
        """
