"""Business logic for image upload operations.

This module coordinates validation, remote storage, and metadata persistence
for single and batch uploads while translating failures into domain-specific
errors. Both the Lambda handler and the persistent listener call into it.
"""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.providers.cloudinary_media_store import CloudinaryMediaStore
from core.infrastructure.providers.mongodb_metadata import MongoDBMetadata
from core.models.errors import (
    FileSizeError,
    ImageServiceError,
    MetadataOperationFailedError,
    MIMETypeError,
    ValidationError,
)
from core.models.image import ImageRecord, RemoteImage
from core.models.upload import UploadedFile
from core.repositories.metadata_repository import ImageMetadataRepository
from core.repositories.storage_repository import MediaStoreRepository
from core.utils.constants import (
    DEFAULT_IMAGE_CONTENT_TYPE,
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_NO_FILES_UPLOADED,
    MULTIPLE_FILE_FIELDS,
    SINGLE_FILE_FIELD,
)
from core.utils.mime import is_image_content_type
from core.utils.settings import get_max_upload_size, get_upload_folder, get_upload_max_workers
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import BatchUploadResponse, FailedUpload, ImageUploadResponse, UploadOptions

logger = Logger(UTC=True)

FilesByField = dict[str, list[UploadedFile]]


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Resolving which form field carries the files
    - Pre-flight validation of every file
    - Uploading image content to the media store
    - Persisting image records, compensating on failure
    - Removing staged files once each attempt is over
    """

    def __init__(
        self,
        storage: MediaStoreRepository | None = None,
        metadata: ImageMetadataRepository | None = None,
    ) -> None:
        """Initialize the upload service with required infrastructure dependencies."""
        self.storage = storage or CloudinaryMediaStore()
        self.metadata = metadata or MongoDBMetadata()

    @staticmethod
    def resolve_files(files: FilesByField, *, batch_only: bool = False) -> tuple[list[UploadedFile], bool]:
        """Pick the files to upload and whether the request is a batch.

        Raises:
            ValidationError: If no files were sent or the fields are ambiguous
        """
        batch = [item for name in MULTIPLE_FILE_FIELDS for item in files.get(name, [])]
        single = files.get(SINGLE_FILE_FIELD, [])

        if batch and single:
            raise ValidationError(
                message="Send files either as 'image' or as 'images', not both",
                details={"fields": [SINGLE_FILE_FIELD, *MULTIPLE_FILE_FIELDS]},
            )

        if batch:
            return batch, True

        if batch_only:
            raise ValidationError(
                message="No files uploaded",
                error_code=ERROR_CODE_NO_FILES_UPLOADED,
                details={"expected_field": MULTIPLE_FILE_FIELDS[0]},
            )

        if len(single) > 1:
            raise ValidationError(
                message="Only one file may be sent as 'image'; use 'images' for several",
                details={"count": len(single)},
            )

        if not single:
            raise ValidationError(
                message="No files uploaded",
                error_code=ERROR_CODE_NO_FILES_UPLOADED,
            )

        return single, False

    @staticmethod
    def validate_files(files: Iterable[UploadedFile]) -> None:
        """Reject the whole request if any file is not an acceptable image.

        Raises:
            MIMETypeError: If a file does not declare an image content type
            FileSizeError: If a file exceeds the configured limit
            ValidationError: If a file is empty or has no name
        """
        max_size = get_max_upload_size()

        for item in files:
            if not item.filename.strip():
                raise ValidationError(message="Uploaded file has no name")

            if not is_image_content_type(item.content_type):
                logger.warning(
                    "Unsupported MIME type",
                    extra={"file_name": item.filename, "mime_type": item.content_type},
                )
                raise MIMETypeError(
                    message="Only image files are allowed",
                    details={"filename": item.filename, "mime_type": item.content_type},
                )

            if max_size is not None and item.size > max_size:
                logger.warning(
                    "File exceeds size limit",
                    extra={"file_name": item.filename, "size": item.size},
                )
                raise FileSizeError(
                    message=f"File '{item.filename}' exceeds the {max_size} byte limit",
                    details={"filename": item.filename, "limit_bytes": max_size, "size_bytes": item.size},
                )

            if item.size == 0:
                raise ValidationError(
                    message=f"File '{item.filename}' is empty",
                    details={"filename": item.filename},
                )

    def upload_file(self, file: UploadedFile, *, folder: str) -> ImageRecord:
        """Upload one file and persist its record.

        The flow is:
        1. Upload bytes to the media store
        2. Persist the image record
        3. On record failure, delete the remote object (best effort)

        Raises:
            ImageUploadFailedError: If the media store upload fails
            MetadataOperationFailedError: If the record cannot be saved
        """
        remote = self.storage.upload_image(file=file, folder=folder)

        try:
            record = self._build_record(file, remote)
            saved = self.metadata.create_record(record=record)
        except ImageServiceError as exc:
            logger.exception(
                "Failed to persist image metadata",
                extra={"file_name": file.filename, "remote_object_id": remote.object_id},
            )
            self._compensate(remote_object_id=remote.object_id, error=exc)
            raise

        logger.info(
            "Image uploaded successfully",
            extra={"image_id": saved.id, "file_name": file.filename},
        )
        return saved

    @staticmethod
    def _build_record(file: UploadedFile, remote: RemoteImage) -> ImageRecord:
        try:
            return ImageRecord(
                original_filename=file.filename,
                remote_url=remote.url,
                remote_object_id=remote.object_id,
                file_size_bytes=file.size,
                content_type=file.content_type or DEFAULT_IMAGE_CONTENT_TYPE,
            )
        except PydanticValidationError as exc:
            raise MetadataOperationFailedError(
                message="Uploaded image produced an invalid record",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
                details={"filename": file.filename, "errors": sanitize_validation_errors(exc.errors())},
            ) from exc

    def _compensate(self, *, remote_object_id: str, error: ImageServiceError) -> None:
        """Remove a remote object whose record could not be saved."""
        try:
            self.storage.remove_image(object_id=remote_object_id)
        except ImageServiceError:
            logger.error(
                "Orphaned remote object after metadata failure",
                extra={"remote_object_id": remote_object_id},
            )
            error.details["orphaned_remote_object_id"] = remote_object_id
            return

        logger.info(
            "Removed remote object after metadata failure",
            extra={"remote_object_id": remote_object_id},
        )

    def _attempt(self, file: UploadedFile, folder: str) -> ImageRecord | FailedUpload:
        try:
            return self.upload_file(file, folder=folder)

        except ImageServiceError as exc:
            return FailedUpload(
                filename=file.filename,
                error=exc.error_code,
                message=exc.message,
                details=exc.details or None,
            )

        except Exception as exc:
            logger.exception("Unexpected error uploading file", extra={"file_name": file.filename})
            return FailedUpload(
                filename=file.filename,
                error=ERROR_CODE_INTERNAL_ERROR,
                message=str(exc),
            )

        finally:
            file.cleanup()

    def upload_batch(self, files: list[UploadedFile], *, folder: str) -> BatchUploadResponse:
        """Upload files concurrently; results are collected in completion order."""
        result = BatchUploadResponse()
        workers = min(get_upload_max_workers(), len(files)) or 1

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._attempt, item, folder) for item in files]

            for future in as_completed(futures):
                outcome = future.result()
                if isinstance(outcome, FailedUpload):
                    result.failed.append(outcome)
                else:
                    result.records.append(outcome)

        log = logger.info if result.success else logger.warning
        log(
            "Batch upload finished",
            extra={"count": len(result.records), "failed": len(result.failed)},
        )
        return result

    def upload(
        self,
        files: FilesByField,
        *,
        folder: str | None = None,
        batch_only: bool = False,
    ) -> ImageUploadResponse | BatchUploadResponse:
        """Run the upload pipeline for one parsed request.

        Staged files are always removed before returning, whatever the outcome.
        """
        try:
            options = validate_request(
                UploadOptions,
                {"folder": folder or None},
                message="Invalid upload options",
            )
            selected, is_batch = self.resolve_files(files, batch_only=batch_only)
            self.validate_files(selected)

            target_folder = options.folder or get_upload_folder()
            logger.debug(
                "Starting image upload",
                extra={"count": len(selected), "folder": target_folder, "batch": is_batch},
            )

            if is_batch:
                return self.upload_batch(selected, folder=target_folder)

            return ImageUploadResponse.from_record(self.upload_file(selected[0], folder=target_folder))

        finally:
            for staged in (item for group in files.values() for item in group):
                staged.cleanup()
