from http import HTTPStatus

import pytest

from core.models.errors import (
    ConfigurationError,
    FileSizeError,
    ImageDeletionFailedError,
    ImageServiceError,
    ImageUploadFailedError,
    MediaStoreError,
    MetadataOperationFailedError,
    MethodNotAllowedError,
    MIMETypeError,
    MongoDBError,
    NotFoundError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error_cls,status,code",
    [
        (ValidationError, HTTPStatus.BAD_REQUEST, "VALIDATION_FAILED"),
        (MIMETypeError, HTTPStatus.BAD_REQUEST, "UNSUPPORTED_MIME_TYPE"),
        (FileSizeError, HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "FILE_SIZE_EXCEEDED"),
        (NotFoundError, HTTPStatus.NOT_FOUND, "NOT_FOUND"),
        (MongoDBError, HTTPStatus.INTERNAL_SERVER_ERROR, "MONGODB_ERROR"),
        (MediaStoreError, HTTPStatus.INTERNAL_SERVER_ERROR, "MEDIA_STORE_ERROR"),
        (ImageUploadFailedError, HTTPStatus.INTERNAL_SERVER_ERROR, "IMAGE_UPLOAD_FAILED"),
        (ImageDeletionFailedError, HTTPStatus.INTERNAL_SERVER_ERROR, "IMAGE_DELETE_FAILED"),
        (ConfigurationError, HTTPStatus.INTERNAL_SERVER_ERROR, "CONFIGURATION_ERROR"),
    ],
)
def test_error_defaults(error_cls, status, code) -> None:
    exc = error_cls(message="boom")

    assert isinstance(exc, ImageServiceError)
    assert exc.status == status
    assert exc.error_code == code
    assert exc.message == "boom"
    assert exc.details == {}
    assert str(exc) == "boom"


def test_method_not_allowed_has_default_message() -> None:
    exc = MethodNotAllowedError()

    assert exc.status == HTTPStatus.METHOD_NOT_ALLOWED
    assert exc.error_code == "METHOD_NOT_ALLOWED"
    assert exc.message == "Method not allowed"


def test_explicit_code_and_details_are_kept() -> None:
    exc = MongoDBError(
        message="Unable to save",
        error_code="METADATA_CREATE_FAILED",
        details={"remote_object_id": "x"},
    )

    assert exc.error_code == "METADATA_CREATE_FAILED"
    assert exc.details == {"remote_object_id": "x"}


def test_hierarchy() -> None:
    assert issubclass(MIMETypeError, ValidationError)
    assert issubclass(FileSizeError, ValidationError)
    assert issubclass(MongoDBError, MetadataOperationFailedError)
    assert issubclass(ImageUploadFailedError, MediaStoreError)
    assert issubclass(ImageDeletionFailedError, MediaStoreError)
