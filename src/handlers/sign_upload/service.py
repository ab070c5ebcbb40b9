"""Business logic for signing direct browser uploads."""

from aws_lambda_powertools import Logger

from core.infrastructure.providers.cloudinary_media_store import CloudinaryMediaStore
from core.repositories.storage_repository import MediaStoreRepository

from .models import SignUploadResponse

logger = Logger(UTC=True)


class SignService:
    """Issues short-lived upload signatures; the API secret never leaves the server."""

    def __init__(self, storage: MediaStoreRepository | None = None) -> None:
        self.storage = storage or CloudinaryMediaStore()

    def sign(self, folder: str) -> SignUploadResponse:
        payload = self.storage.sign_upload(folder=folder)
        logger.debug("Upload signed", extra={"folder": folder})
        return SignUploadResponse.model_validate(payload)
