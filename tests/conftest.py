"""
Pytest configuration and fixtures for image-catalog tests.
Provides MongoDB (mongomock) and Cloudinary (patched SDK) fakes with cleanup.
"""

import os

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/image_catalog_test")
os.environ.setdefault("MONGO_DB_NAME", "image_catalog_test")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456789012345")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageCatalogTests")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-catalog")

import base64
import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import cloudinary.exceptions
import mongomock
import pytest

from core.infrastructure.adapters import mongodb_adapter
from core.infrastructure.adapters.mongodb_adapter import MongoDBConnection
from core.models.image import ImageRecord
from core.utils.settings import get_mongo_collection_name

PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)


class FakeCloudinary:
    """In-memory stand-in for ``cloudinary.uploader`` upload/destroy."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.uploads: list[dict[str, Any]] = []
        self.destroyed: list[str] = []
        self.reject_payloads: set[bytes] = set()
        self.destroy_error: Exception | None = None
        self._lock = threading.Lock()

    def upload(self, file: Any, **options: Any) -> dict[str, Any]:
        if isinstance(file, str):
            data = Path(file).read_bytes()
        else:
            data = file.read()

        if data in self.reject_payloads:
            raise cloudinary.exceptions.Error("Invalid image file")

        public_id = f"{options['folder']}/{uuid.uuid4().hex[:16]}"
        with self._lock:
            self.objects[public_id] = data
            self.uploads.append({"public_id": public_id, "options": options})

        return {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.com/{options['cloud_name']}/image/upload/{public_id}",
            "bytes": len(data),
        }

    def destroy(self, public_id: str, **options: Any) -> dict[str, Any]:
        with self._lock:
            self.destroyed.append(public_id)

        if self.destroy_error is not None:
            raise self.destroy_error

        with self._lock:
            existed = self.objects.pop(public_id, None) is not None

        return {"result": "ok" if existed else "not found"}


@pytest.fixture
def fake_cloudinary(monkeypatch) -> FakeCloudinary:
    fake = FakeCloudinary()
    monkeypatch.setattr("cloudinary.uploader.upload", fake.upload)
    monkeypatch.setattr("cloudinary.uploader.destroy", fake.destroy)
    return fake


@pytest.fixture
def mongo_connection(monkeypatch):
    """
    Shared MongoDB connection backed by mongomock.

    Cleanup Strategy:
    - The collection is dropped after each test (teardown)
    """
    connection = MongoDBConnection(client_factory=mongomock.MongoClient)
    monkeypatch.setattr(mongodb_adapter, "shared_connection", connection)

    yield connection

    connection.database().drop_collection(get_mongo_collection_name())
    connection.close()


@pytest.fixture
def mongo_collection(mongo_connection):
    return mongo_connection.database()[get_mongo_collection_name()]


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    """
    Factory for unsaved image records.

    Usage:
        record = make_record(original_filename="a.png", day=3)
    """

    def _make(
        *,
        original_filename: str = "photo.png",
        day: int = 1,
        file_size_bytes: int = 1024,
        content_type: str = "image/png",
    ) -> ImageRecord:
        suffix = uuid.uuid4().hex[:8]
        return ImageRecord(
            original_filename=original_filename,
            remote_url=f"https://res.cloudinary.com/demo-cloud/image/upload/image-to-link/{suffix}",
            remote_object_id=f"image-to-link/{suffix}",
            upload_timestamp=datetime(2024, 1, day, 10, 0, tzinfo=timezone.utc),
            file_size_bytes=file_size_bytes,
            content_type=content_type,
        )

    return _make


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    return PNG_1X1


def build_multipart(
    files: list[tuple[str, str, str, bytes]],
    fields: dict[str, str] | None = None,
    boundary: str = "----image-catalog-boundary",
) -> tuple[bytes, str]:
    """Encode ``(field, filename, content_type, data)`` parts as multipart/form-data."""
    chunks: list[bytes] = []

    for name, value in (fields or {}).items():
        chunks.append(
            f'--{boundary}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}\r\n'.encode()
        )

    for name, filename, content_type, data in files:
        chunks.append(
            (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
                f"Content-Type: {content_type}\r\n\r\n"
            ).encode()
            + data
            + b"\r\n"
        )

    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks), f"multipart/form-data; boundary={boundary}"


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event carrying a base64 multipart body.

    Usage:
        event = multipart_event([("image", "a.png", "image/png", data)])
    """

    def _event(
        files: list[tuple[str, str, str, bytes]],
        fields: dict[str, str] | None = None,
        *,
        method: str = "POST",
        path: str = "/api/upload",
    ) -> dict[str, Any]:
        body, content_type = build_multipart(files, fields)
        return {
            "httpMethod": method,
            "path": path,
            "headers": {"Content-Type": content_type, "Origin": "https://app.example.com"},
            "body": base64.b64encode(body).decode("ascii"),
            "isBase64Encoded": True,
        }

    return _event


@pytest.fixture
def multipart_body() -> Callable[..., tuple[bytes, str]]:
    """Raw ``(body, content_type)`` builder for posting multipart without a client encoder."""
    return build_multipart
