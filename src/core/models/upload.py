"""Uploaded file staging model shared by both HTTP adapters."""

from __future__ import annotations

import io
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from aws_lambda_powertools import Logger

from core.utils.constants import DEFAULT_UPLOAD_FILENAME
from core.utils.mime import normalize_content_type

logger = Logger(UTC=True)


def display_name(filename: str | None, field_name: str | None = None) -> str:
    """Client file name, falling back to the form field name when blank."""
    name = (filename or "").strip()
    return name or (field_name or "").strip() or DEFAULT_UPLOAD_FILENAME


@dataclass
class UploadedFile:
    """One file received in a multipart request.

    The bytes live either in a staged temporary file (``path``) or in memory
    (``data``). Staged files are owned by this object and removed by
    :meth:`cleanup`. Both adapters build instances through the factories so
    a blank client file name resolves the same way everywhere.
    """

    filename: str
    content_type: str
    size: int
    path: Path | None = None
    data: bytes | None = None

    @classmethod
    def from_bytes(
        cls,
        *,
        filename: str | None,
        content_type: str | None,
        data: bytes,
        field_name: str | None = None,
    ) -> UploadedFile:
        return cls(
            filename=display_name(filename, field_name),
            content_type=normalize_content_type(content_type),
            size=len(data),
            data=data,
        )

    @classmethod
    def stage(
        cls,
        *,
        filename: str | None,
        content_type: str | None,
        stream: BinaryIO,
        field_name: str | None = None,
    ) -> UploadedFile:
        """Copy a stream into a temporary file and track it for cleanup."""
        name = display_name(filename, field_name)
        suffix = Path(name).suffix
        with tempfile.NamedTemporaryFile(prefix="upload-", suffix=suffix, delete=False) as tmp:
            shutil.copyfileobj(stream, tmp)
            staged = Path(tmp.name)

        return cls(
            filename=name,
            content_type=normalize_content_type(content_type),
            size=staged.stat().st_size,
            path=staged,
        )

    def open(self) -> BinaryIO | str:
        """Source accepted by the media store: a path or an in-memory stream."""
        if self.path is not None:
            return str(self.path)
        if self.data is not None:
            stream = io.BytesIO(self.data)
            stream.name = self.filename
            return stream
        raise ValueError(f"Uploaded file '{self.filename}' has no content")

    def cleanup(self) -> None:
        """Remove the staged temporary file, if any."""
        if self.path is None:
            return

        try:
            self.path.unlink(missing_ok=True)
        except OSError:
            logger.warning(
                "Failed to remove staged upload",
                extra={"path": str(self.path), "file_name": self.filename},
            )
        self.path = None
