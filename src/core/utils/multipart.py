"""
Multipart/form-data parsing for API Gateway proxy events.

API Gateway hands the raw request body to the function (base64-encoded for
binary payloads). The body is fed to python-multipart's streaming parser and
collected into form fields and in-memory uploaded files.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any

from aws_lambda_powertools import Logger
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from core.models.errors import ValidationError
from core.models.upload import UploadedFile
from core.utils.constants import ERROR_CODE_MALFORMED_BODY

logger = Logger(UTC=True)


@dataclass
class MultipartForm:
    """Parsed form: text fields and uploaded files keyed by field name."""

    fields: dict[str, list[str]] = field(default_factory=dict)
    files: dict[str, list[UploadedFile]] = field(default_factory=dict)

    def get_field(self, name: str) -> str | None:
        values = self.fields.get(name)
        return values[0] if values else None


class _PartCollector:
    """python-multipart callbacks that accumulate each part with its headers."""

    def __init__(self) -> None:
        self.form = MultipartForm()
        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        self._data = bytearray()

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data += data[start:end]

    def on_part_end(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        name = options.get(b"name", b"").decode("utf-8", errors="replace")
        if not name:
            logger.debug("Skipping multipart part without a field name")
            return

        filename = options.get(b"filename")
        if filename is None:
            value = bytes(self._data).decode("utf-8", errors="replace")
            self.form.fields.setdefault(name, []).append(value)
            return

        content_type = self._headers.get(b"content-type", b"").decode("latin-1")
        uploaded = UploadedFile.from_bytes(
            filename=filename.decode("utf-8", errors="replace"),
            content_type=content_type,
            data=bytes(self._data),
            field_name=name,
        )
        self.form.files.setdefault(name, []).append(uploaded)


def decode_event_body(event: dict[str, Any]) -> bytes:
    """Return the raw request body from an API Gateway proxy event."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(
                message="Request body is not valid base64",
                error_code=ERROR_CODE_MALFORMED_BODY,
            ) from exc

    return body.encode("utf-8") if isinstance(body, str) else bytes(body)


def header_value(headers: dict[str, Any] | None, name: str) -> str | None:
    wanted = name.lower()
    for key, value in (headers or {}).items():
        if key.lower() == wanted:
            return str(value)
    return None


def parse_multipart(body: bytes, content_type: str | None) -> MultipartForm:
    """Parse a multipart/form-data body.

    Raises:
        ValidationError: If the content type is not multipart or the body is malformed
    """
    media_type, params = parse_options_header(content_type or "")
    if media_type != b"multipart/form-data":
        raise ValidationError(
            message="Error parsing form data: expected multipart/form-data",
            error_code=ERROR_CODE_MALFORMED_BODY,
            details={"content_type": content_type or ""},
        )

    boundary = params.get(b"boundary")
    if not boundary:
        raise ValidationError(
            message="Error parsing form data: missing multipart boundary",
            error_code=ERROR_CODE_MALFORMED_BODY,
        )

    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())

    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        logger.warning("Malformed multipart body", extra={"error": str(exc)})
        raise ValidationError(
            message="Error parsing form data",
            error_code=ERROR_CODE_MALFORMED_BODY,
        ) from exc

    return collector.form
