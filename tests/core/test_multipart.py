import base64

import pytest

from core.models.errors import ValidationError
from core.utils.multipart import decode_event_body, header_value, parse_multipart

BOUNDARY = "XyZboundary"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"


def body_with(*parts: bytes) -> bytes:
    return b"".join(parts) + f"--{BOUNDARY}--\r\n".encode()


def file_part(name: str, filename: str, content_type: str, data: bytes) -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
        f"Content-Type: {content_type}\r\n\r\n"
    ).encode() + data + b"\r\n"


def field_part(name: str, value: str) -> bytes:
    return f'--{BOUNDARY}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}\r\n'.encode()


class TestParseMultipart:
    def test_collects_files_and_fields(self, sample_image_binary) -> None:
        body = body_with(
            field_part("folder", "holiday"),
            file_part("images", "a.png", "image/png", sample_image_binary),
            file_part("images", "b.jpg", "image/jpeg", b"\xff\xd8\xff"),
        )

        form = parse_multipart(body, CONTENT_TYPE)

        assert form.get_field("folder") == "holiday"
        assert [f.filename for f in form.files["images"]] == ["a.png", "b.jpg"]
        assert form.files["images"][0].data == sample_image_binary
        assert form.files["images"][0].content_type == "image/png"
        assert form.files["images"][1].size == 3

    def test_binary_payload_with_crlf_is_preserved(self) -> None:
        data = b"\x89PNG\r\n\x1a\n--not-a-boundary\r\n\x00\x01"

        form = parse_multipart(body_with(file_part("image", "x.png", "image/png", data)), CONTENT_TYPE)

        assert form.files["image"][0].data == data

    def test_missing_field_returns_none(self) -> None:
        form = parse_multipart(body_with(field_part("other", "1")), CONTENT_TYPE)

        assert form.get_field("folder") is None
        assert form.files == {}

    def test_rejects_non_multipart(self) -> None:
        with pytest.raises(ValidationError) as exc:
            parse_multipart(b"{}", "application/json")

        assert exc.value.error_code == "MALFORMED_BODY"

    def test_rejects_missing_boundary(self) -> None:
        with pytest.raises(ValidationError):
            parse_multipart(b"", "multipart/form-data")


class TestEventBody:
    def test_decodes_base64_body(self) -> None:
        event = {"body": base64.b64encode(b"raw").decode(), "isBase64Encoded": True}

        assert decode_event_body(event) == b"raw"

    def test_plain_body(self) -> None:
        assert decode_event_body({"body": '{"a": 1}'}) == b'{"a": 1}'
        assert decode_event_body({"body": None}) == b""

    def test_invalid_base64(self) -> None:
        with pytest.raises(ValidationError):
            decode_event_body({"body": "***", "isBase64Encoded": True})

    def test_header_value_is_case_insensitive(self) -> None:
        assert header_value({"Content-Type": "a"}, "content-type") == "a"
        assert header_value(None, "content-type") is None
