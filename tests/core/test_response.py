import base64
import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.models.errors import FileSizeError, NotFoundError
from core.utils.response import ResponseBuilder, cors_headers, error_payload, request_origin


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_cors_headers_echo_origin() -> None:
    headers = cors_headers("https://app.example.com")

    assert headers["Access-Control-Allow-Origin"] == "https://app.example.com"
    assert headers["Access-Control-Allow-Credentials"] == "true"
    assert "DELETE" in headers["Access-Control-Allow-Methods"]
    assert "Content-Type" in headers["Access-Control-Allow-Headers"]


def test_cors_headers_fall_back_to_wildcard() -> None:
    assert cors_headers(None)["Access-Control-Allow-Origin"] == "*"


def test_request_origin_is_case_insensitive() -> None:
    assert request_origin({"origin": "https://a.example"}) == "https://a.example"
    assert request_origin({"Origin": "https://b.example"}) == "https://b.example"
    assert request_origin(None) is None


def test_ok_response_merges_success() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="https://x.example")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed == {"success": True, "foo": "bar", "request_id": "req-1"}
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://x.example"
    assert resp["headers"]["Content-Type"] == "application/json"


def test_json_response_keeps_body_and_status() -> None:
    resp = ResponseBuilder.json({"success": False, "count": 1}, status=HTTPStatus.MULTI_STATUS)

    assert resp["statusCode"] == 207
    assert parse_body(resp) == {"success": False, "count": 1}


def test_empty_response() -> None:
    resp = ResponseBuilder.empty(cors_origin="https://x.example")

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://x.example"


@pytest.mark.parametrize(
    "func,status,error_name",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST, "BAD_REQUEST"),
        (ResponseBuilder.internal_error, HTTPStatus.INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR"),
    ],
)
def test_error_responses_use_explicit_message(func, status, error_name) -> None:
    resp = func("custom message", request_id="req-x")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["success"] is False
    assert parsed["error"] == error_name
    assert parsed["message"] == "custom message"
    assert parsed["request_id"] == "req-x"
    assert "timestamp" in parsed


def test_from_error_uses_declared_status() -> None:
    resp = ResponseBuilder.from_error(NotFoundError(message="Image not found", details={"image_id": "abc"}))
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.NOT_FOUND
    assert parsed["error"] == "NOT_FOUND"
    assert parsed["details"] == {"image_id": "abc"}

    assert ResponseBuilder.from_error(FileSizeError(message="too big"))["statusCode"] == 413


def test_error_payload_omits_empty_details() -> None:
    payload = error_payload(status=HTTPStatus.BAD_REQUEST, message="bad")

    assert "details" not in payload
    assert payload["error"] == "BAD_REQUEST"


def test_binary_response() -> None:
    content = b"binary-data"

    resp = ResponseBuilder.binary_response(
        content,
        content_type="application/octet-stream",
        headers={"Content-Disposition": 'attachment; filename="a.bin"'},
    )

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["isBase64Encoded"] is True
    assert base64.b64decode(resp["body"]) == content
    assert resp["headers"]["Content-Length"] == str(len(content))
    assert resp["headers"]["Content-Disposition"] == 'attachment; filename="a.bin"'
