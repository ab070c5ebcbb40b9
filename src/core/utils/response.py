"""
Centralized API response builder for AWS Lambda / API Gateway.

The persistent listener reuses the same builder so both hosting models
answer with identical headers and bodies.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.models.errors import ImageServiceError
from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    EXPOSE_HEADERS,
)
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]


def cors_headers(cors_origin: str | None = None) -> dict[str, str]:
    """CORS headers echoing the caller's origin, with credentials allowed."""
    return {
        "Access-Control-Allow-Origin": cors_origin or CORS_ORIGIN,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }


def request_origin(headers: dict[str, Any] | None) -> str | None:
    """Read the Origin header from a case-insensitive-ish header mapping."""
    for name, value in (headers or {}).items():
        if name.lower() == "origin" and value:
            return str(value)
    return None


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": DEFAULT_CONTENT_TYPE,
    }

    @staticmethod
    def _build_headers(cors_origin: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = dict(ResponseBuilder.DEFAULT_HEADERS)
        headers.update(cors_headers(cors_origin))
        return headers

    @staticmethod
    def _response(
        *,
        status: HTTPStatus,
        body: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {}

        if body:
            payload.update(body)

        if request_id:
            payload["request_id"] = request_id

        response: JsonDict = {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": json.dumps(payload, default=str),
        }

        return response

    @staticmethod
    def ok(
        body: JsonDict,
        *,
        status: HTTPStatus = HTTPStatus.OK,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=status,
            body={"success": True, **body},
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def json(
        body: JsonDict,
        *,
        status: HTTPStatus = HTTPStatus.OK,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Send ``body`` as-is; used when the body already carries ``success``."""
        return ResponseBuilder._response(
            status=status,
            body=body,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def empty(*, cors_origin: str | None = None) -> JsonDict:
        """200 with an empty body, used to short-circuit OPTIONS requests."""
        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": cors_headers(cors_origin),
            "body": "",
        }

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=status,
            body=error_payload(status=status, message=message, error=error, details=details),
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def bad_request(
        message: str,
        *,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def internal_error(
        message: str = "Internal server error",
        *,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def from_error(
        exc: ImageServiceError,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Translate a domain error into a response using its declared status."""
        return ResponseBuilder.error(
            status=exc.status,
            error=exc.error_code,
            message=exc.message,
            details=exc.details or None,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def binary_response(
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        response_headers: dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
        }
        response_headers.update(cors_headers(cors_origin))

        if headers:
            response_headers.update(headers)

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }


def error_payload(
    *,
    status: HTTPStatus,
    message: str,
    error: str | None = None,
    details: JsonDict | None = None,
) -> JsonDict:
    """Error body shared by every adapter."""
    payload: JsonDict = {
        "success": False,
        "error": error or status.name,
        "message": message,
        "timestamp": utc_now_iso(),
    }

    if details:
        payload["details"] = details

    return payload
