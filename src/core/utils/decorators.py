"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import ImageServiceError, MethodNotAllowedError
from core.utils.response import ResponseBuilder, cors_headers, request_origin

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]
Handler = Callable[..., JsonDict]


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if level == "exception":
        # logger.exception automatically includes traceback
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def request_log_context(event: dict[str, Any], context: Any) -> JsonDict:
    """Structured fields describing an incoming API Gateway request."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "query_params": event.get("queryStringParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }


def api_gateway_handler(
    func: Handler | None = None,
    *,
    methods: Iterable[str] | None = None,
) -> Any:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - CORS preflight (OPTIONS) short-circuit with 200 and an empty body
    - 405 for methods outside ``methods`` (when given)
    - CORS headers echoing the request origin on every response
    - Domain errors mapped to their declared HTTP status
    - Centralized handling of unexpected exceptions

    Example:
        @api_gateway_handler(methods=("GET",))
        def lambda_handler(event, context):
            return ResponseBuilder.ok({"data": []})
    """
    allowed = {method.upper() for method in methods} if methods else None

    def decorate(handler: Handler) -> Handler:
        @wraps(handler)
        def wrapper(event: Any, context: Any) -> JsonDict:
            cors_origin = request_origin(event.get("headers"))
            method = (event.get("httpMethod") or "").upper()

            if method == "OPTIONS":
                return ResponseBuilder.empty(cors_origin=cors_origin)

            request_id = getattr(context, "aws_request_id", None)

            if allowed is not None and method not in allowed:
                logger.warning(
                    "Method not allowed",
                    extra={"handler": handler.__name__, "http_method": method},
                )
                return ResponseBuilder.from_error(
                    MethodNotAllowedError(details={"allowed": sorted(allowed)}),
                    request_id=request_id,
                    cors_origin=cors_origin,
                )

            try:
                response = handler(event, context)

            except ImageServiceError as exc:
                _log_error(
                    "Request failed",
                    handler_name=handler.__name__,
                    request_id=request_id,
                    exc=exc,
                    level="warning" if exc.status < HTTPStatus.INTERNAL_SERVER_ERROR else "exception",
                )
                return ResponseBuilder.from_error(
                    exc,
                    request_id=request_id,
                    cors_origin=cors_origin,
                )

            except (ValueError, KeyError, TypeError, UnicodeDecodeError) as exc:
                _log_error(
                    "Validation error in handler",
                    handler_name=handler.__name__,
                    request_id=request_id,
                    exc=exc,
                )
                return ResponseBuilder.bad_request(
                    "The provided data is invalid. Please check your input and try again.",
                    request_id=request_id,
                    cors_origin=cors_origin,
                )

            except TimeoutError as exc:
                _log_error(
                    "Request timeout",
                    handler_name=handler.__name__,
                    request_id=request_id,
                    exc=exc,
                    level="exception",
                )
                return ResponseBuilder.error(
                    message="The request took too long to process. Please try again.",
                    status=HTTPStatus.GATEWAY_TIMEOUT,
                    request_id=request_id,
                    cors_origin=cors_origin,
                )

            except Exception as exc:
                _log_error(
                    "Unexpected error in handler",
                    handler_name=handler.__name__,
                    request_id=request_id,
                    exc=exc,
                    level="exception",
                )
                return ResponseBuilder.internal_error(
                    "Server error",
                    details={"error": str(exc)},
                    request_id=request_id,
                    cors_origin=cors_origin,
                )

            response.setdefault("headers", {}).update(cors_headers(cors_origin))
            return response

        return wrapper

    if func is not None:
        return decorate(func)

    return decorate
