"""
Lambda handlers responsible for image upload and record creation.

``handler`` serves ``POST /api/upload`` (single or batch), ``multiple_handler``
serves ``POST /api/upload/multiple`` (batch only).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler, request_log_context
from core.utils.multipart import decode_event_body, header_value, parse_multipart
from core.utils.response import ResponseBuilder

from .models import BatchUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


def _process(event: dict[str, Any], context: LambdaContext, *, batch_only: bool) -> dict[str, Any]:
    body = decode_event_body(event)
    form = parse_multipart(body, header_value(event.get("headers"), "content-type"))

    result = UploadService().upload(form.files, folder=form.get_field("folder"), batch_only=batch_only)
    request_id = getattr(context, "aws_request_id", None)

    if isinstance(result, BatchUploadResponse):
        return ResponseBuilder.json(result.to_body(), status=result.status, request_id=request_id)

    return ResponseBuilder.ok(result.model_dump(exclude={"success"}), request_id=request_id)


@api_gateway_handler(methods=("POST",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expected API Gateway event structure:
    {
        "headers": {"content-type": "multipart/form-data; boundary=..."},
        "body": "<base64 multipart body>",
        "isBase64Encoded": true
    }

    A single ``image`` part returns ``{success, data}``; ``images`` parts
    return the batch body ``{success, count, data[, failed]}``.

    Args:
        event: API Gateway Lambda proxy event containing the multipart body
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info("Received image upload request", extra=request_log_context(event, context))
    return _process(event, context, batch_only=False)


@api_gateway_handler(methods=("POST",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def multiple_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle batch uploads sent as ``images`` parts."""
    logger.info("Received batch image upload request", extra=request_log_context(event, context))
    return _process(event, context, batch_only=True)
