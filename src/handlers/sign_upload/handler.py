"""
Lambda handler issuing signatures for direct browser uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler, request_log_context
from core.utils.multipart import decode_event_body
from core.utils.response import ResponseBuilder
from core.utils.validators import load_json_body, validate_request

from .models import SignUploadRequest
from .service import SignService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(methods=("POST",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``POST /api/cloudinary-sign``.

    Body (optional): ``{"folder": "..."}``.
    """
    logger.info("Received upload signing request", extra=request_log_context(event, context))

    request = validate_request(SignUploadRequest, load_json_body(decode_event_body(event)))
    response = SignService().sign(request.folder)

    return ResponseBuilder.json(
        response.model_dump(by_alias=True),
        request_id=getattr(context, "aws_request_id", None),
    )
