"""
Lambda handler registering an image that the browser uploaded directly.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler, request_log_context
from core.utils.multipart import decode_event_body
from core.utils.response import ResponseBuilder
from core.utils.validators import load_json_body, validate_request

from .models import SaveImageRequest
from .service import SaveImageService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(methods=("POST",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``POST /api/save-image``.

    Expected body:
    {
        "originalFilename": "photo.png",
        "cloudinaryUrl": "https://...",
        "cloudinaryPublicId": "image-to-link-direct/abc",
        "fileSize": 1024,            # optional, defaults to 0
        "fileType": "image/png"      # optional, defaults to image/jpeg
    }
    """
    logger.info("Received save image request", extra=request_log_context(event, context))

    request = validate_request(
        SaveImageRequest,
        load_json_body(decode_event_body(event)),
        message="Missing required image data",
    )
    response = SaveImageService().save(request)

    return ResponseBuilder.json(
        response.model_dump(),
        request_id=getattr(context, "aws_request_id", None),
    )
