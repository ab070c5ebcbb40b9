"""
Lambda handler responsible for deleting an image resource.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(methods=("DELETE",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``DELETE /api/{id}``.

    This function:
    - Extracts the image identifier from API Gateway path parameters
    - Delegates deletion to the service layer
    - Lets the decorator translate domain errors (404, 500) into responses

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info("Received image delete request", extra=request_log_context(event, context))

    path_params = event.get("pathParameters") or {}
    request = validate_request(
        DeleteImageRequest,
        {"image_id": path_params.get("id") or path_params.get("image_id")},
        message="Invalid image id",
    )

    DeleteService().delete_image(request.image_id)

    response = DeleteImageResponse()
    return ResponseBuilder.ok(
        response.model_dump(exclude={"success"}),
        request_id=getattr(context, "aws_request_id", None),
    )
