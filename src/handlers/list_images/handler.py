"""
Lambda handler responsible for listing the image catalog.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler, request_log_context
from core.utils.response import ResponseBuilder

from .service import ListService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(methods=("GET",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``GET /api/images``.

    Returns every record, newest first, as ``{success, count, data}``.
    """
    logger.info("Received image list request", extra=request_log_context(event, context))

    response = ListService().list_response()

    logger.info("Images listed", extra={"count": response.count})

    return ResponseBuilder.ok(
        response.model_dump(exclude={"success"}),
        request_id=getattr(context, "aws_request_id", None),
    )
