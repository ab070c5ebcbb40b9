"""
Lambda handler for ``GET /health``.
"""

from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder

from .service import health_status

logger = Logger(UTC=True)
tracer = Tracer()


@api_gateway_handler(methods=("GET",))
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    body = health_status()
    logger.debug("Health check", extra={"status": body["status"]})
    return ResponseBuilder.json(body)
