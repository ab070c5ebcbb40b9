"""
Lambda handler streaming the catalog as an XLSX attachment.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.constants import XLSX_CONTENT_TYPE
from core.utils.decorators import api_gateway_handler, request_log_context
from core.utils.response import ResponseBuilder

from .service import ExportService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(methods=("GET",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``GET /api/export/excel``.

    The workbook is returned base64-encoded with ``isBase64Encoded`` set so
    API Gateway delivers the raw bytes.
    """
    logger.info("Received export request", extra=request_log_context(event, context))

    filename, content = ExportService().export()

    return ResponseBuilder.binary_response(
        content,
        content_type=XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
