"""
Persistent HTTP listener exposing the same operations as the Lambda handlers.

Routes call the shared service layer; blocking work runs in Starlette's
threadpool. Errors are rendered with the same body shape and CORS headers
as the Lambda responses.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.infrastructure.adapters import mongodb_adapter
from core.models.errors import ImageServiceError, MethodNotAllowedError
from core.models.upload import UploadedFile
from core.utils.constants import (
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_METHOD_NOT_ALLOWED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    FOLDER_FIELD,
    RESERVED_API_SEGMENTS,
    SERVICE_MESSAGE,
    SERVICE_VERSION,
    XLSX_CONTENT_TYPE,
)
from core.utils.response import cors_headers, error_payload
from core.utils.validators import load_json_body, validate_request
from handlers.delete_image.service import DeleteService
from handlers.export_images.service import ExportService
from handlers.health.service import health_status
from handlers.list_images.service import ListService
from handlers.save_image.models import SaveImageRequest
from handlers.save_image.service import SaveImageService
from handlers.sign_upload.models import SignUploadRequest
from handlers.sign_upload.service import SignService
from handlers.upload_image.models import BatchUploadResponse
from handlers.upload_image.service import FilesByField, UploadService

logger = Logger(service="image-catalog-listener", UTC=True)

_HTTP_ERROR_CODES = {
    HTTPStatus.METHOD_NOT_ALLOWED: (ERROR_CODE_METHOD_NOT_ALLOWED, "Method not allowed"),
    HTTPStatus.NOT_FOUND: (ERROR_CODE_RESOURCE_NOT_FOUND, "Route not found"),
}


async def _read_upload_form(request: Request) -> tuple[FilesByField, str | None]:
    """Stage every uploaded part to a temporary file, keyed by field name."""
    files: FilesByField = {}
    folder: str | None = None

    form = await request.form()
    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                staged = await run_in_threadpool(
                    UploadedFile.stage,
                    filename=value.filename,
                    content_type=value.content_type,
                    stream=value.file,
                    field_name=name,
                )
                files.setdefault(name, []).append(staged)
            elif name == FOLDER_FIELD and value:
                folder = value
    except Exception:
        for group in files.values():
            for item in group:
                item.cleanup()
        raise
    finally:
        await form.close()

    return files, folder


def _ok(body: dict[str, Any], status: int = HTTPStatus.OK) -> JSONResponse:
    return JSONResponse(content={"success": True, **body}, status_code=status)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    mongodb_adapter.shared_connection.close()


def create_app() -> FastAPI:
    """Build the listener application."""
    app = FastAPI(
        title=SERVICE_MESSAGE,
        version=SERVICE_VERSION,
        lifespan=_lifespan,
    )

    # ==================== CORS ====================

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next: Any) -> Response:
        origin = request.headers.get("origin")

        if request.method == "OPTIONS":
            return Response(status_code=HTTPStatus.OK, headers=cors_headers(origin))

        response = await call_next(request)
        response.headers.update(cors_headers(origin))
        return response

    # ==================== Exception Handlers ====================

    @app.exception_handler(ImageServiceError)
    async def service_error_handler(request: Request, exc: ImageServiceError) -> JSONResponse:
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.exception(
                "Request failed",
                extra={"path": request.url.path, "error_code": exc.error_code},
            )
        else:
            logger.warning(
                "Request rejected",
                extra={"path": request.url.path, "error_code": exc.error_code, "error": exc.message},
            )

        return JSONResponse(
            status_code=exc.status,
            content=error_payload(
                status=exc.status,
                message=exc.message,
                error=exc.error_code,
                details=exc.details or None,
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        status = HTTPStatus(exc.status_code)
        error, message = _HTTP_ERROR_CODES.get(status, (status.name, str(exc.detail)))

        return JSONResponse(
            status_code=status,
            content=error_payload(status=status, message=message, error=error),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error in listener", extra={"path": request.url.path})

        # Runs outside the CORS middleware, so headers are added here.
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content=error_payload(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                message="Server error",
                error=ERROR_CODE_INTERNAL_ERROR,
                details={"error": str(exc)},
            ),
            headers=cors_headers(request.headers.get("origin")),
        )

    # ==================== Routes ====================

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return f"{SERVICE_MESSAGE} is running"

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse(content=health_status())

    async def _upload(request: Request, *, batch_only: bool) -> JSONResponse:
        service = UploadService()
        files, folder = await _read_upload_form(request)

        result = await run_in_threadpool(service.upload, files, folder=folder, batch_only=batch_only)

        if isinstance(result, BatchUploadResponse):
            return JSONResponse(content=result.to_body(), status_code=result.status)

        return JSONResponse(content=result.model_dump())

    @app.post("/api/upload")
    async def upload(request: Request) -> JSONResponse:
        logger.info("Received image upload request", extra={"path": request.url.path})
        return await _upload(request, batch_only=False)

    @app.post("/api/upload/multiple")
    async def upload_multiple(request: Request) -> JSONResponse:
        logger.info("Received batch image upload request", extra={"path": request.url.path})
        return await _upload(request, batch_only=True)

    @app.get("/api/images")
    def list_images() -> JSONResponse:
        response = ListService().list_response()
        return JSONResponse(content=response.model_dump())

    @app.get("/api/export/excel")
    def export_excel() -> Response:
        filename, content = ExportService().export()
        return Response(
            content=content,
            media_type=XLSX_CONTENT_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/api/cloudinary-sign")
    async def cloudinary_sign(request: Request) -> JSONResponse:
        payload = validate_request(SignUploadRequest, load_json_body(await request.body()))
        response = SignService().sign(payload.folder)
        return JSONResponse(content=response.model_dump(by_alias=True))

    @app.post("/api/save-image")
    async def save_image(request: Request) -> JSONResponse:
        payload = validate_request(
            SaveImageRequest,
            load_json_body(await request.body()),
            message="Missing required image data",
        )
        response = await run_in_threadpool(SaveImageService().save, payload)
        return JSONResponse(content=response.model_dump())

    @app.delete("/api/{image_id}")
    def delete_image(image_id: str) -> JSONResponse:
        if image_id in RESERVED_API_SEGMENTS:
            raise MethodNotAllowedError(details={"path": f"/api/{image_id}"})

        DeleteService().delete_image(image_id)
        return _ok({"data": {}})

    return app
