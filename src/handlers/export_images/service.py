"""Business logic for exporting the catalog as an XLSX workbook."""

from io import BytesIO

from aws_lambda_powertools import Logger
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from core.infrastructure.providers.mongodb_metadata import MongoDBMetadata
from core.models.errors import ImageServiceError
from core.models.image import ImageRecord
from core.repositories.metadata_repository import ImageMetadataRepository
from core.utils.constants import (
    ERROR_CODE_EXPORT_FAILED,
    EXPORT_EMPTY_CELL_WIDTH,
    EXPORT_FILENAME_TEMPLATE,
    EXPORT_HEADER_FILL,
    EXPORT_HEADERS,
    EXPORT_SHEET_TITLE,
    bytes_to_megabytes,
)
from core.utils.time import format_calendar_date, utc_today

logger = Logger(UTC=True)


def record_row(record: ImageRecord) -> list[str]:
    """One spreadsheet row for ``record``, in header order."""
    return [
        record.original_filename,
        record.remote_url,
        format_calendar_date(record.upload_timestamp),
        bytes_to_megabytes(record.file_size_bytes),
        record.content_type,
    ]


def _fit_columns(sheet: Worksheet) -> None:
    for index, column in enumerate(sheet.iter_cols(values_only=True), start=1):
        width = max(
            len(str(value)) if value not in (None, "") else EXPORT_EMPTY_CELL_WIDTH
            for value in column
        )
        sheet.column_dimensions[get_column_letter(index)].width = width


def build_workbook(records: list[ImageRecord]) -> bytes:
    """Render records as XLSX bytes: a styled header row then one row per record."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = EXPORT_SHEET_TITLE

    sheet.append(list(EXPORT_HEADERS))
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.fill = PatternFill(fill_type="solid", fgColor=EXPORT_HEADER_FILL)

    for record in records:
        sheet.append(record_row(record))

    _fit_columns(sheet)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_filename() -> str:
    return EXPORT_FILENAME_TEMPLATE.format(date=utc_today())


class ExportService:
    """Produces the catalog spreadsheet, newest upload first."""

    def __init__(self, metadata: ImageMetadataRepository | None = None) -> None:
        self.metadata = metadata or MongoDBMetadata()

    def export(self) -> tuple[str, bytes]:
        """Return ``(filename, xlsx_bytes)`` for the full catalog.

        Raises:
            MetadataOperationFailedError: If the catalog cannot be read
            ImageServiceError: If the workbook cannot be rendered
        """
        records = self.metadata.list_records()

        try:
            content = build_workbook(records)
        except Exception as exc:
            logger.exception("Failed to render export workbook", extra={"count": len(records)})
            raise ImageServiceError(
                message=f"Unable to build export: {exc}",
                error_code=ERROR_CODE_EXPORT_FAILED,
            ) from exc

        filename = export_filename()
        logger.info("Catalog exported", extra={"count": len(records), "file_name": filename})
        return filename, content
