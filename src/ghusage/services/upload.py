"""Upload boundary — file in, structured ``UploadResult`` out.

File-level problems (wrong extension, unreadable or empty content, no
billing rows) come back as ``success=False`` with a user-facing message;
nothing raised inside the pipeline escapes ``UploadService.process``.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Optional

import structlog

from ghusage.core.config import AppSettings
from ghusage.core.exceptions import (
    FileRejectedError,
    UnreadableFileError,
    UnsupportedFileTypeError,
)
from ghusage.core.types import ProgressCallback
from ghusage.models.report import BillingReport, ParseResult, UploadResult
from ghusage.pipeline.csv_parser import parse_csv
from ghusage.pipeline.report_assembler import assemble_report

logger = structlog.get_logger()

GENERIC_FAILURE = "Failed to process CSV file."


class UploadService:
    """Validates, decodes and parses one uploaded export."""

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        self._settings = settings or AppSettings()

    def check_extension(self, filename: str) -> None:
        suffix = PurePath(filename).suffix.lower()
        allowed = {ext.lower() for ext in self._settings.parser.allowed_extensions}
        if suffix not in allowed:
            raise UnsupportedFileTypeError(filename)

    def decode(self, data: bytes) -> str:
        try:
            return data.decode(self._settings.parser.encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise UnreadableFileError(str(exc)) from exc

    def build_report(
        self,
        filename: str,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> tuple[BillingReport, ParseResult]:
        """Strict variant of ``process``: raises ``FileRejectedError`` subclasses."""
        self.check_extension(filename)
        text = self.decode(data)
        parsed = parse_csv(text, chunk_size=self._settings.parser.chunk_size, on_progress=on_progress)
        return assemble_report(parsed.buckets), parsed

    def process(
        self,
        filename: str,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadResult:
        log = logger.bind(filename=filename, size=len(data))
        try:
            report, parsed = self.build_report(filename, data, on_progress)
        except FileRejectedError as exc:
            log.info("upload_rejected", reason=type(exc).__name__, error=str(exc))
            return UploadResult(success=False, error=str(exc))
        except Exception:
            log.exception("upload_failed")
            return UploadResult(success=False, error=GENERIC_FAILURE)

        message = (
            f"Successfully processed {parsed.rows_categorized:,} of "
            f"{parsed.rows_total:,} rows"
        )
        log.info("upload_processed", rows=parsed.rows_categorized, rows_total=parsed.rows_total)
        return UploadResult(
            success=True,
            report=report,
            message=message,
            rows_processed=parsed.rows_categorized,
            rows_total=parsed.rows_total,
        )


def process_file(filename: str, data: bytes, settings: Optional[AppSettings] = None) -> UploadResult:
    return UploadService(settings).process(filename, data)
