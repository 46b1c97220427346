"""CSV parse driver: header resolution, chunked row parsing, categorization."""

from __future__ import annotations

from typing import Optional

import structlog

from ghusage.core.exceptions import EmptyFileError
from ghusage.core.types import ProgressCallback
from ghusage.models.report import ParseResult
from ghusage.models.usage_record import UsageRecord
from ghusage.pipeline.categorizer import categorize_records
from ghusage.pipeline.row_parser import parse_rows
from ghusage.pipeline.schema_resolver import resolve_header_line

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 10_000


def parse_csv(
    content: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_progress: Optional[ProgressCallback] = None,
) -> ParseResult:
    """Parse a billing export into service buckets.

    ``on_progress(processed, total)`` is called after every ``chunk_size`` data
    lines and once more at the end. Raises ``EmptyFileError`` when there is no
    header or no data line; a file whose rows all get skipped still parses.
    """
    # Only "\n" separates rows; a trailing "\r" is removed when fields are cleaned.
    lines = content.strip().split("\n")
    if len(lines) < 2:
        raise EmptyFileError()

    schema = resolve_header_line(lines[0])
    if schema.missing_required:
        logger.warning(
            "csv_required_columns_missing",
            missing=[f.value for f in schema.missing_required],
            headers=list(schema.headers),
        )

    data_lines = lines[1:]
    total = len(data_lines)
    step = max(chunk_size, 1)
    records: list[UsageRecord] = []
    for start in range(0, total, step):
        chunk = data_lines[start:start + step]
        records.extend(parse_rows(chunk, schema, first_line_number=start + 2))
        if on_progress is not None:
            on_progress(min(start + step, total), total)

    buckets = categorize_records(records)
    result = ParseResult(
        buckets=buckets,
        headers=list(schema.headers),
        rows_total=total,
        rows_parsed=len(records),
        rows_categorized=buckets.total_records,
    )
    logger.info(
        "csv_parse_completed",
        rows_total=result.rows_total,
        rows_parsed=result.rows_parsed,
        rows_categorized=result.rows_categorized,
    )
    return result
