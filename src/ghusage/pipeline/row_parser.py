"""Row parser — turns one export line into a ``UsageRecord`` or skips it.

Real-world exports vary in completeness, so the parser recovers as many rows
as it can: a short row, a row missing date/product/SKU, or a row that fails
validation is skipped on its own without affecting the rest of the file.
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, Optional

import structlog

from ghusage.models.schema_mapping import CanonicalField, ResolvedSchema
from ghusage.models.usage_record import UsageRecord

logger = structlog.get_logger()


def clean_field(value: str) -> str:
    """Strip surrounding whitespace and double quotes. Quotes are not unescaped."""
    return value.strip().strip('"').strip()


def split_fields(line: str) -> list[str]:
    # Embedded commas inside quoted fields are not special-cased.
    return [clean_field(v) for v in line.split(",")]


def coerce_number(value: Optional[str]) -> float:
    """Parse a numeric cell; anything missing or non-numeric counts as 0."""
    if not value:
        return 0.0
    try:
        number = float(value)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _cell(values: list[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(values):
        return None
    return values[index] or None


def parse_row(line: str, schema: ResolvedSchema) -> Optional[UsageRecord]:
    """Parse one data line. Returns ``None`` when the row must be skipped."""
    values = split_fields(line)
    if len(values) < schema.column_count:
        return None

    date = _cell(values, schema.index(CanonicalField.DATE))
    product = _cell(values, schema.index(CanonicalField.PRODUCT))
    sku = _cell(values, schema.index(CanonicalField.SKU))
    if not date or not product or not sku:
        return None

    return UsageRecord(
        date=date,
        product=product,
        sku=sku,
        quantity=coerce_number(_cell(values, schema.index(CanonicalField.QUANTITY))),
        cost=coerce_number(_cell(values, schema.index(CanonicalField.COST))),
        organization=_cell(values, schema.index(CanonicalField.ORGANIZATION)),
        repository=_cell(values, schema.index(CanonicalField.REPOSITORY)),
        cost_center=_cell(values, schema.index(CanonicalField.COST_CENTER)),
    )


def parse_rows(
    lines: Iterable[str], schema: ResolvedSchema, *, first_line_number: int = 2
) -> Iterator[UsageRecord]:
    """Yield every parseable record, isolating failures to their own row."""
    for offset, line in enumerate(lines):
        try:
            record = parse_row(line, schema)
        except ValueError as exc:  # pydantic ValidationError included
            logger.debug("csv_row_invalid", line_number=first_line_number + offset, error=str(exc))
            continue
        if record is not None:
            yield record
