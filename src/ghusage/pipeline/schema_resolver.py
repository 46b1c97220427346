"""Schema resolver — maps arbitrary export headers onto canonical fields.

Matching is a case-insensitive substring test against each header cell. For
every canonical field the token tiers are tried in order and, within a tier,
the leftmost matching header wins, so resolution is deterministic for a given
header row.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ghusage.models.schema_mapping import CanonicalField, FieldMatcher, ResolvedSchema
from ghusage.pipeline.row_parser import split_fields

_COST_CENTER_TOKENS = ["cost_center", "costcenter", "cost center"]

DEFAULT_MATCHERS: tuple[FieldMatcher, ...] = (
    FieldMatcher(field=CanonicalField.DATE, tiers=[["date"]]),
    FieldMatcher(field=CanonicalField.PRODUCT, tiers=[["product"], ["service"]]),
    FieldMatcher(field=CanonicalField.SKU, tiers=[["sku"]]),
    FieldMatcher(field=CanonicalField.QUANTITY, tiers=[["quantity", "units"]]),
    FieldMatcher(
        field=CanonicalField.COST,
        tiers=[["net_amount"], ["cost", "amount"]],
        exclude=_COST_CENTER_TOKENS,
    ),
    FieldMatcher(field=CanonicalField.ORGANIZATION, tiers=[["organization"]]),
    FieldMatcher(field=CanonicalField.REPOSITORY, tiers=[["repository"]]),
    FieldMatcher(field=CanonicalField.COST_CENTER, tiers=[_COST_CENTER_TOKENS]),
)


def match_column(headers: Sequence[str], matcher: FieldMatcher) -> Optional[int]:
    lowered = [h.lower() for h in headers]
    for tier in matcher.tiers:
        for index, header in enumerate(lowered):
            if any(token in header for token in matcher.exclude):
                continue
            if any(token in header for token in tier):
                return index
    return None


def resolve_schema(
    headers: Sequence[str], matchers: Sequence[FieldMatcher] = DEFAULT_MATCHERS
) -> ResolvedSchema:
    cleaned = tuple(headers)
    columns = {m.field: match_column(cleaned, m) for m in matchers}
    return ResolvedSchema(headers=cleaned, columns=columns)


def resolve_header_line(line: str) -> ResolvedSchema:
    return resolve_schema(split_fields(line))
