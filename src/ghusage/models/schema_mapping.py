"""Header-to-canonical-field mapping models for the schema resolver."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class CanonicalField(StrEnum):
    DATE = "date"
    PRODUCT = "product"
    SKU = "sku"
    QUANTITY = "quantity"
    COST = "cost"
    ORGANIZATION = "organization"
    REPOSITORY = "repository"
    COST_CENTER = "cost_center"


REQUIRED_FIELDS: tuple[CanonicalField, ...] = (
    CanonicalField.DATE,
    CanonicalField.PRODUCT,
    CanonicalField.SKU,
)


class FieldMatcher(BaseModel):
    """Substring tokens recognizing one canonical field in a header cell.

    Tiers are tried in order; within a tier the leftmost matching header wins.
    Headers containing an excluded token never match.
    """

    field: CanonicalField
    tiers: list[list[str]]
    exclude: list[str] = Field(default_factory=list)


class ResolvedSchema(BaseModel):
    """Column positions for each canonical field of one export."""

    model_config = {"frozen": True}

    headers: tuple[str, ...]
    columns: dict[CanonicalField, Optional[int]]

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def index(self, field: CanonicalField) -> Optional[int]:
        return self.columns.get(field)

    @property
    def missing_required(self) -> list[CanonicalField]:
        return [f for f in REQUIRED_FIELDS if self.columns.get(f) is None]
