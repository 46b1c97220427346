"""Aggregation result models consumed by chart rendering."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from ghusage.core.types import Breakdown, Dimension
from ghusage.models.base import CamelModel
from ghusage.models.filters import FilterState

OTHERS = "Others"
UNKNOWN = "Unknown"


class Totals(CamelModel):
    cost: float = 0.0
    quantity: float = 0.0

    def metric(self, breakdown: Breakdown) -> float:
        return self.cost if breakdown == "cost" else self.quantity


class DateAggregate(CamelModel):
    """Per-date totals. Distinct values are kept as counts only."""

    date: str
    cost: float = 0.0
    quantity: float = 0.0
    repository_count: int = 0
    organization_count: int = 0
    sku_count: int = 0


class SeriesEntry(CamelModel):
    name: str
    cost: float = 0.0
    quantity: float = 0.0
    residual: bool = False  # True only for the folded "Others" entry


class TopNResult(CamelModel):
    """Top-N keys by breakdown metric plus the folded remainder."""

    dimension: Dimension
    breakdown: Breakdown
    top_keys: list[str] = Field(default_factory=list)
    totals: dict[str, Totals] = Field(default_factory=dict)  # every key, first-seen order
    others: Optional[Totals] = None  # None when nothing was folded
    series: list[SeriesEntry] = Field(default_factory=list)

    @property
    def distinct_count(self) -> int:
        return len(self.totals)


class DailyGroupRow(CamelModel):
    """One stacked-chart row: per-key totals for a single date."""

    date: str
    total: float = 0.0
    total_quantity: float = 0.0
    groups: dict[str, Totals] = Field(default_factory=dict)
    others: Totals = Totals()


class GroupBreakdown(CamelModel):
    ranking: TopNResult
    daily: list[DailyGroupRow] = Field(default_factory=list)


class ServiceSummary(CamelModel):
    """Exact (never sampled) headline numbers for a bucket."""

    record_count: int = 0
    total_cost: float = 0.0
    total_quantity: float = 0.0
    repository_count: int = 0
    organization_count: int = 0
    sku_count: int = 0


class ServiceView(CamelModel):
    """Everything one service tab renders for a bucket under a filter state."""

    bucket: str
    filters: FilterState
    summary: ServiceSummary
    by_date: list[DateAggregate] = Field(default_factory=list)
    repositories: GroupBreakdown
    skus: TopNResult
    organizations: Optional[GroupBreakdown] = None
