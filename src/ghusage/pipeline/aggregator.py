"""Aggregator — date, group and SKU summaries for chart series.

All functions are pure: (records, parameters) -> result. Sums use plain float
addition; rounding is left to whatever renders the numbers.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from operator import attrgetter
from typing import Callable, Iterable, Optional, Sequence

from ghusage.core.types import Breakdown, Dimension
from ghusage.models.aggregates import (
    OTHERS,
    UNKNOWN,
    DailyGroupRow,
    DateAggregate,
    GroupBreakdown,
    SeriesEntry,
    ServiceSummary,
    TopNResult,
    Totals,
)
from ghusage.models.usage_record import UsageRecord

DEFAULT_MAX_DATA_POINTS = 1000
DEFAULT_TOP_GROUPS = 10
DEFAULT_TOP_SKUS = 6


def group_key(dimension: Dimension) -> Callable[[UsageRecord], str]:
    """Grouping key for a dimension; records without a value group as "Unknown"."""
    getter = attrgetter(dimension)
    return lambda record: getter(record) or UNKNOWN


def sample_records(records: Sequence[UsageRecord], max_points: int) -> Sequence[UsageRecord]:
    """Every ``ceil(n / max_points)``-th record once ``n`` exceeds ``max_points``."""
    if max_points <= 0 or len(records) <= max_points:
        return records
    step = math.ceil(len(records) / max_points)
    return records[::step]


class _DateBucket:
    __slots__ = ("cost", "quantity", "repositories", "organizations", "skus")

    def __init__(self) -> None:
        self.cost = 0.0
        self.quantity = 0.0
        self.repositories: set[str] = set()
        self.organizations: set[str] = set()
        self.skus: set[str] = set()


def aggregate_by_date(
    records: Iterable[UsageRecord],
    *,
    max_points: int = DEFAULT_MAX_DATA_POINTS,
    exact: bool = False,
) -> dict[str, DateAggregate]:
    """Per-date totals in date order.

    Large inputs are sampled down to roughly ``max_points`` records first, which
    approximates the series. Pass ``exact=True`` wherever totals must be right.
    """
    ordered: Sequence[UsageRecord] = sorted(records, key=attrgetter("date"))
    if not exact:
        ordered = sample_records(ordered, max_points)

    buckets: dict[str, _DateBucket] = {}
    for record in ordered:
        bucket = buckets.get(record.date)
        if bucket is None:
            bucket = buckets[record.date] = _DateBucket()
        bucket.cost += record.cost
        bucket.quantity += record.quantity
        if record.repository:
            bucket.repositories.add(record.repository)
        if record.organization:
            bucket.organizations.add(record.organization)
        bucket.skus.add(record.sku)

    return {
        date: DateAggregate(
            date=date,
            cost=b.cost,
            quantity=b.quantity,
            repository_count=len(b.repositories),
            organization_count=len(b.organizations),
            sku_count=len(b.skus),
        )
        for date, b in buckets.items()
    }


def group_totals(records: Iterable[UsageRecord], dimension: Dimension) -> dict[str, Totals]:
    """Per-key cost and quantity over the full input, keys in first-seen order."""
    key_of = group_key(dimension)
    sums: dict[str, list[float]] = {}
    for record in records:
        acc = sums.setdefault(key_of(record), [0.0, 0.0])
        acc[0] += record.cost
        acc[1] += record.quantity
    return {key: Totals(cost=c, quantity=q) for key, (c, q) in sums.items()}


def rank_top_n(
    totals: dict[str, Totals], dimension: Dimension, *, top_n: int, breakdown: Breakdown
) -> TopNResult:
    """Keep the ``top_n`` keys by metric and fold the rest into "Others".

    Ties keep first-seen order. A key literally named "Others" stays a named
    entry; the folded remainder is reported separately in ``others``.
    """
    ranked = sorted(totals.items(), key=lambda kv: kv[1].metric(breakdown), reverse=True)
    top, rest = ranked[: max(top_n, 0)], ranked[max(top_n, 0):]

    others: Optional[Totals] = None
    if rest:
        others = Totals(
            cost=sum(t.cost for _, t in rest),
            quantity=sum(t.quantity for _, t in rest),
        )

    series = [SeriesEntry(name=k, cost=t.cost, quantity=t.quantity) for k, t in top]
    if others is not None:
        series.append(SeriesEntry(name=OTHERS, cost=others.cost, quantity=others.quantity, residual=True))

    return TopNResult(
        dimension=dimension,
        breakdown=breakdown,
        top_keys=[k for k, _ in top],
        totals=totals,
        others=others,
        series=series,
    )


def top_n_by(
    records: Iterable[UsageRecord], dimension: Dimension, *, top_n: int, breakdown: Breakdown
) -> TopNResult:
    return rank_top_n(group_totals(records, dimension), dimension, top_n=top_n, breakdown=breakdown)


def date_sort_key(value: str) -> tuple[int, datetime, str]:
    """Order by the actual date; unparseable values sort last, by text."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return (1, datetime.min, value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return (0, parsed, value)


def daily_by_group(
    records: Iterable[UsageRecord],
    dimension: Dimension,
    top_keys: Sequence[str],
    *,
    recent_days: Optional[int] = None,
) -> list[DailyGroupRow]:
    """Stacked-series matrix: one row per date, one cell per top key plus Others.

    Every top key is present (zero-filled) on every row.
    """
    key_of = group_key(dimension)
    named = set(top_keys)
    rows: dict[str, dict] = {}
    for record in records:
        row = rows.get(record.date)
        if row is None:
            row = rows[record.date] = {
                "total": 0.0,
                "total_quantity": 0.0,
                "groups": {k: [0.0, 0.0] for k in top_keys},
                "others": [0.0, 0.0],
            }
        key = key_of(record)
        cell = row["groups"][key] if key in named else row["others"]
        cell[0] += record.cost
        cell[1] += record.quantity
        row["total"] += record.cost
        row["total_quantity"] += record.quantity

    ordered = sorted(rows.items(), key=lambda kv: date_sort_key(kv[0]))
    if recent_days:
        ordered = ordered[-recent_days:]

    return [
        DailyGroupRow(
            date=date,
            total=row["total"],
            total_quantity=row["total_quantity"],
            groups={k: Totals(cost=c, quantity=q) for k, (c, q) in row["groups"].items()},
            others=Totals(cost=row["others"][0], quantity=row["others"][1]),
        )
        for date, row in ordered
    ]


def breakdown_by(
    records: Sequence[UsageRecord],
    dimension: Dimension,
    *,
    top_n: int = DEFAULT_TOP_GROUPS,
    breakdown: Breakdown = "quantity",
    recent_days: Optional[int] = None,
) -> GroupBreakdown:
    ranking = top_n_by(records, dimension, top_n=top_n, breakdown=breakdown)
    daily = daily_by_group(records, dimension, ranking.top_keys, recent_days=recent_days)
    return GroupBreakdown(ranking=ranking, daily=daily)


def aggregate_by_repository(
    records: Sequence[UsageRecord],
    *,
    top_n: int = DEFAULT_TOP_GROUPS,
    breakdown: Breakdown = "quantity",
    recent_days: Optional[int] = None,
) -> GroupBreakdown:
    return breakdown_by(records, "repository", top_n=top_n, breakdown=breakdown, recent_days=recent_days)


def aggregate_by_organization(
    records: Sequence[UsageRecord],
    *,
    top_n: int = DEFAULT_TOP_GROUPS,
    breakdown: Breakdown = "quantity",
    recent_days: Optional[int] = None,
) -> GroupBreakdown:
    return breakdown_by(records, "organization", top_n=top_n, breakdown=breakdown, recent_days=recent_days)


def aggregate_by_sku(
    records: Iterable[UsageRecord],
    *,
    top_n: int = DEFAULT_TOP_SKUS,
    breakdown: Breakdown = "quantity",
) -> TopNResult:
    return top_n_by(records, "sku", top_n=top_n, breakdown=breakdown)


def summarize(records: Sequence[UsageRecord]) -> ServiceSummary:
    """Exact headline totals. Never computed from a sampled view."""
    return ServiceSummary(
        record_count=len(records),
        total_cost=sum(r.cost for r in records),
        total_quantity=sum(r.quantity for r in records),
        repository_count=len({r.repository for r in records if r.repository}),
        organization_count=len({r.organization for r in records if r.organization}),
        sku_count=len({r.sku for r in records}),
    )
