"""Filter engine — conjunctive predicates over a bucket, plus option queries.

Filtering preserves the relative order of the input. Dates are compared as
strings, which is correct because the parser keeps them in ISO form.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from ghusage.models.filters import DateRange, FilterState, is_unset
from ghusage.models.usage_record import UsageRecord

Predicate = Callable[[UsageRecord], bool]


def _equals(attr: str, expected: str) -> Predicate:
    return lambda record: getattr(record, attr) == expected


def build_predicates(filters: FilterState) -> list[Predicate]:
    """Active predicates, date bounds first since they are usually most selective."""
    predicates: list[Predicate] = []
    start, end = filters.date_range.start, filters.date_range.end
    if start:
        predicates.append(lambda record: record.date >= start)
    if end:
        predicates.append(lambda record: record.date <= end)
    for attr in ("organization", "repository", "cost_center"):
        value = getattr(filters, attr)
        if not is_unset(value):
            predicates.append(_equals(attr, value))
    return predicates


def filter_records(
    records: Iterable[UsageRecord], filters: Optional[FilterState]
) -> tuple[UsageRecord, ...]:
    if filters is None:
        return tuple(records)
    predicates = build_predicates(filters)
    if not predicates:
        return tuple(records)
    return tuple(r for r in records if all(p(r) for p in predicates))


# ---------------------------------------------------------------------------
# Option queries
# ---------------------------------------------------------------------------

def unique_values(records: Iterable[UsageRecord], attr: str) -> list[str]:
    """Distinct non-empty values of a text field, sorted."""
    return sorted({v for v in (getattr(r, attr) for r in records) if v})


def organization_options(records: Iterable[UsageRecord]) -> list[str]:
    return unique_values(records, "organization")


def cost_center_options(records: Iterable[UsageRecord]) -> list[str]:
    return unique_values(records, "cost_center")


def repository_options(
    records: Iterable[UsageRecord], organization: Optional[str]
) -> list[str]:
    """Repositories seen under one organization; empty when none is selected."""
    if is_unset(organization):
        return []
    return unique_values((r for r in records if r.organization == organization), "repository")


def date_bounds(records: Sequence[UsageRecord]) -> DateRange:
    if not records:
        return DateRange()
    dates = [r.date for r in records]
    return DateRange(start=min(dates), end=max(dates))


# ---------------------------------------------------------------------------
# State transitions
# ---------------------------------------------------------------------------

def reset_filters(records: Sequence[UsageRecord], filters: Optional[FilterState] = None) -> FilterState:
    """Full date range, no attribute constraints. Breakdown is kept."""
    breakdown = filters.breakdown if filters is not None else "quantity"
    return FilterState(date_range=date_bounds(records), breakdown=breakdown)


def has_active_filters(records: Sequence[UsageRecord], filters: FilterState) -> bool:
    if any(not is_unset(v) for v in (filters.organization, filters.repository, filters.cost_center)):
        return True
    bounds = date_bounds(records)
    return (filters.date_range.start or None, filters.date_range.end or None) != (bounds.start, bounds.end)


def select_organization(
    filters: FilterState, organization: Optional[str], records: Iterable[UsageRecord]
) -> FilterState:
    """Change the organization; drop a repository that is no longer offered."""
    repository = filters.repository
    if not is_unset(repository) and repository not in repository_options(records, organization):
        repository = None
    return filters.model_copy(update={"organization": organization or None, "repository": repository})


def select_repository(
    filters: FilterState, repository: Optional[str], records: Iterable[UsageRecord]
) -> FilterState:
    """Set the repository if it is valid for the current organization, else clear it."""
    if not is_unset(repository) and repository not in repository_options(records, filters.organization):
        repository = None
    return filters.model_copy(update={"repository": repository or None})
