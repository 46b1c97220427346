"""Usage Record — the normalized structure every pipeline stage operates on.

Each export row, whatever its header naming, is parsed into this schema and
then sorted into exactly one service bucket (or dropped).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Iterator, Optional

from ghusage.models.base import CamelModel


class ServiceBucket(StrEnum):
    ACTIONS_MINUTES = "actionsMinutes"
    ACTIONS_STORAGE = "actionsStorage"
    PACKAGES = "packages"
    COPILOT = "copilot"
    CODESPACES = "codespaces"


class UsageRecord(CamelModel):
    """Single billed usage line."""

    date: str  # ISO form, lexicographically sortable
    cost: float = 0.0
    quantity: float = 0.0
    sku: str
    product: Optional[str] = None

    # --- Attribution (absent when the export has no such column) ---
    organization: Optional[str] = None
    repository: Optional[str] = None
    cost_center: Optional[str] = None

    @property
    def month(self) -> str:
        """Year-month truncation of the date ("YYYY-MM")."""
        return self.date[:7]


_FIELDS: dict[ServiceBucket, str] = {
    ServiceBucket.ACTIONS_MINUTES: "actions_minutes",
    ServiceBucket.ACTIONS_STORAGE: "actions_storage",
    ServiceBucket.PACKAGES: "packages",
    ServiceBucket.COPILOT: "copilot",
    ServiceBucket.CODESPACES: "codespaces",
}


class CategorizedUsage(CamelModel):
    """The five service buckets. Records keep their input order."""

    actions_minutes: tuple[UsageRecord, ...] = ()
    actions_storage: tuple[UsageRecord, ...] = ()
    packages: tuple[UsageRecord, ...] = ()
    copilot: tuple[UsageRecord, ...] = ()
    codespaces: tuple[UsageRecord, ...] = ()

    @classmethod
    def from_lists(cls, buckets: dict[ServiceBucket, list[UsageRecord]]) -> CategorizedUsage:
        return cls(**{_FIELDS[b]: tuple(records) for b, records in buckets.items()})

    def get(self, bucket: ServiceBucket | str) -> tuple[UsageRecord, ...]:
        return getattr(self, _FIELDS[ServiceBucket(bucket)])

    def items(self) -> Iterator[tuple[ServiceBucket, tuple[UsageRecord, ...]]]:
        for bucket in ServiceBucket:
            yield bucket, self.get(bucket)

    def all_records(self) -> Iterator[UsageRecord]:
        """Every record, bucket by bucket in declaration order."""
        for _, records in self.items():
            yield from records

    def counts(self) -> dict[str, int]:
        return {bucket.value: len(records) for bucket, records in self.items()}

    @property
    def total_records(self) -> int:
        return sum(len(records) for _, records in self.items())

    @property
    def is_empty(self) -> bool:
        return self.total_records == 0
