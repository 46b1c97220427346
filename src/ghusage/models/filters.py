"""Filter selection models.

Selections are immutable; every change produces a new ``FilterState`` which
is passed explicitly into each aggregation call.
"""

from __future__ import annotations

from typing import Optional

from ghusage.core.types import Breakdown
from ghusage.models.base import CamelModel

ALL = "all"  # dropdown sentinel meaning "no constraint"


def is_unset(value: Optional[str]) -> bool:
    """``None``, ``""`` and the ``"all"`` sentinel all mean no constraint."""
    return not value or value == ALL


class DateRange(CamelModel):
    start: Optional[str] = None
    end: Optional[str] = None


class FilterState(CamelModel):
    date_range: DateRange = DateRange()
    organization: Optional[str] = None
    cost_center: Optional[str] = None
    repository: Optional[str] = None
    breakdown: Breakdown = "quantity"

    def cache_key(self) -> str:
        return self.model_dump_json()
