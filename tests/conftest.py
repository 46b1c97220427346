"""Shared fixtures."""

from __future__ import annotations

import pytest

from ghusage.models.usage_record import UsageRecord
from tests.fakes import make_record


@pytest.fixture
def records() -> tuple[UsageRecord, ...]:
    return (
        make_record(date="2024-01-01", organization="org-a", repository="org-a/web", cost_center="eng", cost=1.0, quantity=10),
        make_record(date="2024-01-02", organization="org-a", repository="org-a/api", cost_center="eng", cost=2.0, quantity=20),
        make_record(date="2024-01-02", organization="org-b", repository="org-b/app", cost_center="ops", cost=3.0, quantity=5),
        make_record(date="2024-01-03", organization="org-b", repository="org-b/lib", cost=4.0, quantity=1),
        make_record(date="2024-01-04", organization=None, repository=None, sku="actions_windows", cost=0.5, quantity=2),
    )
