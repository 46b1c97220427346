"""Tests for UsageRecord and CategorizedUsage models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ghusage.models.usage_record import CategorizedUsage, ServiceBucket, UsageRecord
from tests.fakes import make_record


def test_record_is_immutable():
    record = make_record()
    with pytest.raises(ValidationError):
        record.cost = 5.0


def test_structural_equality():
    assert make_record(cost=2.0) == make_record(cost=2.0)
    assert make_record(cost=2.0) != make_record(cost=3.0)


def test_month_truncates_date():
    assert make_record(date="2024-03-17").month == "2024-03"


def test_serializes_with_camel_case_aliases():
    payload = make_record(cost_center="eng").to_payload()
    assert payload["costCenter"] == "eng"
    assert "cost_center" not in payload


def test_accepts_alias_on_input():
    record = UsageRecord.model_validate({"date": "2024-01-01", "sku": "x", "costCenter": "eng"})
    assert record.cost_center == "eng"


class TestCategorizedUsage:
    def test_get_by_bucket_name(self):
        record = make_record()
        buckets = CategorizedUsage.from_lists({ServiceBucket.COPILOT: [record]})
        assert buckets.get("copilot") == (record,)
        assert buckets.get(ServiceBucket.PACKAGES) == ()

    def test_all_records_in_bucket_order(self):
        a, b = make_record(sku="a"), make_record(sku="b")
        buckets = CategorizedUsage.from_lists({ServiceBucket.CODESPACES: [a], ServiceBucket.ACTIONS_MINUTES: [b]})
        assert list(buckets.all_records()) == [b, a]

    def test_empty(self):
        assert CategorizedUsage().is_empty
        assert CategorizedUsage().counts() == {b.value: 0 for b in ServiceBucket}

    def test_payload_uses_bucket_names(self):
        payload = CategorizedUsage().to_payload()
        assert set(payload) == {"actionsMinutes", "actionsStorage", "packages", "copilot", "codespaces"}
