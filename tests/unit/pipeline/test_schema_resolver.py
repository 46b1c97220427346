"""Tests for header-to-canonical-field resolution."""

from __future__ import annotations

from ghusage.models.schema_mapping import CanonicalField as F
from ghusage.pipeline.schema_resolver import resolve_header_line, resolve_schema


class TestResolveSchema:
    def test_flexible_headers(self):
        schema = resolve_schema(["usage_date", "service", "SKU", "units", "applied_cost_per_quantity"])
        assert schema.index(F.DATE) == 0
        assert schema.index(F.PRODUCT) == 1
        assert schema.index(F.SKU) == 2
        assert schema.index(F.QUANTITY) == 3
        assert schema.index(F.COST) == 4
        assert schema.missing_required == []

    def test_github_export_headers(self):
        headers = [
            "date", "product", "sku", "quantity", "unit_type", "price_per_unit",
            "gross_amount", "discount_amount", "net_amount", "username",
            "organization", "repository", "workflow_path", "cost_center_name",
        ]
        schema = resolve_schema(headers)
        assert schema.index(F.QUANTITY) == 3
        assert schema.index(F.COST) == 8
        assert schema.index(F.ORGANIZATION) == 10
        assert schema.index(F.REPOSITORY) == 11
        assert schema.index(F.COST_CENTER) == 13
        assert schema.column_count == 14

    def test_case_insensitive(self):
        schema = resolve_schema(["DATE", "Product", "Sku", "Net_Amount"])
        assert schema.index(F.DATE) == 0
        assert schema.index(F.COST) == 3

    def test_first_match_wins(self):
        schema = resolve_schema(["start_date", "end_date", "product", "sku"])
        assert schema.index(F.DATE) == 0

    def test_cost_never_resolves_to_cost_center(self):
        schema = resolve_schema(["date", "product", "sku", "CostCenter", "billed_cost"])
        assert schema.index(F.COST_CENTER) == 3
        assert schema.index(F.COST) == 4

    def test_net_amount_preferred_over_other_amounts(self):
        schema = resolve_schema(["date", "product", "sku", "gross_amount", "net_amount"])
        assert schema.index(F.COST) == 4

    def test_absent_fields_are_none(self):
        schema = resolve_schema(["when", "what"])
        assert schema.index(F.DATE) is None
        assert schema.index(F.ORGANIZATION) is None
        assert schema.missing_required == [F.DATE, F.PRODUCT, F.SKU]


def test_header_line_strips_quotes_and_whitespace():
    schema = resolve_header_line('"Date", "Product" ,"SKU"')
    assert schema.headers == ("Date", "Product", "SKU")
    assert schema.index(F.SKU) == 2
