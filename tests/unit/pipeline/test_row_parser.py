"""Tests for row parsing and numeric coercion."""

from __future__ import annotations

import pytest

from ghusage.pipeline.row_parser import coerce_number, parse_row, parse_rows, split_fields
from ghusage.pipeline.schema_resolver import resolve_header_line

HEADER = "Date,Product,SKU,Quantity,Net_Amount,Organization,Repository,Cost_Center"


@pytest.fixture
def schema():
    return resolve_header_line(HEADER)


class TestCoerceNumber:
    @pytest.mark.parametrize("raw,expected", [
        ("12.5", 12.5),
        ("0", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("n/a", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        (" 3 ", 3.0),
    ])
    def test_values(self, raw, expected):
        assert coerce_number(raw) == expected


def test_split_fields_strips_quotes():
    assert split_fields(' "a" ,b, "c d" ') == ["a", "b", "c d"]


class TestParseRow:
    def test_full_row(self, schema):
        record = parse_row("2024-01-05,Actions,Linux,120,4.80,acme,acme/web,eng", schema)
        assert record is not None
        assert record.date == "2024-01-05"
        assert record.product == "Actions"
        assert record.sku == "Linux"
        assert record.quantity == 120
        assert record.cost == pytest.approx(4.80)
        assert record.organization == "acme"
        assert record.repository == "acme/web"
        assert record.cost_center == "eng"

    def test_short_row_is_skipped(self, schema):
        assert parse_row("2024-01-05,Actions,Linux,120", schema) is None

    @pytest.mark.parametrize("line", [
        ",Actions,Linux,1,1,acme,acme/web,eng",
        "2024-01-05,,Linux,1,1,acme,acme/web,eng",
        "2024-01-05,Actions,,1,1,acme,acme/web,eng",
    ])
    def test_missing_essential_field_is_skipped(self, schema, line):
        assert parse_row(line, schema) is None

    def test_bad_numbers_default_to_zero(self, schema):
        record = parse_row("2024-01-05,Actions,Linux,lots,free,acme,acme/web,eng", schema)
        assert record.quantity == 0
        assert record.cost == 0

    def test_empty_optional_cells_become_none(self, schema):
        record = parse_row("2024-01-05,Actions,Linux,1,1,,,", schema)
        assert record.organization is None
        assert record.repository is None
        assert record.cost_center is None

    def test_absent_optional_columns(self):
        schema = resolve_header_line("date,product,sku")
        record = parse_row("2024-01-05,copilot,copilot_business", schema)
        assert record.cost == 0
        assert record.quantity == 0
        assert record.organization is None

    def test_missing_required_column_rejects_every_row(self):
        schema = resolve_header_line("date,sku,quantity")
        assert parse_row("2024-01-05,linux,1", schema) is None


def test_parse_rows_skips_without_disturbing_neighbours(schema):
    lines = [
        "2024-01-01,Actions,Linux,1,1.0,acme,acme/web,eng",
        "2024-01-02,Actions,Linux",
        "2024-01-03,Actions,Linux,3,3.0,acme,acme/web,eng",
    ]
    parsed = list(parse_rows(lines, schema))
    assert [r.date for r in parsed] == ["2024-01-01", "2024-01-03"]
    assert sum(r.cost for r in parsed) == pytest.approx(4.0)
