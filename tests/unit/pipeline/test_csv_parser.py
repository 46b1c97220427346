"""Tests for the CSV parse driver, including the end-to-end scenario."""

from __future__ import annotations

import pytest

from ghusage.core.exceptions import EmptyFileError
from ghusage.pipeline.csv_parser import parse_csv
from ghusage.pipeline.report_assembler import assemble_report
from tests.fakes import GITHUB_EXPORT_CSV, SCENARIO_CSV


def test_end_to_end_scenario():
    parsed = parse_csv(SCENARIO_CSV)
    buckets = parsed.buckets

    assert len(buckets.actions_minutes) == 1
    minutes = buckets.actions_minutes[0]
    assert minutes.cost == pytest.approx(4.80)
    assert minutes.quantity == 120

    assert len(buckets.actions_storage) == 1
    assert buckets.actions_storage[0].cost == pytest.approx(0.50)
    assert len(buckets.packages) == 1
    assert buckets.packages[0].cost == pytest.approx(1.00)

    report = assemble_report(buckets)
    (january,) = report.monthly_summary
    assert january.month == "2024-01"
    assert january.actions == pytest.approx(4.80)
    assert january.packages == pytest.approx(1.00)
    assert january.storage == pytest.approx(0.50)
    assert january.total == pytest.approx(6.30)
    assert report.organization == "acme"
    assert (report.period.start, report.period.end) == ("2024-01-05", "2024-01-06")


def test_repository_slug_header_resolves_repository():
    record = parse_csv(SCENARIO_CSV).buckets.packages[0]
    assert record.repository == "acme/api"


def test_github_export_fills_all_buckets():
    parsed = parse_csv(GITHUB_EXPORT_CSV)
    assert parsed.buckets.counts() == {
        "actionsMinutes": 1,
        "actionsStorage": 1,
        "packages": 1,
        "copilot": 1,
        "codespaces": 1,
    }
    assert parsed.buckets.copilot[0].repository is None
    assert parsed.buckets.codespaces[0].cost_center == "ops"


def test_skipped_rows_leave_other_rows_untouched():
    content = SCENARIO_CSV.replace(
        "2024-01-06,Packages,npm,10,1.00,acme,acme/api\n",
        "2024-01-06,Packages,npm\n2024-01-06,Packages,npm,10,1.00,acme,acme/api\n",
    )
    parsed = parse_csv(content)
    assert parsed.rows_total == 4
    assert parsed.rows_parsed == 3
    assert parsed.buckets.packages[0].cost == pytest.approx(1.00)


def test_windows_line_endings_and_trailing_blank_lines():
    parsed = parse_csv(SCENARIO_CSV.replace("\n", "\r\n") + "\r\n\r\n")
    assert parsed.rows_categorized == 3


@pytest.mark.parametrize("separator", ["\u2028", "\u0085", "\x0b", "\x0c", "\x1e"])
def test_only_newline_separates_rows(separator):
    content = (
        "Date,Product,SKU,Quantity,Net_Amount,Organization,Repository\n"
        f"2024-01-05,Actions,Linux,120,4.80,acme,acme/web{separator}mirror\n"
        "2024-01-06,Packages,npm,10,1.00,acme,acme/api\n"
    )
    parsed = parse_csv(content)
    assert parsed.rows_total == 2
    assert parsed.buckets.actions_minutes[0].repository == f"acme/web{separator}mirror"
    assert len(parsed.buckets.packages) == 1


@pytest.mark.parametrize("content", ["", "   \n", "Date,Product,SKU\n"])
def test_header_only_or_empty_is_rejected(content):
    with pytest.raises(EmptyFileError):
        parse_csv(content)


def test_missing_required_columns_parse_to_nothing():
    parsed = parse_csv("when,what\n2024-01-01,actions\n")
    assert parsed.buckets.is_empty
    assert parsed.rows_total == 1


def test_progress_is_reported_per_chunk():
    lines = ["Date,Product,SKU,Quantity,Net_Amount"]
    lines += ["2024-01-01,Packages,npm,1,0.1" for _ in range(25)]
    calls = []
    parsed = parse_csv("\n".join(lines), chunk_size=10, on_progress=lambda done, total: calls.append((done, total)))
    assert calls == [(10, 25), (20, 25), (25, 25)]
    assert len(parsed.buckets.packages) == 25
