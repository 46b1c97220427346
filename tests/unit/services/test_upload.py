"""Tests for the upload boundary."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from ghusage.services.upload import GENERIC_FAILURE, UploadService, process_file
from tests.fakes import SCENARIO_CSV


@pytest.fixture
def service():
    return UploadService()


class TestRejections:
    def test_wrong_extension(self, service):
        result = service.process("usage.xlsx", SCENARIO_CSV.encode())
        assert not result.success
        assert result.error == "Invalid file format. Please upload a CSV file."
        assert result.report is None

    def test_undecodable_content(self, service):
        result = service.process("usage.csv", b"\xff\xfe\xfa\x00bad")
        assert not result.success
        assert result.error == "Unable to read file content."

    def test_empty_file(self, service):
        result = service.process("usage.csv", b"")
        assert result.error == "CSV file appears to be empty or invalid"

    def test_no_billing_rows(self, service):
        result = service.process("usage.csv", b"Date,Product,SKU\n2024-01-01,lfs,bandwidth\n")
        assert not result.success
        assert result.error == "No billing data found in the CSV file."

    def test_unexpected_failure_becomes_generic_error(self, service):
        with patch("ghusage.services.upload.parse_csv", side_effect=RuntimeError("boom")):
            result = service.process("usage.csv", SCENARIO_CSV.encode())
        assert not result.success
        assert result.error == GENERIC_FAILURE


class TestSuccess:
    def test_returns_report_and_row_counts(self, service):
        result = service.process("Usage.CSV", SCENARIO_CSV.encode())
        assert result.success
        assert result.report.organization == "acme"
        assert result.rows_processed == 3
        assert result.rows_total == 3
        assert result.message == "Successfully processed 3 of 3 rows"

    def test_byte_order_mark_is_tolerated(self, service):
        result = service.process("usage.csv", b"\xef\xbb\xbf" + SCENARIO_CSV.encode())
        assert result.success

    def test_progress_callback_receives_totals(self, service):
        seen = []
        service.process("usage.csv", SCENARIO_CSV.encode(), on_progress=lambda d, t: seen.append((d, t)))
        assert seen[-1] == (3, 3)

    def test_payload_shape(self):
        payload = process_file("usage.csv", SCENARIO_CSV.encode()).to_payload()
        report = payload["report"]
        assert set(report) == {"organization", "period", "monthlySummary", "buckets"}
        assert report["period"] == {"start": "2024-01-05", "end": "2024-01-06"}
        assert report["buckets"]["actionsStorage"][0]["sku"] == "Actions - Storage"
