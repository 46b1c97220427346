"""Command-line entry point: ``ghusage list``, ``ghusage report`` and ``ghusage view``."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

from ghusage.core.config import AppSettings
from ghusage.core.exceptions import FileStoreError
from ghusage.core.logging import setup_logging
from ghusage.models.filters import DateRange, FilterState
from ghusage.models.usage_record import ServiceBucket
from ghusage.persistence import create_cache, list_exports, read_export
from ghusage.services.aggregation import AggregationService
from ghusage.services.upload import UploadService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ghusage", description="GitHub billing usage insights")
    sub = parser.add_subparsers(dest="command", required=True)

    listing = sub.add_parser("list", help="List CSV exports under a directory or S3 prefix")
    listing.add_argument("location", help="Local directory or s3://bucket/prefix")

    report = sub.add_parser("report", help="Parse an export and print the report")
    report.add_argument("source", help="Local path or s3://bucket/key of a CSV export")
    report.add_argument("--summary-only", action="store_true", help="Omit bucket records")

    view = sub.add_parser("view", help="Print aggregated chart data for one bucket")
    view.add_argument("source", help="Local path or s3://bucket/key of a CSV export")
    view.add_argument("--bucket", required=True, choices=[b.value for b in ServiceBucket])
    view.add_argument("--start")
    view.add_argument("--end")
    view.add_argument("--organization")
    view.add_argument("--repository")
    view.add_argument("--cost-center")
    view.add_argument("--breakdown", choices=["cost", "quantity"], default="quantity")
    return parser


def _emit(payload: dict) -> None:
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    setup_logging(settings)

    if args.command == "list":
        try:
            sources = list_exports(args.location, settings)
        except FileStoreError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        for source in sources:
            print(source)
        return 0

    try:
        filename, data = read_export(args.source, settings)
    except FileStoreError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    result = UploadService(settings).process(filename, data)
    if not result.success or result.report is None:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    print(result.message, file=sys.stderr)

    if args.command == "report":
        payload = result.to_payload()
        if args.summary_only:
            payload["report"].pop("buckets", None)
        _emit(payload)
        return 0

    filters = FilterState(
        date_range=DateRange(start=args.start, end=args.end),
        organization=args.organization,
        repository=args.repository,
        cost_center=args.cost_center,
        breakdown=args.breakdown,
    )
    service = AggregationService(settings.aggregation, create_cache(settings))
    records = result.report.buckets.get(args.bucket)
    _emit(service.service_view(args.bucket, records, filters).to_payload())
    return 0


if __name__ == "__main__":
    sys.exit(main())
