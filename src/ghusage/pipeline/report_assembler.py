"""Report assembler — monthly summary, period and primary organization."""

from __future__ import annotations

from collections import Counter
from datetime import datetime

import structlog

from ghusage.core.exceptions import NoBillingDataError
from ghusage.models.report import BillingReport, MonthlySummary, Period
from ghusage.models.usage_record import CategorizedUsage, ServiceBucket

logger = structlog.get_logger()

UNKNOWN_ORGANIZATION = "Unknown"

# Buckets feeding the legacy monthly summary; Copilot and Codespaces are left out.
_SUMMARY_COLUMNS: dict[ServiceBucket, str] = {
    ServiceBucket.ACTIONS_MINUTES: "actions",
    ServiceBucket.ACTIONS_STORAGE: "storage",
    ServiceBucket.PACKAGES: "packages",
}


def month_label(month: str) -> str:
    """"2024-01" -> "Jan"; empty when the key is not a year-month."""
    try:
        return datetime.strptime(month, "%Y-%m").strftime("%b")
    except ValueError:
        return ""


def build_monthly_summary(buckets: CategorizedUsage) -> list[MonthlySummary]:
    months: dict[str, dict[str, float]] = {}
    for bucket, records in buckets.items():
        column = _SUMMARY_COLUMNS.get(bucket)
        for record in records:
            sums = months.setdefault(record.month, {"actions": 0.0, "packages": 0.0, "storage": 0.0})
            if column is not None:
                sums[column] += record.cost

    return [
        MonthlySummary(
            month=month,
            label=month_label(month),
            total=sums["actions"] + sums["packages"] + sums["storage"],
            **sums,
        )
        for month, sums in sorted(months.items())
    ]


def report_period(buckets: CategorizedUsage) -> Period:
    dates = [r.date for r in buckets.all_records()]
    if not dates:
        return Period()
    return Period(start=min(dates), end=max(dates))


def primary_organization(buckets: CategorizedUsage) -> str:
    """Most frequent organization; ties go to the one seen first."""
    counts = Counter(r.organization for r in buckets.all_records() if r.organization)
    if not counts:
        return UNKNOWN_ORGANIZATION
    # max() keeps the first of equal counts; Counter keeps insertion order.
    return max(counts, key=counts.__getitem__)


def assemble_report(buckets: CategorizedUsage) -> BillingReport:
    if buckets.is_empty:
        raise NoBillingDataError()
    report = BillingReport(
        organization=primary_organization(buckets),
        period=report_period(buckets),
        monthly_summary=build_monthly_summary(buckets),
        buckets=buckets,
    )
    logger.info(
        "billing_report_assembled",
        organization=report.organization,
        start=report.period.start,
        end=report.period.end,
        months=len(report.monthly_summary),
        buckets=buckets.counts(),
    )
    return report
