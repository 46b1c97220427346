"""Report models produced once per successful parse."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from ghusage.models.base import CamelModel
from ghusage.models.usage_record import CategorizedUsage


class MonthlySummary(CamelModel):
    """Legacy per-month totals. Copilot and Codespaces are not included."""

    month: str  # "YYYY-MM"
    label: str = ""  # short month name, e.g. "Jan"
    actions: float = 0.0
    packages: float = 0.0
    storage: float = 0.0
    total: float = 0.0


class Period(CamelModel):
    start: str = ""
    end: str = ""


class BillingReport(CamelModel):
    organization: str
    period: Period
    monthly_summary: list[MonthlySummary] = Field(default_factory=list)
    buckets: CategorizedUsage


class UploadResult(CamelModel):
    """Structured outcome of the upload boundary. Never raised, always returned."""

    success: bool
    report: Optional[BillingReport] = None
    error: Optional[str] = None
    message: Optional[str] = None
    rows_processed: int = 0
    rows_total: int = 0


class ParseResult(CamelModel):
    """Buckets plus row accounting for one parsed export."""

    buckets: CategorizedUsage
    headers: list[str] = Field(default_factory=list)
    rows_total: int = 0  # data lines in the file
    rows_parsed: int = 0  # lines that became a UsageRecord
    rows_categorized: int = 0  # records that landed in a bucket
