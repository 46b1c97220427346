"""Background parse job messages."""

from __future__ import annotations

from enum import StrEnum

from ghusage.models.base import CamelModel
from ghusage.models.report import UploadResult


class JobStatus(StrEnum):
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SUPERSEDED = "SUPERSEDED"


class ParseProgress(CamelModel):
    """Periodic progress message: data lines handled so far."""

    job_id: str
    processed: int
    total: int


class JobOutcome(CamelModel):
    """Terminal message. Exactly one per job."""

    job_id: str
    status: JobStatus
    result: UploadResult
