"""ghusage exception hierarchy."""

from __future__ import annotations


class GHUsageError(Exception):
    """Base exception for all ghusage errors."""


class FileRejectedError(GHUsageError):
    """An uploaded export cannot be turned into a report.

    The message is user-facing and is returned verbatim by the upload boundary.
    """


class UnsupportedFileTypeError(FileRejectedError):
    """Upload does not carry an accepted extension."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__("Invalid file format. Please upload a CSV file.")


class UnreadableFileError(FileRejectedError):
    """Upload content could not be read or decoded."""

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__("Unable to read file content.")


class EmptyFileError(FileRejectedError):
    """Export has no header or no data lines."""

    def __init__(self) -> None:
        super().__init__("CSV file appears to be empty or invalid")


class NoBillingDataError(FileRejectedError):
    """Export parsed, but no row landed in any service bucket."""

    def __init__(self, rows_total: int = 0) -> None:
        self.rows_total = rows_total
        super().__init__("No billing data found in the CSV file.")


class CacheError(GHUsageError):
    """Cache backend operation failed."""


class FileStoreError(GHUsageError):
    """Export source read or listing failed."""
