"""Protocol interfaces for ghusage abstractions.

Collaborators are typed structurally: no inheritance required, easy to
swap for in-memory fakes in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface used for aggregation memoization."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# File Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IFileStore(Protocol):
    """Read-only export source (S3 bucket, local directory, ...)."""

    def read(self, path: str) -> bytes: ...

    def list_files(self, prefix: str = "") -> list[str]: ...
