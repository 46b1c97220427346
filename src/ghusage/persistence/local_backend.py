"""Local filesystem export source implementing IFileStore."""

from __future__ import annotations

from pathlib import Path

from ghusage.core.exceptions import FileStoreError


class LocalFileStore:
    """Reads exports relative to a root directory (cwd by default)."""

    def __init__(self, root: str | Path = ".") -> None:
        self._root = Path(root)

    def read(self, path: str) -> bytes:
        try:
            return (self._root / path).read_bytes()
        except OSError as exc:
            raise FileStoreError(f"Local read failed for {path!r}: {exc}") from exc

    def list_files(self, prefix: str = "") -> list[str]:
        base = self._root / prefix
        if not base.is_dir():
            return []
        return sorted(str(p.relative_to(self._root)) for p in base.rglob("*") if p.is_file())
