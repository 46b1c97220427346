"""In-memory backends — dict-backed, used in-process and in tests."""

from __future__ import annotations


class MemoryCacheBackend:
    """Dict-backed ICacheBackend. TTLs are ignored."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def __len__(self) -> int:
        return len(self._store)


class MemoryFileStore:
    """Dict-backed IFileStore."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self._files: dict[str, bytes] = dict(files or {})

    def add(self, path: str, data: bytes) -> None:
        self._files[path] = data

    def read(self, path: str) -> bytes:
        return self._files[path]

    def list_files(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._files if k.startswith(prefix))
