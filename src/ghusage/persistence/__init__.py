"""Pluggable cache and export-source backends behind Protocol interfaces."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from ghusage.core.config import AppSettings
from ghusage.core.protocols import ICacheBackend, IFileStore
from ghusage.persistence.local_backend import LocalFileStore
from ghusage.persistence.memory_backend import MemoryCacheBackend
from ghusage.persistence.redis_backend import RedisViewCache
from ghusage.persistence.s3_backend import S3FileStore, split_s3_uri


def create_cache(settings: AppSettings | None = None) -> ICacheBackend:
    """Cache backend selected by ``settings.cache_backend``."""
    if settings is None:
        settings = AppSettings()
    if settings.cache_backend == "redis":
        return RedisViewCache.from_config(settings.redis)
    return MemoryCacheBackend()


def _s3_store(bucket: str, settings: AppSettings) -> S3FileStore:
    return S3FileStore(bucket=bucket, region=settings.s3.region, endpoint_url=settings.s3.endpoint_url)


def open_source(source: str, settings: AppSettings | None = None) -> tuple[IFileStore, str]:
    """Store and key for a local path or an ``s3://bucket/key`` URI."""
    if settings is None:
        settings = AppSettings()
    if source.startswith("s3://"):
        bucket, key = split_s3_uri(source)
        return _s3_store(bucket, settings), key
    return LocalFileStore(), source


def read_export(source: str, settings: AppSettings | None = None) -> tuple[str, bytes]:
    """Filename (for the extension check) and raw bytes of an export."""
    store, key = open_source(source, settings)
    return PurePosixPath(key).name, store.read(key)


def list_exports(location: str, settings: AppSettings | None = None) -> list[str]:
    """Sources under a local directory or an ``s3://bucket/prefix`` with an allowed extension.

    Each returned entry can be passed straight back to ``read_export``.
    """
    if settings is None:
        settings = AppSettings()
    allowed = tuple(ext.lower() for ext in settings.parser.allowed_extensions)
    if location.startswith("s3://"):
        bucket, prefix = split_s3_uri(location, require_key=False)
        store = _s3_store(bucket, settings)
        return [store.uri(key) for key in store.list_files(prefix) if key.lower().endswith(allowed)]
    root = Path(location)
    return [
        str(root / rel)
        for rel in LocalFileStore(root).list_files()
        if rel.lower().endswith(allowed)
    ]
