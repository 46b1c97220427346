"""Redis memo cache for service views, shared across API worker processes."""

from __future__ import annotations

import redis

from ghusage.core.config import RedisConfig
from ghusage.core.exceptions import CacheError

VIEW_NAMESPACE = "ghusage:view:"


class RedisViewCache:
    """ICacheBackend over Redis. Every key is stored under ``namespace``."""

    def __init__(self, client: redis.Redis, namespace: str = VIEW_NAMESPACE) -> None:
        self._client = client
        self._namespace = namespace

    @classmethod
    def from_config(cls, config: RedisConfig, namespace: str = VIEW_NAMESPACE) -> RedisViewCache:
        client = redis.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            decode_responses=config.decode_responses,
        )
        return cls(client, namespace)

    def _key(self, key: str) -> str:
        return self._namespace + key

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(self._key(key))
        except redis.RedisError as exc:
            raise CacheError(f"view cache lookup failed: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            self._client.setex(self._key(key), max(ttl, 1), value)
        except redis.RedisError as exc:
            raise CacheError(f"view cache store failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except redis.RedisError as exc:
            raise CacheError(f"view cache eviction failed: {exc}") from exc
