"""Aggregation service — memoized per-bucket views for the dashboard.

Views are recomputed from the immutable bucket whenever the filter state or
breakdown changes. Results are memoized on (bucket identity, filter state,
aggregation settings) through an ``ICacheBackend`` so unrelated re-renders
do not recompute.
"""

from __future__ import annotations

import hashlib
import threading
from collections import OrderedDict
from typing import Optional, Sequence

import structlog
from pydantic import ValidationError

from ghusage.core.config import AggregationConfig
from ghusage.core.exceptions import CacheError
from ghusage.core.protocols import ICacheBackend
from ghusage.models.aggregates import ServiceView
from ghusage.models.filters import FilterState
from ghusage.models.usage_record import ServiceBucket, UsageRecord
from ghusage.persistence.memory_backend import MemoryCacheBackend
from ghusage.pipeline.aggregator import (
    aggregate_by_date,
    aggregate_by_organization,
    aggregate_by_repository,
    aggregate_by_sku,
    summarize,
)
from ghusage.pipeline.filter_engine import filter_records

logger = structlog.get_logger()

_FINGERPRINT_SLOTS = 32


def fingerprint_records(records: Sequence[UsageRecord]) -> str:
    """SHA-256 over the serialized records, in order."""
    digest = hashlib.sha256()
    for record in records:
        digest.update(record.model_dump_json().encode())
        digest.update(b"\n")
    return digest.hexdigest()


class AggregationService:
    """Builds ``ServiceView`` objects and memoizes them."""

    def __init__(
        self,
        config: Optional[AggregationConfig] = None,
        cache: Optional[ICacheBackend] = None,
    ) -> None:
        self._config = config or AggregationConfig()
        self._cache = cache if cache is not None else MemoryCacheBackend()
        # id(bucket) -> (bucket, fingerprint); the bucket is held so its id stays unique.
        self._fingerprints: OrderedDict[int, tuple[Sequence[UsageRecord], str]] = OrderedDict()
        self._fingerprint_lock = threading.Lock()

    def bucket_fingerprint(self, records: Sequence[UsageRecord]) -> str:
        with self._fingerprint_lock:
            entry = self._fingerprints.get(id(records))
            if entry is not None and entry[0] is records:
                self._fingerprints.move_to_end(id(records))
                return entry[1]
        fp = fingerprint_records(records)
        with self._fingerprint_lock:
            self._fingerprints[id(records)] = (records, fp)
            if len(self._fingerprints) > _FINGERPRINT_SLOTS:
                self._fingerprints.popitem(last=False)
        return fp

    def cache_key(self, bucket: str, records: Sequence[UsageRecord], filters: FilterState) -> str:
        params = hashlib.sha256(
            (filters.cache_key() + self._config.model_dump_json()).encode()
        ).hexdigest()[:16]
        return f"{bucket}:{self.bucket_fingerprint(records)}:{params}"

    def service_view(
        self,
        bucket: ServiceBucket | str,
        records: Sequence[UsageRecord],
        filters: Optional[FilterState] = None,
    ) -> ServiceView:
        bucket = ServiceBucket(bucket).value
        filters = filters or FilterState()
        key = self.cache_key(bucket, records, filters)

        cached = self._cache_get(key)
        if cached is not None:
            try:
                view = ServiceView.model_validate_json(cached)
            except ValidationError:
                logger.warning("service_view_cache_unreadable", bucket=bucket)
                self._cache_delete(key)
            else:
                logger.debug("service_view_cache_hit", bucket=bucket)
                return view

        view = self.compute_view(bucket, records, filters)
        self._cache_set(key, view.model_dump_json())
        return view

    def compute_view(
        self, bucket: str, records: Sequence[UsageRecord], filters: FilterState
    ) -> ServiceView:
        cfg = self._config
        filtered = filter_records(records, filters)
        summary = summarize(filtered)
        organizations = None
        if summary.organization_count > 1:
            organizations = aggregate_by_organization(
                filtered,
                top_n=cfg.top_organizations,
                breakdown=filters.breakdown,
                recent_days=cfg.recent_days,
            )
        view = ServiceView(
            bucket=bucket,
            filters=filters,
            summary=summary,
            by_date=list(aggregate_by_date(filtered, max_points=cfg.max_data_points).values()),
            repositories=aggregate_by_repository(
                filtered,
                top_n=cfg.top_repositories,
                breakdown=filters.breakdown,
                recent_days=cfg.recent_days,
            ),
            skus=aggregate_by_sku(filtered, top_n=cfg.top_skus, breakdown=filters.breakdown),
            organizations=organizations,
        )
        logger.debug("service_view_computed", bucket=bucket, records=len(records), filtered=len(filtered))
        return view

    def _cache_get(self, key: str) -> Optional[str]:
        try:
            return self._cache.get(key)
        except CacheError as exc:
            logger.warning("service_view_cache_unavailable", op="get", error=str(exc))
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.setex(key, self._config.cache_ttl, value)
        except CacheError as exc:
            logger.warning("service_view_cache_unavailable", op="setex", error=str(exc))

    def _cache_delete(self, key: str) -> None:
        try:
            self._cache.delete(key)
        except CacheError as exc:
            logger.warning("service_view_cache_unavailable", op="delete", error=str(exc))
