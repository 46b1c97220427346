"""Categorizer — sorts usage records into the five service buckets.

Two policies exist. The product policy is used whenever the export carries a
product column; the SKU-only policy re-derives a bucket from the SKU text
alone. Both are first-match-wins over case-folded text, and both may drop a
record (return ``None``) instead of guessing.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog

from ghusage.models.usage_record import CategorizedUsage, ServiceBucket, UsageRecord

logger = structlog.get_logger()

_RUNNER_TOKENS = ("linux", "windows", "macos", "self_hosted")

_PRODUCT_BUCKETS: dict[str, ServiceBucket] = {
    "packages": ServiceBucket.PACKAGES,
    "copilot": ServiceBucket.COPILOT,
    "codespaces": ServiceBucket.CODESPACES,
}

# Order matters: storage must be tested before the minutes tokens.
_SKU_RULES: tuple[tuple[tuple[str, ...], ServiceBucket], ...] = (
    (("storage",), ServiceBucket.ACTIONS_STORAGE),
    (("action", "minute", "linux", "windows", "macos"), ServiceBucket.ACTIONS_MINUTES),
    (("package",), ServiceBucket.PACKAGES),
    (("copilot",), ServiceBucket.COPILOT),
    (("codespace",), ServiceBucket.CODESPACES),
)


def categorize_by_product(product: str, sku: str) -> Optional[ServiceBucket]:
    product = product.strip().casefold()
    sku = sku.casefold()
    if product == "actions":
        if "storage" in sku:
            return ServiceBucket.ACTIONS_STORAGE
        if any(token in sku for token in _RUNNER_TOKENS):
            return ServiceBucket.ACTIONS_MINUTES
        return None
    return _PRODUCT_BUCKETS.get(product)


def categorize_by_sku(sku: str) -> Optional[ServiceBucket]:
    sku = sku.casefold()
    for tokens, bucket in _SKU_RULES:
        if any(token in sku for token in tokens):
            return bucket
    return None


def categorize(record: UsageRecord) -> Optional[ServiceBucket]:
    if record.product:
        return categorize_by_product(record.product, record.sku)
    return categorize_by_sku(record.sku)


def categorize_records(records: Iterable[UsageRecord]) -> CategorizedUsage:
    buckets: dict[ServiceBucket, list[UsageRecord]] = {b: [] for b in ServiceBucket}
    dropped = 0
    for record in records:
        bucket = categorize(record)
        if bucket is None:
            dropped += 1
            continue
        buckets[bucket].append(record)
    if dropped:
        logger.debug("usage_records_uncategorized", dropped=dropped)
    return CategorizedUsage.from_lists(buckets)
