"""Type aliases used across ghusage."""

from __future__ import annotations

from typing import Callable, Literal

Breakdown = Literal["cost", "quantity"]
Dimension = Literal["repository", "organization", "sku"]
ProgressCallback = Callable[[int, int], None]  # (processed, total)
