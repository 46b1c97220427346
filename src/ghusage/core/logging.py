"""structlog configuration shared by the CLI and the API."""

from __future__ import annotations

import logging
import sys
from typing import Any, cast

import structlog

from ghusage.core.config import AppSettings


def setup_logging(settings: AppSettings | None = None) -> None:
    if settings is None:
        settings = AppSettings()

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    # 1. Common processors
    base_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    # 2. Human-readable locally, JSON everywhere else
    if settings.environment == "dev":
        renderer: Any = structlog.dev.ConsoleRenderer()
        processors = base_processors + [renderer]
    else:
        renderer = structlog.processors.JSONRenderer()
        processors = base_processors + [structlog.processors.dict_tracebacks, renderer]

    # 3. Rendered lines are handed to stdlib logging, so ghusage, uvicorn and
    # botocore output share one stream (stderr; stdout carries CLI results).
    structlog.configure(
        processors=cast(Any, processors),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
