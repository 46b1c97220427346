"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from ghusage.api.routes import health, reports
from ghusage.core.config import AppSettings
from ghusage.core.logging import setup_logging
from ghusage.persistence import create_cache
from ghusage.services.aggregation import AggregationService
from ghusage.services.upload import UploadService


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resolved = settings or AppSettings()
        setup_logging(resolved)
        app.state.settings = resolved
        app.state.uploads = UploadService(resolved)
        app.state.aggregations = AggregationService(resolved.aggregation, create_cache(resolved))
        yield

    app = FastAPI(
        title="GitHub Billing Usage Insights",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(reports.router)
    return app
