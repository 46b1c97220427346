"""Report, view and filter-option endpoints. Stateless: nothing is stored."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import Field

from ghusage.models.base import CamelModel
from ghusage.models.filters import FilterState
from ghusage.models.usage_record import ServiceBucket, UsageRecord
from ghusage.pipeline.filter_engine import (
    cost_center_options,
    date_bounds,
    organization_options,
    repository_options,
)

router = APIRouter(tags=["reports"])


class ViewRequest(CamelModel):
    bucket: ServiceBucket
    records: list[UsageRecord] = Field(default_factory=list)
    filters: FilterState = FilterState()


class FilterOptionsRequest(CamelModel):
    records: list[UsageRecord] = Field(default_factory=list)
    organization: Optional[str] = None


@router.post("/reports")
async def create_report(request: Request, filename: str = Query(...)) -> dict:
    """Parse a raw CSV request body into a billing report."""
    data = await request.body()
    result = await run_in_threadpool(request.app.state.uploads.process, filename, data)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return result.to_payload()


@router.post("/views")
def create_view(payload: ViewRequest, request: Request) -> dict:
    """Filtered, aggregated chart data for one bucket."""
    view = request.app.state.aggregations.service_view(
        payload.bucket, tuple(payload.records), payload.filters
    )
    return view.to_payload()


@router.post("/filters/options")
def filter_options(payload: FilterOptionsRequest) -> dict:
    """Dropdown options; repositories depend on the selected organization."""
    bounds = date_bounds(payload.records)
    return {
        "organizations": organization_options(payload.records),
        "costCenters": cost_center_options(payload.records),
        "repositories": repository_options(payload.records, payload.organization),
        "dateRange": bounds.to_payload(),
    }
