"""Health exposition routes.

Endpoints:
  GET /health       — 200 if every check is healthy, 503 otherwise
  GET /health/disk  — plain-text "<read> <write>" KB/s for the disk check
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ..healthchecks import DiskstatsHealthCheck, HealthAggregator, TickResult

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/health")
def health(request: Request) -> JSONResponse:
    """Aggregate verdict across all configured checks."""
    aggregator: HealthAggregator = request.app.state.aggregator
    healthy = aggregator.healthy()
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "healthy": healthy,
            "checks": [c.to_dict() for c in aggregator.checks],
        },
    )


@health_router.get("/health/disk")
def disk_health(request: Request) -> PlainTextResponse:
    """Standalone disk report: averaged read and write KB/s."""
    check: DiskstatsHealthCheck | None = request.app.state.disk_check
    if check is None:
        return PlainTextResponse("disk check not configured\n", status_code=404)

    if check.last_tick is not TickResult.EVALUATED:
        return PlainTextResponse("not ready\n", status_code=503)

    read, write, _ = check.rates()
    status_code = 200 if check.healthy() else 503
    return PlainTextResponse(f"{int(read)} {int(write)}\n", status_code=status_code)
