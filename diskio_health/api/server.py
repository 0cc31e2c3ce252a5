"""FastAPI server exposing the aggregated health verdict."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..healthchecks import DiskstatsHealthCheck, HealthAggregator
from .health_routes import health_router

logger = logging.getLogger(__name__)


def create_app(
    aggregator: HealthAggregator,
    disk_check: DiskstatsHealthCheck | None = None,
    start_checks: bool = True,
) -> FastAPI:
    """Create the application around an already-configured aggregator.

    The lifespan starts every check on a shared stop event and sets it on
    shutdown, then waits for the workers to finish their current tick.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stop_event = asyncio.Event()
        app.state.stop_event = stop_event
        if start_checks:
            aggregator.start(stop_event)
        try:
            yield
        finally:
            stop_event.set()
            if start_checks:
                await aggregator.wait_stopped()
            if disk_check is not None:
                disk_check.close()

    app = FastAPI(
        title="diskio-health",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.aggregator = aggregator
    app.state.disk_check = disk_check
    app.include_router(health_router)
    return app
