"""Aggregator — AND-reduces the verdicts of a fixed set of checks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from .base import HealthCheck

logger = logging.getLogger(__name__)


class HealthAggregator:
    """Holds checks in order, starts them, reports ``all(healthy)``.

    There is no aggregate worker: the verdict is computed on each call.
    """

    def __init__(self, checks: Iterable[HealthCheck] = ()) -> None:
        self.checks: list[HealthCheck] = list(checks)

    def add(self, check: HealthCheck) -> None:
        self.checks.append(check)

    def start(self, stop_event: asyncio.Event) -> None:
        for check in self.checks:
            check.start(stop_event)
        logger.info(
            "Health aggregator started: %s",
            ", ".join(c.name for c in self.checks) or "no checks",
        )

    async def wait_stopped(self) -> None:
        await asyncio.gather(*(c.wait_stopped() for c in self.checks))
        logger.info("Health aggregator stopped")

    def healthy(self) -> bool:
        return all(c.healthy() for c in self.checks)

    def statuses(self) -> dict[str, bool]:
        return {c.name: c.healthy() for c in self.checks}

    def __len__(self) -> int:
        return len(self.checks)
