"""Periodic worker loop shared by the diskstats poller and the health checks.

Every worker is an asyncio task driven by a fixed interval and a shared
``asyncio.Event`` cancellation token. The token is checked at the top of each
tick; setting it ends the current wait early. Work already in progress is
never interrupted.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


async def wait_or_stop(stop_event: asyncio.Event, timeout: float) -> bool:
    """Sleep for ``timeout`` seconds. Returns True if the token fired first."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


async def run_every(
    interval: float,
    stop_event: asyncio.Event,
    tick: Callable[[], Awaitable[object]],
    *,
    name: str,
) -> None:
    """Call ``tick`` every ``interval`` seconds until ``stop_event`` is set.

    A failing tick is logged and the schedule continues; there is no retry
    beyond the next tick.
    """
    logger.debug("Worker %s started (interval=%ss)", name, interval)
    while not stop_event.is_set():
        if await wait_or_stop(stop_event, interval):
            break
        try:
            await tick()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Worker %s tick failed", name)
    logger.debug("Worker %s stopped", name)
