"""Disk-I/O health check — smoothed read/write throughput against ceilings.

Two independent workers run per check: the diskstats poller (every
``poll_interval``) and this check's evaluation loop (every ``eval_interval``).
They are not synchronised; an evaluation may see the same delta twice or miss
one. Rates always divide by ``poll_interval`` because that is the span of a
delta.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..config import DiskCheckConfig
from ..diskstats import Diskstats, resolve_device_name
from ..movingaverage import MovingAverage
from ..worker import run_every
from .base import CheckState, HealthCheck, HealthCheckNotConfiguredError, TickResult

logger = logging.getLogger(__name__)


class DiskstatsHealthCheck(HealthCheck):
    name = "disk"

    def __init__(self, config: DiskCheckConfig | None = None) -> None:
        super().__init__()
        self.config = DiskCheckConfig()
        self.ds: Diskstats | None = None
        self.read = MovingAverage(1)
        self.write = MovingAverage(1)
        self.total = MovingAverage(1)
        if config is not None:
            self.configure(config)

    def configure(self, config: DiskCheckConfig) -> None:
        """Open the diskstats source and size the averages.

        Raises ``OSError`` if the source cannot be opened and
        ``DiskstatsParseError`` if its first read is malformed.
        """
        ds = Diskstats(config.diskstats_path)
        self.close()
        self.config = config
        self.ds = ds
        self.ds.interval = config.poll_interval
        self.read = MovingAverage(config.average_count)
        self.write = MovingAverage(config.average_count)
        self.total = MovingAverage(config.average_count)
        self.state = CheckState.CONFIGURED
        logger.info(
            "Disk check configured: device=%s (%s) poll=%ss eval=%ss window=%d "
            "max read/write/total=%d/%d/%d KB/s",
            config.device, resolve_device_name(config.device),
            config.poll_interval, config.eval_interval, self.read.size,
            config.max_read_kbs, config.max_write_kbs, config.max_total_kbs,
        )

    def start(self, stop_event: asyncio.Event) -> None:
        self._require_configured()
        if self.state is CheckState.RUNNING:
            return
        self._tasks.append(self.source.start_worker(self.config.poll_interval, stop_event))
        self._tasks.append(
            asyncio.create_task(
                run_every(self.config.eval_interval, stop_event, self.update, name="disk-check"),
                name="disk-check",
            )
        )
        self.state = CheckState.RUNNING

    @property
    def source(self) -> Diskstats:
        """The open diskstats source; raises if the check was never configured."""
        if self.ds is None:
            raise HealthCheckNotConfiguredError(f"{self.name} check has no diskstats source")
        return self.ds

    async def update(self) -> bool:
        return self.evaluate()

    def evaluate(self) -> bool:
        """Fold the latest delta into the averages and recompute health."""
        self._require_configured()

        delta = self.source.get_delta(self.config.device)
        if delta is None:
            self._healthy = False
            self.last_tick = TickResult.NO_DATA
            logger.warning(
                "Could not get delta for %s (%s). Might just need to wait for more data",
                self.config.device, resolve_device_name(self.config.device),
            )
            return self._healthy

        read_b, write_b = delta.rate()
        divisor = self.config.rate_divisor
        read = read_b / 1024 / divisor
        write = write_b / 1024 / divisor

        self.read.update(read)
        self.write.update(write)
        self.total.update(read + write)

        cfg = self.config
        self._healthy = not (
            (cfg.max_read_kbs > 0 and self.read.average > cfg.max_read_kbs)
            or (cfg.max_write_kbs > 0 and self.write.average > cfg.max_write_kbs)
            or (cfg.max_total_kbs > 0 and self.total.average > cfg.max_total_kbs)
        )
        self.last_tick = TickResult.EVALUATED
        logger.debug(
            "Disk check: healthy=%s read=%.1fKB/s write=%.1fKB/s",
            self._healthy, self.read.average, self.write.average,
        )
        return self._healthy

    def rates(self) -> tuple[float, float, float]:
        """Averaged ``(read, write, total)`` KB/s."""
        return self.read.average, self.write.average, self.total.average

    def close(self) -> None:
        if self.ds is not None:
            self.ds.close()

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        read, write, total = self.rates()
        data.update({
            "device": self.config.device,
            "read_kbs": round(read, 1),
            "write_kbs": round(write, 1),
            "total_kbs": round(total, 1),
        })
        return data
