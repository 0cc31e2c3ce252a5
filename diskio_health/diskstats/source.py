"""Diskstats source — polls /proc/diskstats and keeps per-device deltas.

The source file stays open for the lifetime of the object and is rewound on
every poll. Snapshot and delta maps are rebuilt off to the side and swapped
in only once the whole file parsed, so a malformed line leaves the previous
poll's view in place.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import IO

from ..worker import run_every
from .device import resolve_device_name
from .rwlock import RWLock
from .statline import DiskstatsParseError, Statline, parse_line

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/proc/diskstats"
DEFAULT_INTERVAL = 1.0  # seconds


class Diskstats:
    """Canonical view of all block devices' counters and latest deltas.

    ``poll()`` is the only writer and is expected to run from a single worker;
    ``get()`` / ``get_delta()`` may be called from any thread.
    """

    def __init__(self, path: str = DEFAULT_PATH) -> None:
        self.path = path
        self.interval = DEFAULT_INTERVAL
        self._stats: dict[str, Statline] = {}
        self._delta: dict[str, Statline] = {}
        self._stats_lock = RWLock()
        self._delta_lock = RWLock()
        self._poll_lock = threading.Lock()
        self._task: asyncio.Task[None] | None = None

        logger.info("Opening diskstats source %s", path)
        self._fd: IO[str] = open(path, encoding="ascii")
        try:
            self.poll()
        except Exception:
            self._fd.close()
            raise

    # ── Polling ──────────────────────────────────────────────────────────

    def _read_lines(self) -> list[str]:
        self._fd.seek(0)
        try:
            return self._fd.read().splitlines()
        except UnicodeDecodeError as e:
            raw = e.object[max(e.start - 40, 0):e.end + 40]
            line = raw.decode("ascii", errors="replace")
            raise DiskstatsParseError(line, f"non-ASCII byte at offset {e.start}") from e

    def poll(self) -> None:
        """Re-read the source and commit a new snapshot and delta."""
        with self._poll_lock:
            previous = self._stats
            stats: dict[str, Statline] = {}
            delta: dict[str, Statline] = {}

            for line in self._read_lines():
                if not line.strip():
                    continue
                sl = parse_line(line)
                old = previous.get(sl.name)
                if old is not None:
                    delta[sl.name] = sl.delta(old)
                stats[sl.name] = sl

            with self._stats_lock.write(), self._delta_lock.write():
                self._stats = stats
                self._delta = delta

        logger.debug("Polled %s: %d devices, %d deltas", self.path, len(stats), len(delta))

    # ── Accessors ────────────────────────────────────────────────────────

    def get(self, device: str) -> Statline | None:
        """Current counters for ``device``, or None if it is unknown."""
        name = resolve_device_name(device)
        with self._stats_lock.read():
            return self._stats.get(name)

    def get_delta(self, device: str) -> Statline | None:
        """Change since the previous poll, or None until two polls saw it."""
        name = resolve_device_name(device)
        with self._delta_lock.read():
            return self._delta.get(name)

    def devices(self) -> list[str]:
        with self._stats_lock.read():
            return sorted(self._stats)

    def summary(self) -> dict[str, tuple[int, int]]:
        """``{name: (reads_completed, writes_completed)}`` for every device."""
        with self._stats_lock.read():
            return {
                name: (sl.reads_completed, sl.writes_completed)
                for name, sl in sorted(self._stats.items())
            }

    # ── Worker ───────────────────────────────────────────────────────────

    def start_worker(self, interval: float, stop_event: asyncio.Event) -> asyncio.Task[None]:
        """Poll every ``interval`` seconds until ``stop_event`` is set.

        The blocking file read runs in the default thread executor. Failed
        polls are logged by the worker loop and retried on the next tick.
        """
        if self._task and not self._task.done():
            return self._task
        self.interval = interval

        async def _tick() -> None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.poll)

        self._task = asyncio.create_task(
            run_every(interval, stop_event, _tick, name=f"diskstats:{self.path}"),
            name=f"diskstats-{self.path}",
        )
        logger.info("Diskstats worker started (path=%s, interval=%ss)", self.path, interval)
        return self._task

    def close(self) -> None:
        self._fd.close()

    def __enter__(self) -> Diskstats:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
