"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from diskio_health.healthchecks import CheckState, HealthCheck


def _diskstats_line(
    name: str,
    sectors_read: int = 0,
    sectors_written: int = 0,
    major: int = 8,
    minor: int = 0,
    reads: int = 0,
    writes: int = 0,
) -> str:
    """A /proc/diskstats line in kernel 5.5+ layout (20 fields)."""
    return (
        f"{major:4d} {minor:7d} {name} {reads} 3 {sectors_read} 40 "
        f"{writes} 6 {sectors_written} 70 0 90 110 0 0 0 0 0 0"
    )


@pytest.fixture
def diskstats_line() -> Callable[..., str]:
    return _diskstats_line


@pytest.fixture
def write_diskstats(tmp_path: Path) -> Callable[..., Path]:
    """Write lines to a fake diskstats file, truncating it in place."""
    path = tmp_path / "diskstats"

    def _write(*lines: str) -> Path:
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture
def diskstats_path(write_diskstats: Callable[..., Path]) -> Path:
    return write_diskstats(
        _diskstats_line("sda", sectors_read=1000, sectors_written=2000, reads=10, writes=20),
        _diskstats_line("sda1", minor=1, sectors_read=900, sectors_written=1800),
        _diskstats_line("nvme0n1", major=259, sectors_read=50, sectors_written=60),
    )


class FakeCheck(HealthCheck):
    """Check whose verdict is set directly by the test."""

    def __init__(self, name: str = "fake", healthy: bool = True) -> None:
        super().__init__()
        self.name = name
        self._healthy = healthy
        self.started_with: asyncio.Event | None = None

    def configure(self, config: Any = None) -> None:
        self.state = CheckState.CONFIGURED

    def start(self, stop_event: asyncio.Event) -> None:
        self.started_with = stop_event
        self.state = CheckState.RUNNING

    async def update(self) -> bool:
        return self._healthy

    def set_healthy(self, value: bool) -> None:
        self._healthy = value


@pytest.fixture
def fake_check() -> type[FakeCheck]:
    return FakeCheck
