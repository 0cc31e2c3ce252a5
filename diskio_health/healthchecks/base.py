"""Health check abstraction shared by every check variant."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class CheckState(str, Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    RUNNING = "running"
    STOPPED = "stopped"


class TickResult(str, Enum):
    """Outcome of the most recent evaluation tick."""

    NONE = "none"
    NO_DATA = "no_data"
    EVALUATED = "evaluated"


class HealthCheckNotConfiguredError(RuntimeError):
    """Raised when a check is started or updated before ``configure``."""


class HealthCheck(ABC):
    """A unit that periodically evaluates itself into a boolean verdict.

    Lifecycle:
        check.configure(config)
        check.start(stop_event)   # launches the check's own worker(s)
        ...
        stop_event.set()          # workers exit at their next tick boundary
    """

    name: str = "healthcheck"

    def __init__(self) -> None:
        self._healthy = False
        self.state = CheckState.UNCONFIGURED
        self.last_tick = TickResult.NONE
        self._tasks: list[asyncio.Task[None]] = []

    @abstractmethod
    def configure(self, config: Any) -> None:
        """Apply configuration and acquire resources."""

    @abstractmethod
    def start(self, stop_event: asyncio.Event) -> None:
        """Launch background workers; they stop when ``stop_event`` is set."""

    @abstractmethod
    async def update(self) -> bool:
        """Run one evaluation and return the new verdict."""

    def healthy(self) -> bool:
        return self._healthy

    @property
    def tasks(self) -> list[asyncio.Task[None]]:
        return list(self._tasks)

    async def wait_stopped(self) -> None:
        """Wait for this check's workers to exit after cancellation."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self.state = CheckState.STOPPED

    def _require_configured(self) -> None:
        if self.state is CheckState.UNCONFIGURED:
            raise HealthCheckNotConfiguredError(f"{self.name} check used before configure()")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "healthy": self._healthy,
            "state": self.state.value,
            "last_tick": self.last_tick.value,
        }
