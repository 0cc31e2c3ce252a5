"""HTTP health check — proxies another service's health endpoint.

With no URL configured the check is a pass-through and always healthy.
Self-signed certificates are accepted on https targets.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..config import HTTPCheckConfig
from ..worker import run_every
from .base import CheckState, HealthCheck, TickResult

logger = logging.getLogger(__name__)


class HTTPHealthCheck(HealthCheck):
    name = "http"

    def __init__(
        self,
        config: HTTPCheckConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self.config = HTTPCheckConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        if config is not None:
            self.configure(config)

    def configure(self, config: HTTPCheckConfig) -> None:
        self.config = config
        if not config.url:
            self._healthy = True
        self.state = CheckState.CONFIGURED
        logger.info(
            "HTTP check configured: url=%s interval=%ss",
            config.url or "(none, always healthy)", config.interval,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                verify=False,
                transport=self._transport,
            )
        return self._client

    def start(self, stop_event: asyncio.Event) -> None:
        self._require_configured()
        if self.state is CheckState.RUNNING:
            return
        self.state = CheckState.RUNNING
        if not self.config.url:
            return
        self._tasks.append(
            asyncio.create_task(self._run(stop_event), name="http-check")
        )

    async def _run(self, stop_event: asyncio.Event) -> None:
        try:
            await run_every(self.config.interval, stop_event, self.update, name="http-check")
        finally:
            await self.aclose()

    async def update(self) -> bool:
        self._require_configured()
        if not self.config.url:
            self._healthy = True
            self.last_tick = TickResult.EVALUATED
            return self._healthy

        try:
            resp = await self._get_client().get(self.config.url)
        except httpx.HTTPError as e:
            self._healthy = False
            self.last_tick = TickResult.EVALUATED
            logger.warning("HTTP check %s failed: %s: %s", self.config.url, type(e).__name__, e)
            return self._healthy

        self._healthy = resp.is_success
        self.last_tick = TickResult.EVALUATED
        logger.debug("HTTP check %s: %d", self.config.url, resp.status_code)
        return self._healthy

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
