"""HTTP probe for the node's ping and stats endpoints."""

from __future__ import annotations

import logging
import time

import httpx

from nodewatch.runner.models import HttpResult

logger = logging.getLogger(__name__)


class HttpProbe:
    """Issues single GET requests against the node's HTTP interface."""

    def __init__(self, base_url: str, timeout: float = 10.0,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get(self, path: str) -> HttpResult:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("GET %s", url)
        t0 = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
            ) as client:
                resp = await client.get(url)
            latency = (time.perf_counter() - t0) * 1000
            return HttpResult(
                url=url, status_code=resp.status_code, text=resp.text,
                latency_ms=round(latency, 1),
            )
        except httpx.TimeoutException:
            return HttpResult(
                url=url, latency_ms=round(self.timeout * 1000, 1),
                error=f"Request timed out ({self.timeout:g}s)",
            )
        except httpx.ConnectError as exc:
            latency = (time.perf_counter() - t0) * 1000
            return HttpResult(
                url=url, latency_ms=round(latency, 1),
                error=f"Connection error: {exc}",
            )
        except httpx.HTTPError as exc:
            latency = (time.perf_counter() - t0) * 1000
            return HttpResult(
                url=url, latency_ms=round(latency, 1),
                error=f"HTTP error: {type(exc).__name__}: {exc}",
            )
