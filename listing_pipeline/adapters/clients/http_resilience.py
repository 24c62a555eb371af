# listing_pipeline/adapters/clients/http_resilience.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from ...config import settings

log = logging.getLogger(__name__)

# 4xx other than 429 won't get better on retry (bad folder id, bad key)
RETRYABLE_STATUS = (429, 500, 502, 503, 504)


@dataclass
class CircuitBreaker:
    """Opens after N consecutive failures; stays open for HTTP_CIRCUIT_RESET_S."""

    fails: int = 0
    opened_at: float | None = None

    def is_open(self, now: float) -> bool:
        if self.opened_at is None:
            return False
        return (now - self.opened_at) < float(settings.HTTP_CIRCUIT_RESET_S)

    def record_success(self) -> None:
        self.fails = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.fails += 1
        if self.fails >= int(settings.HTTP_CIRCUIT_FAIL_THRESHOLD) and self.opened_at is None:
            self.opened_at = time.time()
            log.warning("Circuit opened after %s consecutive failures", self.fails)


class RateLimiter:
    """Very simple per-process limiter: at most HTTP_RATE_LIMIT_RPS request starts per second."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._last = 0.0

    async def wait(self) -> None:
        rps = float(settings.HTTP_RATE_LIMIT_RPS)
        if rps <= 0:
            return
        async with self._lock:
            delay = (self._last + 1.0 / rps) - time.time()
            if delay > 0:
                await asyncio.sleep(delay)
            self._last = time.time()


_CIRCUIT = CircuitBreaker()
_LIMITER = RateLimiter()


def reset_circuit() -> None:
    _CIRCUIT.record_success()


def _backoff_s(attempt: int) -> float:
    return min(5.0, float(settings.HTTP_BACKOFF_BASE_S) * (2**attempt))


async def resilient_request(
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    json: Any | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """
    One outbound call with timeout, retry on 429/5xx/network errors with
    exponential backoff, and the shared circuit breaker. Raises the last
    httpx error once retries are spent.
    """
    if _CIRCUIT.is_open(time.time()):
        raise httpx.HTTPError(f"circuit_open: refusing external call to {url}")

    await _LIMITER.wait()

    timeout = httpx.Timeout(float(settings.HTTP_TIMEOUT_S))
    max_retries = int(settings.HTTP_MAX_RETRIES)

    attempt = 0
    while True:
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                resp = await client.request(method, url, headers=headers, params=params, json=json)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            _CIRCUIT.record_failure()
            if e.response.status_code not in RETRYABLE_STATUS or attempt >= max_retries:
                raise
            log.warning("%s %s -> %s, retrying (%s/%s)", method, url, e.response.status_code, attempt + 1, max_retries)
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            _CIRCUIT.record_failure()
            if attempt >= max_retries:
                raise
            log.warning("%s %s failed (%s), retrying (%s/%s)", method, url, e, attempt + 1, max_retries)
        else:
            _CIRCUIT.record_success()
            return resp

        await asyncio.sleep(_backoff_s(attempt))
        attempt += 1
