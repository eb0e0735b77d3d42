"""httpx transport that rate limits and retries metadata provider calls.

Only hosts listed in ``retry_hosts`` are retried. Stream mirrors share the
same client but must fail fast: a mirror answering 503 is simply not live,
and sleeping on its ``Retry-After`` would stall the whole mirror cascade.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Iterable
from dataclasses import dataclass

import httpx
import structlog

from aniresolve.infrastructure.common.rate_limiter import HostRateLimiter

log = structlog.get_logger(__name__)


def _parse_retry_after(headers: httpx.Headers) -> float | None:
    """Seconds from ``Retry-After``; None when absent or in HTTP-date form."""
    raw = headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to back off on a throttling status."""

    max_retries: int = 3
    backoff_base: float = 1.0
    max_backoff: float = 30.0
    statuses: frozenset[int] = frozenset({429, 503})

    def delay(self, response: httpx.Response, attempt: int) -> float:
        """``Retry-After`` when given, else exponential backoff with jitter."""
        retry_after = _parse_retry_after(response.headers)
        if retry_after is None:
            retry_after = self.backoff_base * (2**attempt) + random.uniform(  # noqa: S311
                0, self.backoff_base
            )
        return min(retry_after, self.max_backoff)


class RetryTransport(httpx.AsyncBaseTransport):
    """Rate limits every request; retries throttled ones on *retry_hosts*.

    ``retry_hosts=None`` retries every host. An empty collection disables
    retries entirely.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        rate_limiter: HostRateLimiter,
        *,
        policy: RetryPolicy | None = None,
        retry_hosts: Iterable[str] | None = None,
    ) -> None:
        self._wrapped = wrapped
        self._rate_limiter = rate_limiter
        self._policy = policy or RetryPolicy()
        self._retry_hosts = (
            None if retry_hosts is None else frozenset(h.lower() for h in retry_hosts)
        )

    def _retries_for(self, request: httpx.Request) -> int:
        if self._retry_hosts is None or request.url.host.lower() in self._retry_hosts:
            return self._policy.max_retries
        return 0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        retries = self._retries_for(request)
        attempt = 0
        while True:
            await self._rate_limiter.acquire(str(request.url))
            response = await self._wrapped.handle_async_request(request)

            if response.status_code not in self._policy.statuses or attempt >= retries:
                return response

            await response.aread()
            await response.aclose()
            delay = self._policy.delay(response, attempt)
            attempt += 1
            log.info(
                "http_retry",
                host=request.url.host,
                status=response.status_code,
                attempt=attempt,
                delay=round(delay, 2),
            )
            await asyncio.sleep(delay)

    async def aclose(self) -> None:
        await self._wrapped.aclose()
