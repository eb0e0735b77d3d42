"""Per-host token-bucket rate limiter for outgoing provider requests.

Jikan allows roughly 3 requests/second per client; AniList around 90 per
minute. Buckets are keyed by hostname so the two never share a budget.
"""

from __future__ import annotations

import asyncio
import time
from urllib.parse import urlparse

import structlog

log = structlog.get_logger(__name__)


class TokenBucket:
    """Token-bucket limiter.

    Args:
        rate: Tokens replenished per second. 0 = unlimited.
        burst: Maximum bucket size (allows short bursts).
    """

    def __init__(self, rate: float, burst: int = 3) -> None:
        self._rate = rate
        self._burst = burst
        self._tokens = float(burst)
        self._last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def rate(self) -> float:
        return self._rate

    async def acquire(self) -> None:
        """Wait until a token is available, then consume it."""
        if self._rate <= 0:
            return

        async with self._lock:
            self._refill()
            while self._tokens < 1.0:
                wait = (1.0 - self._tokens) / self._rate
                await asyncio.sleep(wait)
                self._refill()
            self._tokens -= 1.0

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_refill
        self._tokens = min(self._burst, self._tokens + elapsed * self._rate)
        self._last_refill = now


class HostRateLimiter:
    """Manages one TokenBucket per hostname.

    Args:
        default_rps: Requests per second per host. 0 = unlimited.
        burst: Maximum burst size per host.
        overrides: Per-host rps overriding *default_rps*.
    """

    def __init__(
        self,
        default_rps: float = 3.0,
        burst: int = 3,
        *,
        overrides: dict[str, float] | None = None,
    ) -> None:
        self._default_rps = default_rps
        self._burst = burst
        self._overrides = dict(overrides or {})
        self._buckets: dict[str, TokenBucket] = {}

    @staticmethod
    def _host(url: str) -> str:
        return (urlparse(url).hostname or "").lower()

    def _get_bucket(self, host: str) -> TokenBucket:
        bucket = self._buckets.get(host)
        if bucket is None:
            rate = self._overrides.get(host, self._default_rps)
            bucket = TokenBucket(rate=rate, burst=self._burst)
            self._buckets[host] = bucket
            log.debug("rate_limit_bucket_created", host=host, rate=rate)
        return bucket

    async def acquire(self, url: str) -> None:
        """Wait for rate limit clearance for the URL's host."""
        host = self._host(url)
        if not host:
            return
        bucket = self._get_bucket(host)
        if bucket.rate <= 0:
            return
        await bucket.acquire()
