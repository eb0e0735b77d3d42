"""Tests for HostRateLimiter and TokenBucket."""

from __future__ import annotations

import pytest

from aniresolve.infrastructure.common.rate_limiter import (
    HostRateLimiter,
    TokenBucket,
)


class TestTokenBucket:
    @pytest.mark.asyncio
    async def test_unlimited_rate_skips(self) -> None:
        bucket = TokenBucket(rate=0.0, burst=1)
        for _ in range(5):
            await bucket.acquire()
        # Unlimited buckets never touch their token count.
        assert bucket._tokens == 1.0

    @pytest.mark.asyncio
    async def test_burst_allows_multiple_immediate(self) -> None:
        bucket = TokenBucket(rate=1.0, burst=3)
        for _ in range(3):
            await bucket.acquire()
        assert bucket._tokens < 1.0

    @pytest.mark.asyncio
    async def test_waits_when_bucket_empty(self) -> None:
        bucket = TokenBucket(rate=1000.0, burst=1)
        await bucket.acquire()
        # Second acquire has to wait for a refill; ~1ms at this rate.
        await bucket.acquire()


class TestHostRateLimiter:
    @pytest.mark.asyncio
    async def test_empty_host_skips(self) -> None:
        limiter = HostRateLimiter(default_rps=5.0)
        await limiter.acquire("not-a-url")
        assert limiter._buckets == {}

    @pytest.mark.asyncio
    async def test_different_hosts_get_separate_buckets(self) -> None:
        limiter = HostRateLimiter(default_rps=10.0, burst=2)
        await limiter.acquire("https://api.jikan.moe/v4/anime")
        await limiter.acquire("https://graphql.anilist.co")
        assert set(limiter._buckets) == {"api.jikan.moe", "graphql.anilist.co"}

    @pytest.mark.asyncio
    async def test_same_host_shares_bucket(self) -> None:
        limiter = HostRateLimiter(default_rps=10.0, burst=5)
        await limiter.acquire("https://api.jikan.moe/v4/a")
        await limiter.acquire("https://API.jikan.moe/v4/b")
        assert len(limiter._buckets) == 1

    @pytest.mark.asyncio
    async def test_override_rate_per_host(self) -> None:
        limiter = HostRateLimiter(default_rps=0.0, overrides={"api.jikan.moe": 3.0})
        await limiter.acquire("https://api.jikan.moe/v4/a")
        await limiter.acquire("https://m1.example/stream")
        assert limiter._buckets["api.jikan.moe"].rate == 3.0
        assert limiter._buckets["m1.example"].rate == 0.0
