"""Tests for RetryTransport (rate limiting + 429/503 retry)."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from aniresolve.infrastructure.common.rate_limiter import HostRateLimiter
from aniresolve.infrastructure.common.retry_transport import (
    RetryPolicy,
    RetryTransport,
    _parse_retry_after,
)

_PATCH_ASYNCIO = "aniresolve.infrastructure.common.retry_transport.asyncio"


def _make_response(
    status: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    return httpx.Response(status_code=status, headers=headers or {})


def _make_request(url: str = "https://api.jikan.moe/v4/anime/1/full") -> httpx.Request:
    return httpx.Request("GET", url)


def _make_transport(
    responses: list[httpx.Response] | httpx.Response,
    *,
    max_retries: int = 3,
    backoff_base: float = 1.0,
    max_backoff: float = 30.0,
    retry_hosts: set[str] | None = None,
) -> RetryTransport:
    """Create a RetryTransport with a mock inner transport."""
    mock_wrapped = AsyncMock(spec=httpx.AsyncBaseTransport)
    if isinstance(responses, list):
        mock_wrapped.handle_async_request = AsyncMock(side_effect=responses)
    else:
        mock_wrapped.handle_async_request = AsyncMock(return_value=responses)
    return RetryTransport(
        wrapped=mock_wrapped,
        rate_limiter=HostRateLimiter(default_rps=0.0),
        policy=RetryPolicy(
            max_retries=max_retries,
            backoff_base=backoff_base,
            max_backoff=max_backoff,
        ),
        retry_hosts=retry_hosts,
    )


class TestRetryTransport:
    @pytest.mark.asyncio()
    async def test_passes_through_successful_response(self) -> None:
        transport = _make_transport(_make_response(200))
        resp = await transport.handle_async_request(_make_request())
        assert resp.status_code == 200

    @pytest.mark.asyncio()
    async def test_retries_on_429_then_succeeds(self) -> None:
        transport = _make_transport([_make_response(429), _make_response(200)])
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 200
        assert m.sleep.await_count == 1
        assert transport._wrapped.handle_async_request.call_count == 2

    @pytest.mark.asyncio()
    async def test_respects_retry_after_header(self) -> None:
        transport = _make_transport(
            [_make_response(429, headers={"Retry-After": "2"}), _make_response(200)]
        )
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            await transport.handle_async_request(_make_request())

        m.sleep.assert_awaited_once_with(2.0)

    @pytest.mark.asyncio()
    async def test_caps_retry_after_at_max_backoff(self) -> None:
        transport = _make_transport(
            [_make_response(503, headers={"Retry-After": "120"}), _make_response(200)],
            max_backoff=10.0,
        )
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            await transport.handle_async_request(_make_request())

        m.sleep.assert_awaited_once_with(10.0)

    @pytest.mark.asyncio()
    async def test_gives_up_after_max_retries(self) -> None:
        transport = _make_transport(_make_response(429), max_retries=2)
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 429
        assert m.sleep.await_count == 2
        assert transport._wrapped.handle_async_request.call_count == 3

    @pytest.mark.asyncio()
    async def test_exponential_backoff_without_retry_after(self) -> None:
        transport = _make_transport(
            [_make_response(429), _make_response(429), _make_response(200)],
            max_backoff=100.0,
        )
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            with patch(
                "aniresolve.infrastructure.common.retry_transport.random"
            ) as rng:
                rng.uniform.return_value = 0.0
                await transport.handle_async_request(_make_request())

        delays = [call.args[0] for call in m.sleep.await_args_list]
        assert delays == [1.0, 2.0]

    @pytest.mark.asyncio()
    async def test_does_not_retry_non_retryable_status(self) -> None:
        for status in (400, 404, 500):
            transport = _make_transport(_make_response(status))
            resp = await transport.handle_async_request(_make_request())
            assert resp.status_code == status
            assert transport._wrapped.handle_async_request.call_count == 1

    @pytest.mark.asyncio()
    async def test_rate_limiter_called_per_attempt(self) -> None:
        transport = _make_transport([_make_response(429), _make_response(200)])
        transport._rate_limiter.acquire = AsyncMock()

        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            await transport.handle_async_request(_make_request())

        assert transport._rate_limiter.acquire.await_count == 2
        transport._rate_limiter.acquire.assert_awaited_with(
            "https://api.jikan.moe/v4/anime/1/full"
        )

    @pytest.mark.asyncio()
    async def test_aclose_delegates_to_wrapped(self) -> None:
        transport = _make_transport(_make_response(200))
        transport._wrapped.aclose = AsyncMock()
        await transport.aclose()
        transport._wrapped.aclose.assert_awaited_once()


class TestRetryHosts:
    @pytest.mark.asyncio()
    async def test_listed_host_is_retried(self) -> None:
        transport = _make_transport(
            [_make_response(503), _make_response(200)],
            retry_hosts={"API.jikan.moe"},
        )
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 200
        assert m.sleep.await_count == 1

    @pytest.mark.asyncio()
    async def test_unlisted_host_returns_first_response(self) -> None:
        transport = _make_transport(
            _make_response(503, headers={"Retry-After": "30"}),
            retry_hosts={"api.jikan.moe"},
        )
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            resp = await transport.handle_async_request(
                _make_request("https://m1.example/stream/a/x/01.mp4/index.m3u8")
            )

        assert resp.status_code == 503
        m.sleep.assert_not_awaited()
        assert transport._wrapped.handle_async_request.call_count == 1

    @pytest.mark.asyncio()
    async def test_empty_host_set_disables_retries(self) -> None:
        transport = _make_transport(_make_response(429), retry_hosts=set())
        with patch(_PATCH_ASYNCIO) as m:
            m.sleep = AsyncMock()
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 429
        m.sleep.assert_not_awaited()


class TestParseRetryAfter:
    def test_seconds(self) -> None:
        assert _parse_retry_after(httpx.Headers({"Retry-After": "3"})) == 3.0

    def test_missing(self) -> None:
        assert _parse_retry_after(httpx.Headers()) is None

    def test_http_date_ignored(self) -> None:
        headers = httpx.Headers({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert _parse_retry_after(headers) is None
