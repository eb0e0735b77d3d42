"""Wires adapters and use cases onto ``app.state`` for the app lifetime."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast
from urllib.parse import urlparse

import httpx
import structlog
from fastapi import FastAPI

from aniresolve.application.use_cases import (
    AnimeDetailUseCase,
    CatalogUseCase,
    EpisodeResolver,
    PlaybackUseCase,
    StreamProbe,
    SuggestionBuilder,
)
from aniresolve.infrastructure.anilist.client import AniListClient
from aniresolve.infrastructure.common.rate_limiter import HostRateLimiter
from aniresolve.infrastructure.common.retry_transport import (
    RetryPolicy,
    RetryTransport,
)
from aniresolve.infrastructure.config.schema import AppConfig
from aniresolve.infrastructure.jikan.client import JikanClient
from aniresolve.infrastructure.validation.http_link_validator import (
    HttpLinkValidator,
)
from aniresolve.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared client.

    Provider hosts are rate limited and retried on 429/503. Mirror hosts
    get neither, so a HEAD probe costs at most one request timeout.
    """
    providers = config.providers
    provider_hosts = {
        (urlparse(url).hostname or "").lower()
        for url in (providers.jikan_base_url, providers.anilist_url)
    }
    provider_hosts.discard("")
    rate_limiter = HostRateLimiter(
        default_rps=0.0,
        overrides=dict.fromkeys(provider_hosts, providers.rate_limit_requests_per_second),
    )
    transport = RetryTransport(
        wrapped=httpx.AsyncHTTPTransport(),
        rate_limiter=rate_limiter,
        policy=RetryPolicy(
            max_retries=providers.retry_max_attempts,
            backoff_base=providers.retry_backoff_base,
            max_backoff=providers.retry_max_backoff,
        ),
        retry_hosts=provider_hosts,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


def wire(state: AppState, http_client: httpx.AsyncClient) -> None:
    """Build providers and use cases on *state* around *http_client*."""
    config = state.config
    state.http_client = http_client

    state.metadata = JikanClient(
        http_client=http_client,
        base_url=config.providers.jikan_base_url,
        max_episode_pages=config.providers.jikan_max_episode_pages,
    )
    state.title_lookup = AniListClient(
        http_client=http_client,
        url=config.providers.anilist_url,
    )
    state.link_validator = HttpLinkValidator(
        http_client,
        timeout_seconds=config.stream.probe_timeout_seconds,
        max_concurrent=config.stream.probe_max_concurrent,
    )

    episodes = EpisodeResolver(state.metadata, title_lookup=state.title_lookup)
    suggestions = SuggestionBuilder(state.metadata, limit=config.suggestions_limit)
    probe = StreamProbe(
        title_lookup=state.title_lookup,
        validator=state.link_validator,
        config=config.stream,
    )

    state.anime_detail_uc = AnimeDetailUseCase(state.metadata, episodes, suggestions)
    state.playback_uc = PlaybackUseCase(probe)
    state.catalog_uc = CatalogUseCase(state.metadata)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared HTTP client, wire everything around it, close it on exit."""
    state = cast(AppState, app.state)
    config = state.config

    http_client = build_http_client(config)
    log.info(
        "http_client_initialized",
        rate_limit_rps=config.providers.rate_limit_requests_per_second,
        retry_max_attempts=config.providers.retry_max_attempts,
    )

    wire(state, http_client)
    log.info(
        "app_startup_complete",
        mirrors=len(config.stream.mirror_templates),
        concurrent_probe=config.stream.concurrent_probe,
    )

    try:
        yield
    finally:
        await http_client.aclose()
        log.info("app_shutdown_complete")
