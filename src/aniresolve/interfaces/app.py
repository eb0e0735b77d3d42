"""Builds the FastAPI application around an already-loaded ``AppConfig``."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from aniresolve.infrastructure.config import AppConfig
from aniresolve.interfaces.api.anime.router import router as anime_router
from aniresolve.interfaces.api.catalog.router import router as catalog_router
from aniresolve.interfaces.api.errors import register_error_handlers
from aniresolve.interfaces.api.watch.router import router as watch_router
from aniresolve.interfaces.app_state import AppState
from aniresolve.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


async def _access_log(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        log.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            query=request.url.query or None,
            status_code=status_code,
            duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
            client_host=request.client.host if request.client else None,
        )


def create_app(config: AppConfig) -> FastAPI:
    """Return a configured app. Nothing is opened until the lifespan runs."""
    app = FastAPI(
        title="aniresolve",
        description="Anime metadata, episode and stream resolution service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state = AppState()
    app.state.config = config

    register_error_handlers(app)
    for router in (anime_router, catalog_router, watch_router):
        app.include_router(router, prefix=API_PREFIX)

    mirror_count = len(config.stream.mirror_templates)

    @app.get(f"{API_PREFIX}/healthz")
    async def healthz() -> dict[str, str | int]:
        return {"status": "ok", "mirrors": mirror_count}

    app.middleware("http")(_access_log)
    return app
