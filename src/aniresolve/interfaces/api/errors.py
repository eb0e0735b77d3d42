"""Map provider errors raised by top-level fetches to HTTP responses."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aniresolve.domain.entities.errors import (
    MalformedResponseError,
    NotFoundError,
    TransportError,
)

log = structlog.get_logger(__name__)


def error_response(message: str, *, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    log.info("provider_not_found", path=request.url.path, detail=str(exc))
    return error_response("Not found", status_code=404)


async def _transport(request: Request, exc: Exception) -> JSONResponse:
    log.warning("provider_unavailable", path=request.url.path, detail=str(exc))
    return error_response("Metadata provider unavailable", status_code=502)


async def _malformed(request: Request, exc: Exception) -> JSONResponse:
    log.warning("provider_malformed_response", path=request.url.path, detail=str(exc))
    return error_response("Metadata provider returned an invalid response", status_code=502)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(TransportError, _transport)
    app.add_exception_handler(MalformedResponseError, _malformed)
