"""Catalog endpoints: current season, search, letter and genre browsing."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from aniresolve.interfaces.api.errors import error_response
from aniresolve.interfaces.api.presenter import catalog_json, genre_json
from aniresolve.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _state(request: Request) -> AppState:
    return cast(AppState, request.app.state)


@router.get("/season-now")
async def season_now(request: Request, page: int = Query(1, ge=1)) -> JSONResponse:
    result = await _state(request).catalog_uc.season_now(page=page)
    return JSONResponse(content=catalog_json(result))


@router.get("/search")
async def search(
    request: Request,
    q: str = "",
    page: int = Query(1, ge=1),
) -> JSONResponse:
    result = await _state(request).catalog_uc.search(q, page=page)
    return JSONResponse(content=catalog_json(result))


@router.get("/letter/{letter}")
async def by_letter(
    request: Request, letter: str, page: int = Query(1, ge=1)
) -> JSONResponse:
    try:
        result = await _state(request).catalog_uc.by_letter(letter, page=page)
    except ValueError as exc:
        log.info("catalog_invalid_letter", letter=letter)
        return error_response(str(exc), status_code=422)
    return JSONResponse(content=catalog_json(result))


@router.get("/genres")
async def genres(request: Request) -> JSONResponse:
    result = await _state(request).catalog_uc.genres()
    return JSONResponse(content={"genres": [genre_json(g) for g in result]})


@router.get("/genre/{genre_id}")
async def by_genre(
    request: Request, genre_id: int, page: int = Query(1, ge=1)
) -> JSONResponse:
    result = await _state(request).catalog_uc.by_genre(genre_id, page=page)
    return JSONResponse(content=catalog_json(result))
