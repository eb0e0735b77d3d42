"""Anime detail endpoints (metadata, episodes, next season, suggestions)."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from aniresolve.interfaces.api.presenter import (
    detail_json,
    episodes_json,
    media_preview_json,
    sequel_json,
)
from aniresolve.interfaces.app_state import AppState

router = APIRouter(prefix="/anime", tags=["anime"])


def _state(request: Request) -> AppState:
    return cast(AppState, request.app.state)


@router.get("/{anime_id}")
async def anime_detail(request: Request, anime_id: int) -> JSONResponse:
    """Full detail view: metadata, resolved episodes, sequel, suggestions."""
    detail = await _state(request).anime_detail_uc.load(anime_id)
    return JSONResponse(content=detail_json(detail))


@router.get("/{anime_id}/episodes")
async def anime_episodes(request: Request, anime_id: int) -> JSONResponse:
    """Episode list; ``count == 0`` means "No episodes available"."""
    episodes = await _state(request).anime_detail_uc.episodes(anime_id)
    return JSONResponse(content=episodes_json(episodes))


@router.get("/{anime_id}/sequel")
async def anime_sequel(request: Request, anime_id: int) -> JSONResponse:
    """Immediate sequel (``next_season`` is null when there is none)."""
    sequel = await _state(request).anime_detail_uc.sequel(anime_id)
    return JSONResponse(content={"next_season": sequel_json(sequel)})


@router.get("/{anime_id}/suggestions")
async def anime_suggestions(request: Request, anime_id: int) -> JSONResponse:
    """Up to five titles sharing the item's first genre."""
    items = await _state(request).anime_detail_uc.suggestions(anime_id)
    return JSONResponse(
        content={"suggestions": [media_preview_json(i) for i in items]}
    )
