"""Playback endpoint: resolves a stream URL for ``(title, episode)``."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from aniresolve.interfaces.api.errors import error_response
from aniresolve.interfaces.api.presenter import playback_json
from aniresolve.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/watch", tags=["watch"])


@router.get("/{title:path}/episode/{episode}")
async def watch_episode(request: Request, title: str, episode: int) -> JSONResponse:
    """Stream URL for one episode plus previous/next navigation links.

    ``stream.verified`` is false when no mirror answered the probe and the
    URL is the last-resort candidate.
    """
    state = cast(AppState, request.app.state)
    try:
        view = await state.playback_uc.load(title, episode)
    except ValueError as exc:
        log.info("watch_invalid_request", title=title, episode=episode)
        return error_response(str(exc), status_code=422)
    return JSONResponse(content=playback_json(view))
