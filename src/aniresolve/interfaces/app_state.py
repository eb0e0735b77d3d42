"""Typed view of ``app.state`` as populated by the lifespan."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from aniresolve.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from aniresolve.application.use_cases import (
        AnimeDetailUseCase,
        CatalogUseCase,
        PlaybackUseCase,
    )
    from aniresolve.domain.ports import (
        LinkValidatorPort,
        MetadataProviderPort,
        TitleLookupPort,
    )


class AppState(State):
    """``config`` is set by ``create_app``; everything else by ``wire``."""

    config: AppConfig
    http_client: httpx.AsyncClient

    # provider adapters
    metadata: MetadataProviderPort
    title_lookup: TitleLookupPort
    link_validator: LinkValidatorPort

    # what the routers call
    anime_detail_uc: AnimeDetailUseCase
    playback_uc: PlaybackUseCase
    catalog_uc: CatalogUseCase
