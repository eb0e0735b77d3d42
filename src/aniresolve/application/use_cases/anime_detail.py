"""Anime detail use case: metadata, episodes, sequel and suggestions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import structlog

from aniresolve.application.use_cases.episodes import EpisodeResolver
from aniresolve.application.use_cases.suggestions import SuggestionBuilder
from aniresolve.domain.entities.anime import EpisodeList, MediaItem, Relation
from aniresolve.domain.ports.metadata import MetadataProviderPort
from aniresolve.domain.titles import next_season

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AnimeDetail:
    """Everything the detail view renders for one item."""

    media: MediaItem
    episodes: EpisodeList = ()
    sequel: Relation | None = None
    suggestions: list[MediaItem] = field(default_factory=list)


class AnimeDetailUseCase:
    """Loads one media item and the data derived from it.

    Errors from the top-level metadata fetch propagate to the caller;
    the episode and suggestion flows degrade to empty results instead.
    """

    def __init__(
        self,
        provider: MetadataProviderPort,
        episodes: EpisodeResolver,
        suggestions: SuggestionBuilder,
    ) -> None:
        self._provider = provider
        self._episodes = episodes
        self._suggestions = suggestions

    async def media(self, anime_id: int) -> MediaItem:
        return await self._provider.get_media(anime_id)

    async def load(self, anime_id: int) -> AnimeDetail:
        media = await self._provider.get_media(anime_id)
        genre = media.genres[0] if media.genres else None

        episodes, suggestions = await asyncio.gather(
            self._episodes.resolve(media),
            self._suggestions.suggest(genre, exclude_id=media.id),
        )
        sequel = next_season(media)

        log.info(
            "anime_detail_loaded",
            anime_id=anime_id,
            episodes=len(episodes),
            has_sequel=sequel is not None,
            suggestions=len(suggestions),
        )
        return AnimeDetail(
            media=media,
            episodes=episodes,
            sequel=sequel,
            suggestions=suggestions,
        )

    async def episodes(self, anime_id: int) -> EpisodeList:
        media = await self._provider.get_media(anime_id)
        return await self._episodes.resolve(media)

    async def sequel(self, anime_id: int) -> Relation | None:
        media = await self._provider.get_media(anime_id)
        return next_season(media)

    async def suggestions(self, anime_id: int) -> list[MediaItem]:
        media = await self._provider.get_media(anime_id)
        genre = media.genres[0] if media.genres else None
        return await self._suggestions.suggest(genre, exclude_id=media.id)
