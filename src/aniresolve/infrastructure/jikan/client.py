"""Jikan v4 (MyAnimeList) client: async httpx implementation."""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from aniresolve.domain.entities.anime import (
    CatalogPage,
    Episode,
    EpisodeList,
    Genre,
    MediaItem,
    Relation,
)
from aniresolve.domain.entities.errors import (
    MalformedResponseError,
    NotFoundError,
    TransportError,
)
from aniresolve.infrastructure.jikan.models import (
    JikanAnime,
    JikanEpisodeEnvelope,
    JikanGenreEnvelope,
    JikanItemEnvelope,
    JikanListEnvelope,
)

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.jikan.moe/v4"

M = TypeVar("M", bound=BaseModel)


class JikanClient:
    """Async Jikan client using a shared httpx client.

    Implements ``MetadataProviderPort`` from domain.ports.metadata.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = _BASE_URL,
        max_episode_pages: int = 10,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._max_episode_pages = max_episode_pages

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str, **params: Any) -> Any:
        """GET *path* and return decoded JSON, raising typed provider errors."""
        url = f"{self._base_url}{path}"
        query = {k: v for k, v in params.items() if v is not None}
        try:
            resp = await self._http.get(url, params=query)
        except httpx.TimeoutException as exc:
            log.warning("jikan_timeout", path=path)
            raise TransportError(f"timeout fetching {path}") from exc
        except httpx.HTTPError as exc:
            log.warning("jikan_network_error", path=path, error=str(exc))
            raise TransportError(f"network error fetching {path}: {exc}") from exc

        if resp.status_code == 404:
            log.debug("jikan_resource_not_found", path=path)
            raise NotFoundError(path)
        if resp.status_code >= 400:
            log.warning("jikan_http_error", path=path, status=resp.status_code)
            raise TransportError(f"{path} returned HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"{path}: response is not JSON") from exc

    @staticmethod
    def _parse(model: type[M], payload: Any, *, path: str) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            log.warning("jikan_malformed_payload", path=path, errors=exc.error_count())
            raise MalformedResponseError(f"{path}: {exc}") from exc

    @staticmethod
    def _to_media(anime: JikanAnime) -> MediaItem:
        relations = tuple(
            Relation(target_id=entry.mal_id, kind=group.relation, target_title=entry.name)
            for group in anime.relations
            for entry in group.entry
            if entry.type == "anime"
        )
        return MediaItem(
            id=anime.mal_id,
            title=anime.title,
            title_english=anime.title_english,
            title_japanese=anime.title_japanese,
            title_synonyms=tuple(anime.title_synonyms),
            genres=tuple(Genre(id=g.mal_id, name=g.name) for g in anime.genres),
            synopsis=anime.synopsis or "",
            image_url=anime.images.jpg.large_image_url
            or anime.images.jpg.image_url
            or "",
            relations=relations,
            episodes=anime.episodes,
            url=anime.url,
        )

    def _to_media_list(self, envelope: JikanListEnvelope, *, path: str) -> list[MediaItem]:
        items: list[MediaItem] = []
        for raw in envelope.data:
            try:
                items.append(self._to_media(JikanAnime.model_validate(raw)))
            except ValidationError:
                log.warning(
                    "jikan_item_skipped",
                    path=path,
                    mal_id=raw.get("mal_id") if isinstance(raw, dict) else None,
                )
        return items

    async def _list_page(self, path: str, **params: Any) -> CatalogPage:
        payload = await self._get(path, **params)
        envelope = self._parse(JikanListEnvelope, payload, path=path)
        return CatalogPage(
            items=self._to_media_list(envelope, path=path),
            page=envelope.pagination.current_page or params.get("page") or 1,
            has_next_page=envelope.pagination.has_next_page,
        )

    # ------------------------------------------------------------------
    # Public API (MetadataProviderPort)
    # ------------------------------------------------------------------

    async def get_media(self, media_id: int) -> MediaItem:
        """Full metadata (including relations) for one anime."""
        path = f"/anime/{media_id}/full"
        payload = await self._get(path)
        envelope = self._parse(JikanItemEnvelope, payload, path=path)
        return self._to_media(envelope.data)

    async def search_media(self, query: str, limit: int = 1) -> list[MediaItem]:
        """Free-text search; an empty list when nothing matches."""
        path = "/anime"
        payload = await self._get(path, q=query, limit=limit)
        envelope = self._parse(JikanListEnvelope, payload, path=path)
        return self._to_media_list(envelope, path=path)[:limit]

    async def get_episodes(self, media_id: int) -> EpisodeList:
        """All episode pages, renumbered 1..n in provider order."""
        path = f"/anime/{media_id}/episodes"
        raw: list[Any] = []
        for page in range(1, self._max_episode_pages + 1):
            payload = await self._get(path, page=page)
            envelope = self._parse(JikanEpisodeEnvelope, payload, path=path)
            raw.extend(envelope.data)
            if not envelope.pagination.has_next_page:
                break
        else:
            log.info(
                "jikan_episode_pages_truncated",
                media_id=media_id,
                max_pages=self._max_episode_pages,
            )

        return tuple(
            Episode(number=index, provider_id=ep.mal_id, title=ep.title or "")
            for index, ep in enumerate(raw, start=1)
        )

    async def get_genres(self) -> tuple[Genre, ...]:
        path = "/genres/anime"
        payload = await self._get(path)
        envelope = self._parse(JikanGenreEnvelope, payload, path=path)
        return tuple(Genre(id=g.mal_id, name=g.name) for g in envelope.data)

    async def search_by_genre(
        self,
        genre_id: int,
        page: int = 1,
        limit: int = 5,
        exclude_id: int | None = None,
    ) -> list[MediaItem]:
        """Items in *genre_id*; *exclude_id* is filtered client-side."""
        path = "/anime"
        # Ask for one extra so the excluded item does not shrink the result.
        fetch_limit = limit + 1 if exclude_id is not None else limit
        payload = await self._get(path, genres=genre_id, page=page, limit=fetch_limit)
        envelope = self._parse(JikanListEnvelope, payload, path=path)
        items = [
            item
            for item in self._to_media_list(envelope, path=path)
            if item.id != exclude_id
        ]
        return items[:limit]

    async def season_now(self, page: int = 1) -> CatalogPage:
        return await self._list_page("/seasons/now", page=page)

    async def search_page(self, query: str, page: int = 1) -> CatalogPage:
        return await self._list_page("/anime", q=query, page=page)

    async def genre_page(self, genre_id: int, page: int = 1) -> CatalogPage:
        return await self._list_page("/anime", genres=genre_id, page=page)
