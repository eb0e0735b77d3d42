"""Catalog use case: season listing, search, letter and genre browsing."""

from __future__ import annotations

import structlog

from aniresolve.domain.entities.anime import CatalogPage, Genre
from aniresolve.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)


class CatalogUseCase:
    """Data side of the catalog screen, backed by the primary provider.

    Provider errors propagate; the presentation layer renders them.
    """

    def __init__(self, provider: MetadataProviderPort) -> None:
        self._provider = provider

    async def season_now(self, page: int = 1) -> CatalogPage:
        return await self._provider.season_now(page=page)

    async def search(self, query: str, page: int = 1) -> CatalogPage:
        """Search by free text. A blank query yields an empty page."""
        if not query.strip():
            return CatalogPage(page=page)
        return await self._provider.search_page(query.strip(), page=page)

    async def by_letter(self, letter: str, page: int = 1) -> CatalogPage:
        """Browse by initial letter (a plain search for the letter)."""
        if len(letter) != 1 or not letter.isalnum():
            raise ValueError(f"expected a single letter, got {letter!r}")
        return await self._provider.search_page(letter.upper(), page=page)

    async def by_genre(self, genre_id: int, page: int = 1) -> CatalogPage:
        return await self._provider.genre_page(genre_id, page=page)

    async def genres(self) -> tuple[Genre, ...]:
        genres = await self._provider.get_genres()
        log.debug("catalog_genres_loaded", count=len(genres))
        return genres
