"""Ports for the primary and secondary anime metadata providers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from aniresolve.domain.entities.anime import (
    CatalogPage,
    EpisodeList,
    Genre,
    MediaItem,
    TitleVariants,
)


@runtime_checkable
class MetadataProviderPort(Protocol):
    """Async interface for the primary (catalog) provider.

    Every method may raise ``TransportError``, ``NotFoundError`` or
    ``MalformedResponseError``. All calls are idempotent reads.
    """

    async def get_media(self, media_id: int) -> MediaItem:
        """Fetch full metadata for one item."""
        ...

    async def search_media(self, query: str, limit: int = 1) -> list[MediaItem]:
        """Free-text search, best match first."""
        ...

    async def get_episodes(self, media_id: int) -> EpisodeList:
        """Fetch the provider's episode list for an item."""
        ...

    async def get_genres(self) -> tuple[Genre, ...]:
        """List all anime genres."""
        ...

    async def search_by_genre(
        self,
        genre_id: int,
        page: int = 1,
        limit: int = 5,
        exclude_id: int | None = None,
    ) -> list[MediaItem]:
        """Items tagged with *genre_id*, optionally excluding one id."""
        ...

    async def season_now(self, page: int = 1) -> CatalogPage:
        """Currently airing season."""
        ...

    async def search_page(self, query: str, page: int = 1) -> CatalogPage:
        """Paged free-text search for the catalog screen."""
        ...

    async def genre_page(self, genre_id: int, page: int = 1) -> CatalogPage:
        """Paged genre listing for the catalog screen."""
        ...


@runtime_checkable
class TitleLookupPort(Protocol):
    """Async interface for the secondary (structured query) provider."""

    async def get_media_by_title(self, title: str) -> TitleVariants:
        """Resolve a free-form title to its variants and episode count."""
        ...
