"""Genre-based suggestion use case."""

from __future__ import annotations

import structlog

from aniresolve.domain.entities.anime import Genre, MediaItem
from aniresolve.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)

DEFAULT_LIMIT = 5


class SuggestionBuilder:
    """Bounded list of items sharing a genre, excluding the current item."""

    def __init__(
        self, provider: MetadataProviderPort, limit: int = DEFAULT_LIMIT
    ) -> None:
        self._provider = provider
        self._limit = limit

    async def suggest(
        self,
        genre: Genre | None,
        exclude_id: int | None,
        limit: int | None = None,
    ) -> list[MediaItem]:
        """Fetch page 1 of *genre* and drop *exclude_id*.

        Returns:
            At most ``limit`` items (may be empty on error or no genre).
        """
        if genre is None or not genre.name.strip():
            return []
        limit = self._limit if limit is None else limit

        try:
            items = await self._provider.search_by_genre(
                genre.id, page=1, limit=limit, exclude_id=exclude_id
            )
        except Exception:
            log.warning(
                "suggestions_fetch_error",
                genre=genre.name,
                exclude_id=exclude_id,
                exc_info=True,
            )
            return []

        # The provider may ignore the exclusion parameter.
        return [item for item in items if item.id != exclude_id][:limit]
