"""Episode resolution use case.

Direct provider lookup -> alias search on the primary provider
-> alias lookup on the secondary provider -> empty list.
"""

from __future__ import annotations

import structlog

from aniresolve.application.cascade import Found, Outcome, TryNext, run_cascade
from aniresolve.domain.entities.anime import Episode, EpisodeList, MediaItem
from aniresolve.domain.entities.errors import ProviderError
from aniresolve.domain.ports.metadata import MetadataProviderPort, TitleLookupPort
from aniresolve.domain.titles import aliases

log = structlog.get_logger(__name__)


def episodes_from_count(count: int) -> EpisodeList:
    """Ordinal sequence ``1..count`` with no provider ids."""
    return tuple(Episode(number=n) for n in range(1, count + 1))


class EpisodeResolver:
    """Obtains an episode list for a media item, never raising.

    The search fallback only learns an episode *count*, so the resulting
    episodes carry ordinals but no provider ids or titles.
    """

    def __init__(
        self,
        provider: MetadataProviderPort,
        title_lookup: TitleLookupPort | None = None,
    ) -> None:
        self._provider = provider
        self._title_lookup = title_lookup

    async def resolve(self, item: MediaItem) -> EpisodeList:
        """Resolve *item*'s episodes; returns ``()`` when every source fails."""
        direct = await self._direct(item)
        if direct:
            return direct

        titles = aliases(item)

        async def search_primary(alias: str) -> Outcome[EpisodeList]:
            results = await self._provider.search_media(alias, limit=1)
            if not results:
                return TryNext("no search result")
            count = results[0].episodes or 0
            if count <= 0:
                return TryNext(f"match {results[0].id} reports no episodes")
            return Found(episodes_from_count(count))

        result = await run_cascade(titles, search_primary, name="episodes_primary")
        if isinstance(result, Found):
            log.info(
                "episodes_resolved_by_alias",
                media_id=item.id,
                count=len(result.value),
            )
            return result.value

        if self._title_lookup is not None:
            lookup = self._title_lookup

            async def search_secondary(alias: str) -> Outcome[EpisodeList]:
                variants = await lookup.get_media_by_title(alias)
                count = variants.episodes or 0
                if count <= 0:
                    return TryNext("no episode count")
                return Found(episodes_from_count(count))

            result = await run_cascade(
                titles, search_secondary, name="episodes_secondary"
            )
            if isinstance(result, Found):
                log.info(
                    "episodes_resolved_by_secondary",
                    media_id=item.id,
                    count=len(result.value),
                )
                return result.value

        log.info("episodes_unavailable", media_id=item.id, aliases=len(titles))
        return ()

    async def _direct(self, item: MediaItem) -> EpisodeList:
        try:
            episodes = await self._provider.get_episodes(item.id)
        except ProviderError as exc:
            log.warning(
                "episodes_direct_lookup_failed",
                media_id=item.id,
                error=repr(exc),
            )
            return ()
        except Exception:  # noqa: BLE001
            log.warning(
                "episodes_direct_lookup_error", media_id=item.id, exc_info=True
            )
            return ()
        if not episodes:
            log.debug("episodes_direct_lookup_empty", media_id=item.id)
        return episodes
