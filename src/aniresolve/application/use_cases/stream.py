"""Stream URL resolution use case.

Title -> secondary provider title variants -> alias slug
-> ordered mirror candidates -> HEAD probe cascade -> ResolvedStream.
"""

from __future__ import annotations

import asyncio
from typing import Protocol
from urllib.parse import urlparse

import structlog

from aniresolve.application.cascade import Found, Outcome, TryNext, run_cascade
from aniresolve.domain.entities.anime import (
    AliasList,
    ResolvedStream,
    StreamCandidate,
    TitleVariants,
)
from aniresolve.domain.ports.link_validator import LinkValidatorPort
from aniresolve.domain.ports.metadata import TitleLookupPort
from aniresolve.domain.titles import aliases_from_titles, pad_episode, slugify

log = structlog.get_logger(__name__)


class _StreamConfig(Protocol):
    """Configuration values consumed by StreamProbe."""

    mirror_templates: list[str]
    concurrent_probe: bool


def stream_aliases(title: str, variants: TitleVariants | None) -> AliasList:
    """Alias list for the playback context.

    Secondary-provider variants come first (romaji, english, native,
    user-preferred); the requested title is kept as a final fallback.
    """
    if variants is None:
        return aliases_from_titles((title,))
    return aliases_from_titles(
        (
            variants.romaji,
            variants.english,
            variants.native,
            variants.user_preferred,
            title,
        )
    )


def first_slug(titles: AliasList) -> str:
    """Slug of the first alias that produces a non-empty one."""
    for title in titles:
        slug = slugify(title)
        if slug:
            return slug
    return ""


def build_candidates(
    templates: list[str], slug: str, episode: int
) -> list[StreamCandidate]:
    """Format every mirror template for *slug* and *episode*, in order."""
    padded = pad_episode(episode)
    candidates: list[StreamCandidate] = []
    for template in templates:
        url = template.format(initial=slug[0], slug=slug, episode=padded)
        candidates.append(
            StreamCandidate(url=url, mirror=urlparse(url).hostname or "")
        )
    return candidates


class StreamProbe:
    """Resolves a playable stream URL for ``(title, episode)``.

    Always returns a URL. When no mirror answers the probe, the last
    mirror's URL is returned with ``verified=False``.
    """

    def __init__(
        self,
        *,
        title_lookup: TitleLookupPort,
        validator: LinkValidatorPort,
        config: _StreamConfig,
    ) -> None:
        if not config.mirror_templates:
            raise ValueError("at least one mirror template is required")
        self._title_lookup = title_lookup
        self._validator = validator
        self._config = config

    async def variants(self, title: str) -> TitleVariants | None:
        """Title variants from the secondary provider, None on any failure."""
        try:
            return await self._title_lookup.get_media_by_title(title)
        except Exception as exc:  # noqa: BLE001
            log.warning("stream_title_lookup_failed", title=title, error=repr(exc))
            return None

    async def resolve(
        self,
        title: str,
        episode: int,
        *,
        variants: TitleVariants | None = None,
    ) -> ResolvedStream:
        """Probe mirrors in priority order and return the first live one.

        Args:
            title: Title as it appears in the navigation link.
            episode: 1-based episode ordinal.
            variants: Pre-fetched title variants; fetched when omitted.

        Raises:
            ValueError: On a blank title or an ordinal below 1.
        """
        if not title.strip():
            raise ValueError("title must not be blank")
        pad_episode(episode)

        if variants is None:
            variants = await self.variants(title)

        slug = first_slug(stream_aliases(title, variants))
        candidates = build_candidates(self._config.mirror_templates, slug, episode)

        if self._config.concurrent_probe:
            live = await self._probe_concurrently(candidates)
        else:
            live = await self._probe_sequentially(candidates)

        if live is not None:
            log.info(
                "stream_resolved",
                title=title,
                episode=episode,
                mirror=live.mirror,
            )
            return ResolvedStream(url=live.url, mirror=live.mirror, verified=True)

        fallback = candidates[-1]
        log.warning(
            "stream_unverified_fallback",
            title=title,
            episode=episode,
            mirror=fallback.mirror,
            tried=len(candidates),
        )
        return ResolvedStream(url=fallback.url, mirror=fallback.mirror, verified=False)

    async def _probe_sequentially(
        self, candidates: list[StreamCandidate]
    ) -> StreamCandidate | None:
        async def probe(candidate: StreamCandidate) -> Outcome[StreamCandidate]:
            if await self._validator.validate(candidate.url):
                return Found(candidate)
            return TryNext("unreachable")

        result = await run_cascade(candidates, probe, name="stream_mirrors")
        return result.value if isinstance(result, Found) else None

    async def _probe_concurrently(
        self, candidates: list[StreamCandidate]
    ) -> StreamCandidate | None:
        # Lowest-index live mirror wins regardless of arrival order.
        results = await asyncio.gather(
            *(self._validator.validate(c.url) for c in candidates),
            return_exceptions=True,
        )
        for candidate, ok in zip(candidates, results):
            if ok is True:
                return candidate
            if isinstance(ok, BaseException):
                log.warning(
                    "stream_probe_failed", mirror=candidate.mirror, error=repr(ok)
                )
        return None
