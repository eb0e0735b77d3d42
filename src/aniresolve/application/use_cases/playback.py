"""Playback use case: stream URL plus previous/next episode links."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from aniresolve.application.use_cases.stream import StreamProbe
from aniresolve.domain.entities.anime import ResolvedStream
from aniresolve.domain.titles import slugify

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlaybackView:
    """What the player page needs for one episode."""

    title_slug: str
    episode: int
    stream: ResolvedStream
    episode_count: int | None = None
    previous_episode: int | None = None
    next_episode: int | None = None


class PlaybackUseCase:
    """Resolves the stream for an episode and its neighbours."""

    def __init__(self, probe: StreamProbe) -> None:
        self._probe = probe

    async def load(self, title: str, episode: int) -> PlaybackView:
        if episode < 1:
            raise ValueError(f"episode ordinal must be >= 1, got {episode}")
        variants = await self._probe.variants(title)
        stream = await self._probe.resolve(title, episode, variants=variants)

        count = variants.episodes if variants is not None else None
        previous_episode = episode - 1 if episode > 1 else None
        next_episode = None
        if count is not None and episode + 1 <= count:
            next_episode = episode + 1

        log.debug(
            "playback_loaded",
            title=title,
            episode=episode,
            episode_count=count,
            verified=stream.verified,
        )
        return PlaybackView(
            title_slug=slugify(title),
            episode=episode,
            stream=stream,
            episode_count=count,
            previous_episode=previous_episode,
            next_episode=next_episode,
        )
