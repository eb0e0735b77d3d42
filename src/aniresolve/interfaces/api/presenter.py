"""JSON presentation of domain entities and use case results."""

from __future__ import annotations

from typing import Any

from aniresolve.application.use_cases.anime_detail import AnimeDetail
from aniresolve.application.use_cases.playback import PlaybackView
from aniresolve.domain.entities.anime import (
    CatalogPage,
    Episode,
    Genre,
    MediaItem,
    Relation,
    ResolvedStream,
)


def genre_json(genre: Genre) -> dict[str, Any]:
    return {"id": genre.id, "name": genre.name}


def media_preview_json(item: MediaItem) -> dict[str, Any]:
    """Compact form used in lists (catalog, suggestions)."""
    return {
        "id": item.id,
        "title": item.title,
        "image_url": item.image_url,
        "episodes": item.episodes,
    }


def media_json(item: MediaItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "title_english": item.title_english,
        "title_japanese": item.title_japanese,
        "title_synonyms": list(item.title_synonyms),
        "synopsis": item.synopsis,
        "image_url": item.image_url,
        "genres": [genre_json(g) for g in item.genres],
        "episodes": item.episodes,
        "url": item.url,
    }


def episode_json(episode: Episode) -> dict[str, Any]:
    return {
        "number": episode.number,
        "provider_id": episode.provider_id,
        "title": episode.title,
    }


def sequel_json(relation: Relation | None) -> dict[str, Any] | None:
    if relation is None:
        return None
    return {"id": relation.target_id, "title": relation.target_title}


def episodes_json(episodes: tuple[Episode, ...]) -> dict[str, Any]:
    return {
        "count": len(episodes),
        "episodes": [episode_json(e) for e in episodes],
    }


def detail_json(detail: AnimeDetail) -> dict[str, Any]:
    return {
        "anime": media_json(detail.media),
        **episodes_json(detail.episodes),
        "next_season": sequel_json(detail.sequel),
        "suggestions": [media_preview_json(s) for s in detail.suggestions],
    }


def stream_json(stream: ResolvedStream) -> dict[str, Any]:
    return {"url": stream.url, "mirror": stream.mirror, "verified": stream.verified}


def playback_json(view: PlaybackView) -> dict[str, Any]:
    def link(n: int | None) -> str | None:
        if n is None:
            return None
        return f"/api/v1/watch/{view.title_slug}/episode/{n}"

    return {
        "episode": view.episode,
        "episode_count": view.episode_count,
        "stream": stream_json(view.stream),
        "previous": link(view.previous_episode),
        "next": link(view.next_episode),
    }


def catalog_json(page: CatalogPage) -> dict[str, Any]:
    return {
        "page": page.page,
        "has_next_page": page.has_next_page,
        "items": [media_preview_json(i) for i in page.items],
    }
