"""Domain entities for anime metadata, episodes and streams.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field

AliasList = tuple[str, ...]


@dataclass(frozen=True)
class Genre:
    """Provider genre (id + display name)."""

    id: int
    name: str


@dataclass(frozen=True)
class Relation:
    """Edge in a media item's relation graph."""

    target_id: int
    kind: str  # "Sequel", "Prequel", "Side Story", ...
    target_title: str = ""


@dataclass(frozen=True)
class MediaItem:
    """A single anime entry as reported by the primary provider.

    Replaced wholesale on refetch, never mutated.
    """

    id: int
    title: str
    title_english: str | None = None
    title_japanese: str | None = None
    title_synonyms: tuple[str, ...] = ()
    genres: tuple[Genre, ...] = ()
    synopsis: str = ""
    image_url: str = ""
    relations: tuple[Relation, ...] = ()
    episodes: int | None = None  # count reported by the provider
    url: str = ""


@dataclass(frozen=True)
class Episode:
    """One episode of a media item (1-based, contiguous ordinal)."""

    number: int
    provider_id: int | None = None
    title: str = ""


EpisodeList = tuple[Episode, ...]


@dataclass(frozen=True)
class TitleVariants:
    """Title forms and episode count from the secondary provider."""

    romaji: str | None = None
    english: str | None = None
    native: str | None = None
    user_preferred: str | None = None
    episodes: int | None = None


@dataclass(frozen=True)
class StreamCandidate:
    """A fully built stream URL on one mirror. Never persisted."""

    url: str
    mirror: str


@dataclass(frozen=True)
class ResolvedStream:
    """Outcome of the mirror cascade.

    ``verified`` is False when every probe failed and ``url`` is the
    last-resort candidate handed to the player unchecked.
    """

    url: str
    mirror: str
    verified: bool


@dataclass(frozen=True)
class CatalogPage:
    """One page of catalog results."""

    items: list[MediaItem] = field(default_factory=list)
    page: int = 1
    has_next_page: bool = False
