"""Shared test fixtures for aniresolve test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from unittest.mock import AsyncMock

import pytest

from aniresolve.domain.entities.anime import (
    Genre,
    MediaItem,
    Relation,
    TitleVariants,
)

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def media_item() -> MediaItem:
    """Season 1 of a long-running show with synonyms and relations."""
    return MediaItem(
        id=16498,
        title="Shingeki no Kyojin",
        title_english="Attack on Titan",
        title_japanese="進撃の巨人",
        title_synonyms=("AoT", "SnK"),
        genres=(Genre(id=1, name="Action"), Genre(id=8, name="Drama")),
        synopsis="Centuries ago, mankind was slaughtered to near extinction...",
        image_url="https://cdn.myanimelist.net/images/anime/10/47347l.jpg",
        relations=(
            Relation(target_id=25777, kind="Sequel", target_title="Shingeki no Kyojin Season 2"),
            Relation(target_id=18397, kind="Side Story", target_title="Shingeki no Kyojin OVA"),
        ),
        episodes=25,
        url="https://myanimelist.net/anime/16498/Shingeki_no_Kyojin",
    )


@pytest.fixture()
def title_variants() -> TitleVariants:
    return TitleVariants(
        romaji="Shingeki no Kyojin",
        english="Attack on Titan",
        native="進撃の巨人",
        user_preferred="Shingeki no Kyojin",
        episodes=25,
    )


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_metadata() -> AsyncMock:
    """Mock MetadataProviderPort."""
    provider = AsyncMock()
    provider.get_media = AsyncMock()
    provider.search_media = AsyncMock(return_value=[])
    provider.get_episodes = AsyncMock(return_value=())
    provider.get_genres = AsyncMock(return_value=())
    provider.search_by_genre = AsyncMock(return_value=[])
    provider.season_now = AsyncMock()
    provider.search_page = AsyncMock()
    provider.genre_page = AsyncMock()
    return provider


@pytest.fixture()
def mock_title_lookup(title_variants: TitleVariants) -> AsyncMock:
    """Mock TitleLookupPort."""
    lookup = AsyncMock()
    lookup.get_media_by_title = AsyncMock(return_value=title_variants)
    return lookup


@dataclass
class FakeValidator:
    """LinkValidatorPort stub answering from a fixed set of live URLs."""

    live: set[str] = field(default_factory=set)
    checked: list[str] = field(default_factory=list)

    async def validate(self, url: str) -> bool:
        self.checked.append(url)
        return url in self.live

    async def validate_batch(self, urls: list[str]) -> dict[str, bool]:
        return {u: await self.validate(u) for u in urls}


@pytest.fixture()
def fake_validator() -> FakeValidator:
    return FakeValidator()


@dataclass
class FakeStreamConfig:
    mirror_templates: list[str] = field(
        default_factory=lambda: [
            "https://m1.example/stream/{initial}/{slug}/{episode}.mp4/index.m3u8",
            "https://m2.example/stream/{initial}/{slug}/{episode}.mp4/index.m3u8",
        ]
    )
    concurrent_probe: bool = False


@pytest.fixture()
def stream_config() -> FakeStreamConfig:
    return FakeStreamConfig()
