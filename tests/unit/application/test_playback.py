"""Tests for PlaybackUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from aniresolve.application.use_cases.playback import PlaybackUseCase
from aniresolve.application.use_cases.stream import StreamProbe
from aniresolve.domain.entities.errors import NotFoundError


@pytest.fixture()
def use_case(mock_title_lookup, fake_validator, stream_config) -> PlaybackUseCase:
    probe = StreamProbe(
        title_lookup=mock_title_lookup, validator=fake_validator, config=stream_config
    )
    return PlaybackUseCase(probe)


class TestPlayback:
    async def test_middle_episode_has_both_neighbours(
        self, use_case: PlaybackUseCase
    ) -> None:
        view = await use_case.load("Attack on Titan", 5)

        assert view.title_slug == "attack-on-titan"
        assert view.episode == 5
        assert view.episode_count == 25
        assert view.previous_episode == 4
        assert view.next_episode == 6
        assert view.stream.url.endswith("/05.mp4/index.m3u8")

    async def test_first_episode_has_no_previous(self, use_case: PlaybackUseCase) -> None:
        view = await use_case.load("Attack on Titan", 1)

        assert view.previous_episode is None
        assert view.next_episode == 2

    async def test_last_episode_has_no_next(self, use_case: PlaybackUseCase) -> None:
        view = await use_case.load("Attack on Titan", 25)

        assert view.next_episode is None
        assert view.previous_episode == 24

    async def test_unknown_count_hides_next(
        self, use_case: PlaybackUseCase, mock_title_lookup: AsyncMock
    ) -> None:
        mock_title_lookup.get_media_by_title.side_effect = NotFoundError("nope")

        view = await use_case.load("Obscure Show", 3)

        assert view.episode_count is None
        assert view.next_episode is None
        assert view.previous_episode == 2
        assert view.stream.verified is False

    async def test_variants_fetched_once(
        self, use_case: PlaybackUseCase, mock_title_lookup: AsyncMock
    ) -> None:
        await use_case.load("Attack on Titan", 2)

        mock_title_lookup.get_media_by_title.assert_awaited_once_with("Attack on Titan")

    async def test_rejects_episode_zero(
        self, use_case: PlaybackUseCase, mock_title_lookup: AsyncMock
    ) -> None:
        with pytest.raises(ValueError):
            await use_case.load("Attack on Titan", 0)
        mock_title_lookup.get_media_by_title.assert_not_awaited()
