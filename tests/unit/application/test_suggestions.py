"""Tests for SuggestionBuilder."""

from __future__ import annotations

from unittest.mock import AsyncMock

from aniresolve.application.use_cases.suggestions import SuggestionBuilder
from aniresolve.domain.entities.anime import Genre, MediaItem
from aniresolve.domain.entities.errors import TransportError

ACTION = Genre(id=1, name="Action")


def _items(*ids: int) -> list[MediaItem]:
    return [MediaItem(id=i, title=f"item-{i}") for i in ids]


class TestSuggest:
    async def test_excludes_current_item(self, mock_metadata: AsyncMock) -> None:
        mock_metadata.search_by_genre.return_value = _items(1, 16498, 2, 3)

        result = await SuggestionBuilder(mock_metadata).suggest(ACTION, exclude_id=16498)

        assert [i.id for i in result] == [1, 2, 3]

    async def test_bounded_by_limit(self, mock_metadata: AsyncMock) -> None:
        mock_metadata.search_by_genre.return_value = _items(*range(1, 11))

        result = await SuggestionBuilder(mock_metadata).suggest(ACTION, exclude_id=99)

        assert len(result) == 5
        assert [i.id for i in result] == [1, 2, 3, 4, 5]

    async def test_exclusion_before_truncation(self, mock_metadata: AsyncMock) -> None:
        mock_metadata.search_by_genre.return_value = _items(7, 1, 2, 3, 4, 5)

        result = await SuggestionBuilder(mock_metadata).suggest(ACTION, exclude_id=7)

        assert [i.id for i in result] == [1, 2, 3, 4, 5]

    async def test_queries_first_page_with_limit(self, mock_metadata: AsyncMock) -> None:
        await SuggestionBuilder(mock_metadata, limit=3).suggest(ACTION, exclude_id=7)

        mock_metadata.search_by_genre.assert_awaited_once_with(
            1, page=1, limit=3, exclude_id=7
        )

    async def test_explicit_limit_overrides_default(
        self, mock_metadata: AsyncMock
    ) -> None:
        mock_metadata.search_by_genre.return_value = _items(1, 2, 3)

        result = await SuggestionBuilder(mock_metadata).suggest(
            ACTION, exclude_id=None, limit=2
        )

        assert len(result) == 2

    async def test_no_genre_returns_empty(self, mock_metadata: AsyncMock) -> None:
        result = await SuggestionBuilder(mock_metadata).suggest(None, exclude_id=1)

        assert result == []
        mock_metadata.search_by_genre.assert_not_awaited()

    async def test_blank_genre_name_returns_empty(self, mock_metadata: AsyncMock) -> None:
        result = await SuggestionBuilder(mock_metadata).suggest(
            Genre(id=1, name=" "), exclude_id=1
        )

        assert result == []

    async def test_provider_error_returns_empty(self, mock_metadata: AsyncMock) -> None:
        mock_metadata.search_by_genre.side_effect = TransportError("down")

        result = await SuggestionBuilder(mock_metadata).suggest(ACTION, exclude_id=1)

        assert result == []
