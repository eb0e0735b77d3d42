"""AniList GraphQL client: title variants and episode count by title."""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aniresolve.domain.entities.anime import TitleVariants
from aniresolve.domain.entities.errors import (
    MalformedResponseError,
    NotFoundError,
    TransportError,
)

log = structlog.get_logger(__name__)

_GRAPHQL_URL = "https://graphql.anilist.co"

MEDIA_BY_TITLE_QUERY = """
query GetAnimeEpisodes($name: String!) {
  Media(search: $name, type: ANIME) {
    title {
      romaji
      english
      native
      userPreferred
    }
    episodes
  }
}
"""


class _AniListTitle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    romaji: Optional[str] = None
    english: Optional[str] = None
    native: Optional[str] = None
    userPreferred: Optional[str] = None  # noqa: N815


class _AniListMedia(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: _AniListTitle
    episodes: Optional[int] = Field(default=None, ge=0)


class _AniListData(BaseModel):
    Media: Optional[_AniListMedia] = None  # noqa: N815


class _AniListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: Optional[_AniListData] = None
    errors: list[dict[str, Any]] = Field(default_factory=list)


class AniListClient:
    """Async AniList client.

    Implements ``TitleLookupPort`` from domain.ports.metadata.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        url: str = _GRAPHQL_URL,
    ) -> None:
        self._http = http_client
        self._url = url

    async def _post(self, query: str, variables: dict[str, Any]) -> Any:
        try:
            resp = await self._http.post(
                self._url,
                json={"query": query, "variables": variables},
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as exc:
            log.warning("anilist_timeout", variables=variables)
            raise TransportError("timeout querying AniList") from exc
        except httpx.HTTPError as exc:
            log.warning("anilist_network_error", error=str(exc))
            raise TransportError(f"network error querying AniList: {exc}") from exc

        if resp.status_code == 404:
            raise NotFoundError(str(variables))
        if resp.status_code >= 400:
            log.warning("anilist_http_error", status=resp.status_code)
            raise TransportError(f"AniList returned HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError("AniList response is not JSON") from exc

    async def get_media_by_title(self, title: str) -> TitleVariants:
        """Best AniList match for *title*.

        Raises:
            NotFoundError: No anime matches the title.
            MalformedResponseError: Unexpected payload shape.
            TransportError: Network failure or HTTP error status.
        """
        payload = await self._post(MEDIA_BY_TITLE_QUERY, {"name": title})
        try:
            parsed = _AniListResponse.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError(f"AniList: {exc}") from exc

        media = parsed.data.Media if parsed.data is not None else None
        if media is None:
            if parsed.errors:
                log.debug("anilist_query_errors", title=title, errors=parsed.errors)
            raise NotFoundError(title)

        return TitleVariants(
            romaji=media.title.romaji,
            english=media.title.english,
            native=media.title.native,
            user_preferred=media.title.userPreferred,
            episodes=media.episodes,
        )
