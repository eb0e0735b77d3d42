"""Pydantic wire models for Jikan v4 payloads.

Only the fields the resolver consumes are declared; everything else is
ignored. Validation failures surface as ``MalformedResponseError``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _JikanModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class JikanImageSet(_JikanModel):
    image_url: Optional[str] = None
    large_image_url: Optional[str] = None


class JikanImages(_JikanModel):
    jpg: JikanImageSet = Field(default_factory=JikanImageSet)


class JikanEntry(_JikanModel):
    """Genre / relation target reference (``mal_id`` + ``name``)."""

    mal_id: int
    name: str = ""
    type: str = "anime"


class JikanRelation(_JikanModel):
    relation: str
    entry: list[JikanEntry] = Field(default_factory=list)


class JikanAnime(_JikanModel):
    mal_id: int
    url: str = ""
    title: str
    title_english: Optional[str] = None
    title_japanese: Optional[str] = None
    title_synonyms: list[str] = Field(default_factory=list)
    episodes: Optional[int] = Field(default=None, ge=0)
    synopsis: Optional[str] = None
    images: JikanImages = Field(default_factory=JikanImages)
    genres: list[JikanEntry] = Field(default_factory=list)
    relations: list[JikanRelation] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _require_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("primary title must not be blank")
        return v

    @field_validator("title_synonyms", mode="before")
    @classmethod
    def _null_synonyms(cls, v: Any) -> Any:
        return [] if v is None else v


class JikanEpisode(_JikanModel):
    mal_id: int
    title: Optional[str] = None


class JikanPagination(_JikanModel):
    current_page: Optional[int] = None
    last_visible_page: Optional[int] = None
    has_next_page: bool = False


class JikanItemEnvelope(_JikanModel):
    data: JikanAnime


class JikanListEnvelope(_JikanModel):
    """List response; items are validated one by one by the client."""

    data: list[dict[str, Any]]
    pagination: JikanPagination = Field(default_factory=JikanPagination)


class JikanEpisodeEnvelope(_JikanModel):
    data: list[JikanEpisode]
    pagination: JikanPagination = Field(default_factory=JikanPagination)


class JikanGenreEnvelope(_JikanModel):
    data: list[JikanEntry]
