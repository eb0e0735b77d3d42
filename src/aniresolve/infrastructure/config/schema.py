"""Validated configuration models.

``AppConfig`` exposes HTTP, logging and suggestion settings as flat
attributes but reads them from the sectioned YAML shape
(``http.timeout_seconds`` and so on). ``providers`` and ``stream`` stay
nested models. ``EnvOverrides`` only collects ``ANIRESOLVE_*`` variables;
precedence is applied in ``load.py``.
"""

from __future__ import annotations

from typing import Any, Literal, Optional
from urllib.parse import urlparse

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

MIN_MIRROR_HOSTS = 2

DEFAULT_MIRROR_TEMPLATES: list[str] = [
    "https://cdn01-s1.mywallpaper-cdn-4k.com/stream/{initial}/{slug}/{episode}.mp4/index.m3u8",
    "https://cdn-s01.mywallpaper-4k-image.net/stream/{initial}/{slug}/{episode}.mp4/index.m3u8",
]


def _in_section(
    section: str, key: str, default: Any, description: str, *, flat: str | None = None
) -> Any:
    """Field readable by its flat name or as ``{section: {key: ...}}``."""
    flat = flat or f"{section}_{key}"
    return Field(
        default=default,
        validation_alias=AliasChoices(flat, AliasPath(section, key)),
        description=description,
    )


class StreamConfig(BaseModel):
    """Mirror candidates and how they are probed (YAML ``stream``)."""

    mirror_templates: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MIRROR_TEMPLATES),
        description=(
            "Mirrors in priority order. Placeholders: {initial}, {slug}, "
            "{episode} (two-digit zero-padded)."
        ),
    )
    probe_timeout_seconds: float = Field(default=5.0, gt=0, description="HEAD timeout per mirror.")
    probe_max_concurrent: int = Field(
        default=10, ge=1, description="Parallel HEADs in concurrent mode."
    )
    concurrent_probe: bool = Field(
        default=False,
        description="HEAD every mirror at once; the first live one in list order wins.",
    )

    @field_validator("mirror_templates")
    @classmethod
    def _templates_are_formattable(cls, templates: list[str]) -> list[str]:
        if not templates:
            raise ValueError("stream.mirror_templates must not be empty")
        missing = [t for t in templates if "{slug}" not in t or "{episode}" not in t]
        if missing:
            raise ValueError(f"mirror templates without {{slug}}/{{episode}}: {missing!r}")

        hosts: set[str] = set()
        for template in templates:
            try:
                sample = template.format(initial="a", slug="a", episode="01")
            except (KeyError, IndexError, ValueError) as exc:
                raise ValueError(f"mirror template {template!r} does not format: {exc!r}") from exc
            hosts.add((urlparse(sample).hostname or "").lower())
        hosts.discard("")
        if len(hosts) < MIN_MIRROR_HOSTS:
            raise ValueError(
                f"stream.mirror_templates must span at least {MIN_MIRROR_HOSTS} hosts, "
                f"got {sorted(hosts)!r}"
            )
        return templates


class ProvidersConfig(BaseModel):
    """Metadata provider endpoints, rate limit and retry policy (YAML ``providers``)."""

    jikan_base_url: str = "https://api.jikan.moe/v4"
    anilist_url: str = "https://graphql.anilist.co"
    jikan_max_episode_pages: int = Field(default=10, ge=1, description="100 episodes per page.")
    rate_limit_requests_per_second: float = Field(
        default=3.0, ge=0, description="0 disables limiting."
    )
    retry_max_attempts: int = Field(default=3, ge=0, description="Retries on 429 and 503.")
    retry_backoff_base: float = 1.0
    retry_max_backoff: float = 30.0


class AppConfig(BaseModel):
    """The final, validated configuration the app is built from."""

    app_name: str = "aniresolve"
    environment: Environment = "dev"

    http_timeout_seconds: float = _in_section(
        "http", "timeout_seconds", 15.0, "Timeout for provider requests."
    )
    http_follow_redirects: bool = _in_section(
        "http", "follow_redirects", True, "Follow redirects on provider requests."
    )
    http_user_agent: str = _in_section(
        "http", "user_agent", "aniresolve/0.1.0", "User-Agent header for every request."
    )

    log_level: LogLevel = _in_section(
        "logging", "level", "INFO", "Root log level.", flat="log_level"
    )
    # None means: pick from environment after validation.
    log_format: Optional[LogFormat] = _in_section(
        "logging", "format", None, "console or json.", flat="log_format"
    )

    suggestions_limit: int = _in_section(
        "suggestions", "limit", 5, "Similar titles shown on the detail view."
    )

    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("http.timeout_seconds must be > 0")
        return value

    @field_validator("suggestions_limit")
    @classmethod
    def _at_least_one_suggestion(cls, value: int) -> int:
        if value < 1:
            raise ValueError("suggestions.limit must be >= 1")
        return value

    @model_validator(mode="after")
    def _format_from_environment(self) -> "AppConfig":
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """Dump in the same shape a config.yaml uses."""
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "suggestions": {"limit": self.suggestions_limit},
            "providers": self.providers.model_dump(),
            "stream": self.stream.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """Flat ``ANIRESOLVE_*`` variables, e.g. ``ANIRESOLVE_LOG_LEVEL`` or
    ``ANIRESOLVE_CONCURRENT_PROBE``. Unset variables stay None.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANIRESOLVE_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None
    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None
    suggestions_limit: Optional[int] = None

    jikan_base_url: Optional[str] = None
    anilist_url: Optional[str] = None
    rate_limit_requests_per_second: Optional[float] = None
    probe_timeout_seconds: Optional[float] = None
    concurrent_probe: Optional[bool] = None

    def to_update_dict(self) -> dict[str, Any]:
        """Only the variables that were set."""
        return self.model_dump(exclude_none=True)
