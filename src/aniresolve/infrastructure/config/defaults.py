"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from .schema import DEFAULT_MIRROR_TEMPLATES

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "aniresolve",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "aniresolve/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "suggestions": {
        "limit": 5,
    },
    "providers": {
        "jikan_base_url": "https://api.jikan.moe/v4",
        "anilist_url": "https://graphql.anilist.co",
        "jikan_max_episode_pages": 10,
        "rate_limit_requests_per_second": 3.0,
        "retry_max_attempts": 3,
    },
    "stream": {
        "mirror_templates": list(DEFAULT_MIRROR_TEMPLATES),
        "probe_timeout_seconds": 5.0,
        "concurrent_probe": False,
    },
}
