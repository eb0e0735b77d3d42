"""Layered configuration loading: defaults < YAML < ENV < CLI."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import structlog
import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

log = structlog.get_logger(__name__)

_SECTIONS: frozenset[str] = frozenset(
    {"http", "logging", "suggestions", "providers", "stream"}
)
_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment")

# Flat key (ENV / CLI spelling) -> (section, key inside section).
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "suggestions_limit": ("suggestions", "limit"),
    "jikan_base_url": ("providers", "jikan_base_url"),
    "anilist_url": ("providers", "anilist_url"),
    "rate_limit_requests_per_second": ("providers", "rate_limit_requests_per_second"),
    "probe_timeout_seconds": ("stream", "probe_timeout_seconds"),
    "concurrent_probe": ("stream", "concurrent_probe"),
}


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *layer* over *target* in place; nested mappings merge key by key."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value
    return target


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape ``AppConfig`` validates.

    Layers may mix sectioned blocks (``{"http": {...}}``, as in YAML) and
    flat keys (``http_timeout_seconds``, as in ENV and CLI overrides).
    """
    result: dict[str, Any] = {
        name: dict(block)
        for name, block in layer.items()
        if name in _SECTIONS and isinstance(block, Mapping)
    }
    for name in _TOP_LEVEL:
        if name in layer:
            result[name] = layer[name]
    for flat, (section, key) in _FLAT_KEYS.items():
        if flat in layer:
            result.setdefault(section, {})[key] = layer[flat]
    return result


def _yaml_layer(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping, got {type(parsed).__name__}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated ``AppConfig``.

    Precedence, lowest first: built-in defaults, YAML file, environment
    (``ANIRESOLVE_*``, a ``.env`` file counts as environment), CLI overrides.
    Nothing is written to disk.

    Raises:
        FileNotFoundError: *config_path* or *dotenv_path* does not exist.
        ValueError: The YAML file is not a mapping.
        pydantic.ValidationError: The merged result is invalid.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        # Real environment variables win over the file.
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [deepcopy(DEFAULT_CONFIG)]
    if config_path is not None:
        layers.append(_yaml_layer(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _merge_into(merged, _sectioned(layer))

    config = AppConfig.model_validate(merged)
    log.debug(
        "config_loaded",
        config_path=str(config_path) if config_path else None,
        environment=config.environment,
    )
    return config
