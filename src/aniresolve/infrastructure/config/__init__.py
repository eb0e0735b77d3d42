from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, ProvidersConfig, StreamConfig

__all__ = ["AppConfig", "EnvOverrides", "ProvidersConfig", "StreamConfig", "load_config"]
