from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, ProbeConfig, SearchConfig, SourceEntry

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "ProbeConfig",
    "SearchConfig",
    "SourceEntry",
    "load_config",
]
