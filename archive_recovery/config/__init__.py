from __future__ import annotations

from .restore import DEFAULT_API_BASE_URL, RestoreConfig
from .settings import AppConfig, RuntimeConfig, Settings, load_config

__all__ = [
    "DEFAULT_API_BASE_URL",
    "AppConfig",
    "RestoreConfig",
    "RuntimeConfig",
    "Settings",
    "load_config",
]
