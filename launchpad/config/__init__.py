from __future__ import annotations

from .database import DatabaseConfig
from .integrations import RemoteStoreConfig, TeamSyncConfig
from .settings import AppConfig, RuntimeConfig, Settings, load_config

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "RemoteStoreConfig",
    "RuntimeConfig",
    "Settings",
    "TeamSyncConfig",
    "load_config",
]
