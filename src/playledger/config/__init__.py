"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_int, optional_env_str
from .errors import ConfigurationError
from .logging import configure_logging
from .stats import StatsConfig, get_stats_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "StatsConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_stats_config",
    "get_storage_config",
    "optional_env_int",
    "optional_env_str",
]
