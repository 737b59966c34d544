"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .pull import IDENTIFIER_META_KEY, TRANSPORT_TYPE_OPTION, PullConfig, get_pull_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "IDENTIFIER_META_KEY",
    "TRANSPORT_TYPE_OPTION",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PullConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_pull_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
