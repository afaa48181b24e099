"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, SchemaReferenceError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .submit import SCHEMA_ENV_VAR, SubmitConfig, get_submit_config, load_schema

__all__ = [
    "SCHEMA_ENV_VAR",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "SchemaReferenceError",
    "StorageConfig",
    "SubmitConfig",
    "configure_logging",
    "get_database_config",
    "get_storage_config",
    "get_submit_config",
    "load_schema",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
