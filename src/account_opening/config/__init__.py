"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .importing import ImportConfig, get_import_config
from .logging import configure_logging
from .notifications import WhatsAppConfig, get_whatsapp_config, is_whatsapp_configured
from .runtime import RuntimeConfig, get_runtime_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "RuntimeConfig",
    "StorageConfig",
    "WhatsAppConfig",
    "configure_logging",
    "env_int",
    "get_database_config",
    "get_import_config",
    "get_runtime_config",
    "get_storage_config",
    "get_whatsapp_config",
    "is_whatsapp_configured",
    "optional_env_var",
    "require_env_vars",
]
