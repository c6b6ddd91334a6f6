"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .rules_service import (
    DEFAULT_RULES_SERVICE_URL,
    RulesServiceConfig,
    get_rules_service_config,
)
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_RULES_SERVICE_URL",
    "CacheConfig",
    "ConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "RulesServiceConfig",
    "StorageConfig",
    "configure_logging",
    "get_rules_service_config",
    "get_storage_config",
]
