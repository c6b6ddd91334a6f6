"""Rule-storage service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_float, optional_env
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig
from .storage import get_storage_config

DEFAULT_RULES_SERVICE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class RulesServiceConfig:
    resilience: ResilienceConfig
    use_fixture_data: bool = False
    fallback_to_fixtures: bool = True


def _cache_from_environment() -> CacheConfig | None:
    backend = (optional_env("ANONRULES_HTTP_CACHE") or "off").lower()
    if backend == "off":
        return None
    if backend == "memory":
        return CacheConfig(backend="memory")
    if backend == "sqlite":
        cache_path = get_storage_config().http_cache_path()
        return CacheConfig(backend="sqlite", sqlite_path=str(cache_path))
    raise ConfigurationError(
        f"ANONRULES_HTTP_CACHE must be one of off, memory, sqlite, got {backend!r}"
    )


def _rate_limit(max_rate: float) -> RateLimit:
    # the limiter cannot hold less than one request
    if max_rate < 1:
        return RateLimit(max_calls=1, per_seconds=1 / max_rate)
    return RateLimit(max_calls=max_rate, per_seconds=1.0)


def get_rules_service_config() -> RulesServiceConfig:
    base_url = optional_env("ANONRULES_API_URL") or DEFAULT_RULES_SERVICE_URL
    timeout = env_float("ANONRULES_TIMEOUT_SECONDS", default=DEFAULT_TIMEOUT_SECONDS)
    max_rate = env_float("ANONRULES_MAX_REQUESTS_PER_SECOND", default=None)

    resilience = ResilienceConfig(
        name="rules-service",
        base_url=base_url.rstrip("/"),
        timeout_seconds=timeout or DEFAULT_TIMEOUT_SECONDS,
        ratelimit=_rate_limit(max_rate) if max_rate else None,
        cache=_cache_from_environment(),
        default_headers={"Content-Type": "application/json"},
    )

    return RulesServiceConfig(
        resilience=resilience,
        use_fixture_data=env_flag("ANONRULES_USE_FIXTURE_DATA", default=False),
        fallback_to_fixtures=env_flag("ANONRULES_FIXTURE_FALLBACK", default=True),
    )
