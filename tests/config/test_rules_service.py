from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from anonrules.config import (
    DEFAULT_RULES_SERVICE_URL,
    ConfigurationError,
    get_rules_service_config,
    get_storage_config,
)

_ENV_VARS = (
    "ANONRULES_API_URL",
    "ANONRULES_USE_FIXTURE_DATA",
    "ANONRULES_FIXTURE_FALLBACK",
    "ANONRULES_TIMEOUT_SECONDS",
    "ANONRULES_MAX_REQUESTS_PER_SECOND",
    "ANONRULES_HTTP_CACHE",
    "ANONRULES_DATA_DIR",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = get_rules_service_config()

    assert config.resilience.base_url == DEFAULT_RULES_SERVICE_URL
    assert config.resilience.timeout_seconds == 10.0
    assert config.resilience.ratelimit is None
    assert config.resilience.cache is None
    assert not config.use_fixture_data
    assert config.fallback_to_fixtures


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANONRULES_API_URL", "https://rules.example.com/api/")
    monkeypatch.setenv("ANONRULES_USE_FIXTURE_DATA", "yes")
    monkeypatch.setenv("ANONRULES_FIXTURE_FALLBACK", "0")
    monkeypatch.setenv("ANONRULES_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("ANONRULES_MAX_REQUESTS_PER_SECOND", "4")
    monkeypatch.setenv("ANONRULES_HTTP_CACHE", "memory")

    config = get_rules_service_config()

    assert config.resilience.base_url == "https://rules.example.com/api"
    assert config.resilience.timeout_seconds == 2.5
    assert config.resilience.ratelimit is not None
    assert config.resilience.ratelimit.max_calls == 4
    assert config.resilience.cache is not None
    assert config.resilience.cache.backend == "memory"
    assert config.use_fixture_data
    assert not config.fallback_to_fixtures


def test_sqlite_cache_lives_in_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ANONRULES_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ANONRULES_HTTP_CACHE", "sqlite")

    config = get_rules_service_config()

    assert config.resilience.cache is not None
    expected = get_storage_config().http_cache_path()
    assert config.resilience.cache.sqlite_path == str(expected)
    assert expected.parent.exists()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("ANONRULES_USE_FIXTURE_DATA", "maybe"),
        ("ANONRULES_TIMEOUT_SECONDS", "soon"),
        ("ANONRULES_TIMEOUT_SECONDS", "-1"),
        ("ANONRULES_HTTP_CACHE", "redis"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_rules_service_config()


def test_blank_values_are_treated_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANONRULES_API_URL", "   ")

    assert get_rules_service_config().resilience.base_url == DEFAULT_RULES_SERVICE_URL


@pytest.mark.parametrize(
    ("value", "max_calls", "per_seconds"),
    [
        ("0.5", 1, 2.0),
        ("0.25", 1, 4.0),
        ("2.9", 2.9, 1.0),
        ("1", 1, 1.0),
    ],
)
def test_fractional_rates_are_kept(
    monkeypatch: pytest.MonkeyPatch,
    value: str,
    max_calls: float,
    per_seconds: float,
) -> None:
    monkeypatch.setenv("ANONRULES_MAX_REQUESTS_PER_SECOND", value)

    ratelimit = get_rules_service_config().resilience.ratelimit

    assert ratelimit is not None
    assert ratelimit.max_calls == pytest.approx(max_calls)
    assert ratelimit.per_seconds == pytest.approx(per_seconds)
    assert ratelimit.max_calls / ratelimit.per_seconds == pytest.approx(float(value))
