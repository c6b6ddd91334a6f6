from __future__ import annotations

import asyncio

import httpx

from anonrules.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
)
from anonrules.adapters.http_resilience import _build_cache_storage  # noqa: PLC2701  # type: ignore[reportPrivateUsage]


def test_retry_policy_builds_retry() -> None:
    retry = RetryPolicy(total=5).build()

    assert retry.total == 5


def test_cache_storage_is_optional() -> None:
    assert _build_cache_storage(None) is None
    assert _build_cache_storage(CacheConfig(enabled=False)) is None
    assert _build_cache_storage(CacheConfig(backend="memory")) is not None


def test_rate_limited_client_sends_requests() -> None:
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    async def run() -> list[int]:
        config = ResilienceConfig(
            name="test",
            base_url="http://rules.test",
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        )
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url="http://rules.test",
                transport=httpx.MockTransport(handler),
            )
            first = await client.get("/document-classes")
            second = await client.put("/rules/class/1", json={"rule": "ALLOWED"})
            return [first.status_code, second.status_code]

    assert asyncio.run(run()) == [200, 200]
    assert seen == ["/document-classes", "/rules/class/1"]
