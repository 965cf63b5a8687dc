"""Tests for the Redis cache service and key builders."""

import asyncio
import json
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import redis.asyncio as redis

from app.core.cache import CacheKeys, CacheService


def _service_with_client(client):
    service = CacheService()
    service.get_client = AsyncMock(return_value=client)
    return service


class TestCacheKeys:
    def test_github_analysis_key_is_lowercase(self):
        assert CacheKeys.github_profile_analysis("OctoCat") == "github:analysis:octocat"

    def test_prefix_applied(self):
        service = CacheService()
        with patch("app.core.cache.settings") as mock_settings:
            mock_settings.CACHE_PREFIX = "tu:"
            assert service._make_key("github:analysis:x") == "tu:github:analysis:x"


class TestCacheGet:
    def test_returns_decoded_value(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=json.dumps({"skills": ["Python"]}))
        service = _service_with_client(client)

        assert asyncio.run(service.get("k")) == {"skills": ["Python"]}

    def test_miss_returns_none(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        service = _service_with_client(client)

        assert asyncio.run(service.get("k")) is None

    def test_connection_error_bypasses_cache(self):
        client = MagicMock()
        client.get = AsyncMock(side_effect=redis.ConnectionError("down"))
        service = _service_with_client(client)

        assert asyncio.run(service.get("k")) is None
        assert service.available is False

        # Subsequent calls short-circuit until the retry window passes
        assert asyncio.run(service.get("k")) is None
        assert client.get.await_count == 1

    def test_cache_retried_after_cooldown(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=json.dumps(1))
        service = _service_with_client(client)
        service._retry_at = time.monotonic() - 1

        assert service.available is True
        assert asyncio.run(service.get("k")) == 1

    def test_invalid_json_returns_none(self):
        client = MagicMock()
        client.get = AsyncMock(return_value="{not json")
        service = _service_with_client(client)

        assert asyncio.run(service.get("k")) is None


class TestCacheSet:
    def test_uses_given_ttl(self):
        client = MagicMock()
        client.setex = AsyncMock()
        service = _service_with_client(client)

        assert asyncio.run(service.set("k", {"a": 1}, ttl_seconds=60)) is True
        args = client.setex.call_args[0]
        assert args[1] == 60
        assert json.loads(args[2]) == {"a": 1}

    def test_default_ttl_from_settings(self):
        client = MagicMock()
        client.setex = AsyncMock()
        service = _service_with_client(client)

        asyncio.run(service.set("k", "v"))
        assert client.setex.call_args[0][1] == 24 * 3600

    def test_unavailable_cache_skips_write(self):
        service = CacheService()
        service._retry_at = time.monotonic() + 60
        service.get_client = AsyncMock()

        assert asyncio.run(service.set("k", "v")) is False
        service.get_client.assert_not_called()


class TestGetOrFetch:
    def test_cached_value_skips_fetch(self):
        service = CacheService()
        service.get = AsyncMock(return_value={"cached": True})
        service.set = AsyncMock()
        fetch = AsyncMock()

        result = asyncio.run(service.get_or_fetch("k", fetch))

        assert result == {"cached": True}
        fetch.assert_not_called()

    def test_fetches_and_stores_on_miss(self):
        service = CacheService()
        service.get = AsyncMock(return_value=None)
        service.set = AsyncMock()
        fetch = AsyncMock(return_value={"fresh": True})

        result = asyncio.run(service.get_or_fetch("k", fetch, ttl_seconds=10))

        assert result == {"fresh": True}
        service.set.assert_awaited_once_with("k", {"fresh": True}, 10)

    def test_none_result_not_cached(self):
        service = CacheService()
        service.get = AsyncMock(return_value=None)
        service.set = AsyncMock()

        assert asyncio.run(service.get_or_fetch("k", AsyncMock(return_value=None))) is None
        service.set.assert_not_called()

    def test_fetch_error_propagates(self):
        service = CacheService()
        service.get = AsyncMock(return_value=None)
        service.set = AsyncMock()

        with pytest.raises(RuntimeError):
            asyncio.run(service.get_or_fetch("k", AsyncMock(side_effect=RuntimeError("boom"))))
        service.set.assert_not_called()


class TestHealthCheck:
    def test_unhealthy_when_connection_fails(self):
        service = CacheService()
        service.get_client = AsyncMock(side_effect=redis.ConnectionError("refused"))

        health = asyncio.run(service.health_check())

        assert health["status"] == "unhealthy"
        assert health["available"] is False
