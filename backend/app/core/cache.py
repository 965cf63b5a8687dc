"""
Redis-backed JSON cache.

Caches GitHub profile analyses so that repeated look-ups of the same
username do not burn through the unauthenticated GitHub rate limit.
When Redis is unreachable every call degrades to a cache miss and the
service retries the connection after ``CACHE_RETRY_SECONDS``.
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import redis.asyncio as redis

from app.core.config import settings
from app.core.metrics import cache_hits_total, cache_misses_total

logger = logging.getLogger(__name__)


class CacheService:
    def __init__(self):
        self._client: Optional[redis.Redis] = None
        self._retry_at: float = 0.0
        self._connect_lock = asyncio.Lock()

    @property
    def available(self) -> bool:
        return time.monotonic() >= self._retry_at

    def _mark_down(self, reason: Exception) -> None:
        logger.warning(
            f"Redis unavailable ({reason}); bypassing cache for {settings.CACHE_RETRY_SECONDS}s"
        )
        self._retry_at = time.monotonic() + settings.CACHE_RETRY_SECONDS

    def _make_key(self, key: str) -> str:
        return f"{settings.CACHE_PREFIX}{key}"

    async def get_client(self) -> redis.Redis:
        """Return the shared client, connecting on first use."""
        if self._client is not None:
            return self._client

        async with self._connect_lock:
            if self._client is None:
                client = redis.from_url(
                    settings.REDIS_URL,
                    encoding="utf-8",
                    decode_responses=True,
                    max_connections=20,
                )
                await client.ping()
                self._client = client
                logger.info("Connected to Redis cache")
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> Optional[Any]:
        """Return the decoded value stored under ``key``, or None."""
        if not self.available:
            return None

        try:
            client = await self.get_client()
            raw = await client.get(self._make_key(key))
        except redis.RedisError as e:
            self._mark_down(e)
            return None

        if raw is None:
            cache_misses_total.inc()
            return None

        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None
        cache_hits_total.inc()
        return value

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Store ``value`` as JSON. Returns False when nothing was written."""
        if not self.available:
            return False

        ttl = ttl_seconds if ttl_seconds is not None else settings.CACHE_DEFAULT_TTL_HOURS * 3600
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.warning(f"Value for {key} is not JSON serializable: {e}")
            return False

        try:
            client = await self.get_client()
            await client.setex(self._make_key(key), ttl, payload)
        except redis.RedisError as e:
            self._mark_down(e)
            return False
        return True

    async def delete(self, key: str) -> bool:
        if not self.available:
            return False
        try:
            client = await self.get_client()
            removed = await client.delete(self._make_key(key))
        except redis.RedisError as e:
            self._mark_down(e)
            return False
        return removed > 0

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
        ttl_seconds: Optional[int] = None,
    ) -> Any:
        """
        Return the cached value for ``key`` or compute and store it.

        Errors raised by ``fetch_fn`` propagate and nothing is stored.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        data = await fetch_fn()
        if data is not None:
            await self.set(key, data, ttl_seconds)
        return data

    async def health_check(self) -> Dict[str, Any]:
        try:
            client = await self.get_client()
            await client.ping()
            return {
                "status": "healthy",
                "available": self.available,
                "total_keys": await client.dbsize(),
            }
        except redis.RedisError as e:
            return {"status": "unhealthy", "available": False, "error": str(e)}


cache_service = CacheService()


class CacheKeys:
    @staticmethod
    def github_profile_analysis(username: str) -> str:
        return f"github:analysis:{username.lower()}"
