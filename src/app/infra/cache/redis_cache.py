from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis
from redis import asyncio as aioredis

from src.app.infra.cache.base import ResponseCache

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "recipes:api:"


class RedisResponseCache(ResponseCache):
    """
    Shared cache backed by Redis.

    Redis errors degrade to a miss or a skipped write: the cache never fails
    the request that consults it.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = DEFAULT_PREFIX):
        self._client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = DEFAULT_PREFIX) -> "RedisResponseCache":
        client = aioredis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        return cls(client, prefix=prefix)

    def _make_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            data = await self._client.get(self._make_key(key))
        except redis.RedisError as error:
            logger.warning("Redis get failed, treating as miss: %s", error)
            return None
        if data is None:
            return None
        try:
            return json.loads(data)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry: %s", key)
            await self.invalidate(key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        try:
            await self._client.setex(self._make_key(key), max(1, int(ttl_seconds)), json.dumps(value))
        except redis.RedisError as error:
            logger.warning("Redis set failed, skipping cache write: %s", error)

    async def invalidate(self, key: str) -> None:
        try:
            await self._client.delete(self._make_key(key))
        except redis.RedisError as error:
            logger.warning("Redis delete failed: %s", error)

    async def clear(self) -> int:
        try:
            keys = [key async for key in self._client.scan_iter(match=f"{self.prefix}*")]
            if not keys:
                return 0
            return int(await self._client.delete(*keys))
        except redis.RedisError as error:
            logger.warning("Redis clear failed: %s", error)
            return 0

    async def close(self) -> None:
        await self._client.aclose()
