# src/app/infra/cache/base.py
"""
Abstract base class for the upstream response cache.
Callers use it cache-aside: check get(), fetch on miss, then set().
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class ResponseCache(ABC):
    """
    Key-value cache for upstream JSON payloads with per-entry TTL.

    Implementations:
    - InMemoryResponseCache: process-local dict with lazy expiry
    - RedisResponseCache: shared cache using SETEX
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Look up a cached payload.

        Args:
            key: Normalized request fingerprint

        Returns:
            The cached value, or None on a miss (absent or expired)
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """
        Store a payload. Concurrent writers for the same key: last write wins.

        Args:
            key: Normalized request fingerprint
            value: JSON-serializable payload
            ttl_seconds: Lifetime of the entry
        """
        pass

    @abstractmethod
    async def invalidate(self, key: str) -> None:
        """Drop a single entry if present."""
        pass

    @abstractmethod
    async def clear(self) -> int:
        """
        Drop every entry owned by this cache.

        Returns:
            Number of entries removed
        """
        pass

    async def close(self) -> None:
        """Release connections held by the cache."""
        return None
