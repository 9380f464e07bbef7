from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from src.app.domain.models import CacheEntry
from src.app.infra.cache.base import ResponseCache

logger = logging.getLogger(__name__)

# Expired entries are swept after this many writes
DEFAULT_PURGE_EVERY = 256


class InMemoryResponseCache(ResponseCache):
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        purge_every: int = DEFAULT_PURGE_EVERY,
    ):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._purge_every = max(1, purge_every)
        self._writes_since_purge = 0

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl_seconds=ttl_seconds)
        self._writes_since_purge += 1
        if self._writes_since_purge >= self._purge_every:
            self.purge_expired()

    async def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def purge_expired(self) -> int:
        self._writes_since_purge = 0
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)
