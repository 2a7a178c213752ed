"""In-process cache of crawl results with time-based expiry.

Entries are immutable once written. Expired entries are not swept; a lookup
past the expiry is a miss and the next ``put`` for the key replaces the entry.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from leadcrawl.core.config import DEFAULT_CACHE_TTL_SECONDS
from leadcrawl.services.models import CacheEntry, WebsiteResult

logger = logging.getLogger(__name__)


class ResultCache:
    """Memoize crawl payloads keyed by the canonical request.

    The map is shared by every request handled by the process. Writes replace
    the whole entry in one assignment, and ``single_flight`` serializes
    population of the same key so identical concurrent requests crawl once.

    Attributes:
        default_ttl: Lifetime in seconds applied when ``put`` gets no ttl

    Example:
        >>> cache = ResultCache(default_ttl=60)
        >>> await cache.put("key", results)
        >>> await cache.get("key") == tuple(results)
        True
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._key_locks: dict[str, asyncio.Lock] = {}
        self._key_users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> tuple[WebsiteResult, ...] | None:
        """Return the cached payload, or None on a miss or expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            logger.debug("Cache entry expired for %s", key)
            return None
        return entry.payload

    async def put(
        self,
        key: str,
        payload: Sequence[WebsiteResult],
        ttl: float | None = None,
    ) -> CacheEntry:
        """Store ``payload`` under ``key`` for ``ttl`` seconds."""
        lifetime = self.default_ttl if ttl is None else ttl
        entry = CacheEntry(
            key=key,
            payload=tuple(payload),
            expires_at=self._clock() + lifetime,
        )
        async with self._lock:
            self._entries[key] = entry
        return entry

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    @property
    def in_flight(self) -> int:
        """Number of keys currently being populated by ``single_flight``."""
        return len(self._key_locks)

    async def single_flight(
        self,
        key: str,
        producer: Callable[[], Awaitable[Sequence[WebsiteResult]]],
        ttl: float | None = None,
        should_store: Callable[[Sequence[WebsiteResult]], bool] | None = None,
    ) -> tuple[WebsiteResult, ...]:
        """Return the cached payload or produce, store and return it.

        Concurrent callers for the same key wait for the first producer
        instead of crawling again. A producer that raises stores nothing, and
        neither does a payload rejected by ``should_store``. The per-key lock
        is dropped once its last caller leaves.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        async with self._lock:
            key_lock = self._key_locks.setdefault(key, asyncio.Lock())
            self._key_users[key] = self._key_users.get(key, 0) + 1

        try:
            async with key_lock:
                cached = await self.get(key)
                if cached is not None:
                    return cached
                payload = await producer()
                if should_store is not None and not should_store(payload):
                    logger.debug("Not caching incomplete result for %s", key)
                    return tuple(payload)
                entry = await self.put(key, payload, ttl)
                return entry.payload
        finally:
            async with self._lock:
                self._key_users[key] -= 1
                if not self._key_users[key]:
                    del self._key_users[key]
                    del self._key_locks[key]
