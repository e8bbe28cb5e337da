"""
In-memory TTL cache for ranked search results.

Memoizes result lists by query + options key so that repeated searches over
an unchanged catalog skip re-scoring. Entries expire lazily: an expired
entry is dropped on the next lookup of its key. Stored and returned lists
are copies, so callers cannot alter a cached entry. The cache holds no
global state; each service constructs and owns its instance.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from cachetools import LRUCache  # type: ignore[import-untyped]

from ..metrics import (
    search_cache_evictions_total,
    search_cache_hits_total,
    search_cache_misses_total,
    search_cache_size,
)
from ..search.models import SearchResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """
    One cached result list.

    Attributes:
        key: Cache key (normalized query + serialized options)
        results: Ranked results as returned by the orchestrator
        created_at: Clock reading when the entry was stored
        ttl: Lifetime in seconds
    """

    key: str
    results: List[SearchResult]
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now > self.created_at + self.ttl


class ResultCache:
    """
    LRU-bounded TTL cache of search results.

    Attributes:
        entries: LRU cache storing CacheEntry objects
        max_size: Maximum number of entries
        default_ttl: TTL in seconds used when a call gives none
        hits: Number of cache hits
        misses: Number of cache misses (including expired entries)
        evictions: Number of entries evicted due to size limit
    """

    def __init__(
        self,
        max_size: int = 512,
        default_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize result cache.

        Args:
            max_size: Maximum number of cached result lists
            default_ttl: Time-to-live in seconds when get_or_compute gets none
            clock: Monotonic time source in seconds
        """
        self.entries: LRUCache = LRUCache(maxsize=max_size)
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.clock = clock
        self._lock = threading.Lock()

        # Statistics
        self.hits = 0
        self.misses = 0
        self.evictions = 0

        logger.info(f"Initialized ResultCache with max_size={max_size}, ttl={default_ttl}s")

    def get(self, key: str) -> Optional[List[SearchResult]]:
        """
        Get cached results.

        Returns:
            Stored results if present and not expired, None otherwise
        """
        with self._lock:
            entry: Optional[CacheEntry] = self.entries.get(key)

            if entry is None:
                self._record_miss()
                logger.debug(f"Cache MISS: {key}")
                return None

            if entry.is_expired(self.clock()):
                del self.entries[key]
                search_cache_size.set(len(self.entries))
                self._record_miss()
                logger.debug(f"Cache MISS (expired): {key}")
                return None

            self.hits += 1
            search_cache_hits_total.inc()
            logger.debug(f"Cache HIT: {key}")
            return list(entry.results)

    def set(self, key: str, results: List[SearchResult], ttl: Optional[float] = None) -> None:
        """
        Store results.

        Args:
            key: Cache key
            results: Ranked results to store
            ttl: Time-to-live in seconds (default: default_ttl)
        """
        ttl = self.default_ttl if ttl is None else ttl

        with self._lock:
            if len(self.entries) >= self.max_size and key not in self.entries:
                self.evictions += 1
                search_cache_evictions_total.inc()

            self.entries[key] = CacheEntry(
                key=key, results=list(results), created_at=self.clock(), ttl=ttl
            )
            search_cache_size.set(len(self.entries))

        logger.debug(f"Cached: {key} ({len(results)} results, TTL: {ttl}s)")

    def get_or_compute(
        self,
        key: str,
        ttl: Optional[float],
        compute: Callable[[], List[SearchResult]],
    ) -> List[SearchResult]:
        """
        Return cached results or compute and store them.

        compute runs outside the lock, so two concurrent misses on the same
        key may both compute; the last write wins. If compute raises, the
        exception propagates and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        results = compute()
        self.set(key, results, ttl)
        return results

    def invalidate(self, key: str) -> bool:
        """
        Drop one entry.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            removed = self.entries.pop(key, None) is not None
            search_cache_size.set(len(self.entries))

        if removed:
            logger.debug(f"Invalidated cache entry: {key}")
        return removed

    def clear(self) -> int:
        """
        Drop every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self.entries)
            self.entries.clear()
            search_cache_size.set(0)

        logger.info(f"Cleared {count} cached result lists")
        return count

    def purge_expired(self) -> int:
        """
        Drop all expired entries now instead of waiting for their next lookup.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self.clock()
            expired = [key for key, entry in self.entries.items() if entry.is_expired(now)]
            for key in expired:
                del self.entries[key]
            search_cache_size.set(len(self.entries))

        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def get_stats(self) -> Dict[str, int]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

        return {
            "size": len(self.entries),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "total_requests": total_requests,
            "hit_rate_percent": int(round(hit_rate)),
        }

    def _record_miss(self) -> None:
        self.misses += 1
        search_cache_misses_total.inc()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries
