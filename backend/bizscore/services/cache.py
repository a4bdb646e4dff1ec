"""In-process TTL cache for scoring lookups."""

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

# Cache namespaces
SCORING_RESULTS = "scoring_results"
COMPANY_SCORES = "company_scores"
SCORING_STATS = "scoring_stats"

STATS_KEY = "all"

CacheKey = Tuple[str, Hashable]


def company_key(company_name: str, tax_id: str) -> str:
    return f"{company_name}_{tax_id}"


class ScoreCache:
    """
    LRU cache with per-entry expiry, keyed by (namespace, key).

    Entries expire ``ttl_seconds`` after they were written. When the cache is
    full the least recently used entry is dropped.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, Any]" = OrderedDict()
        self._timestamps: Dict[CacheKey, float] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, namespace: str, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None when absent or expired."""
        cache_key = (namespace, key)
        if cache_key not in self._entries:
            return None

        if self._clock() - self._timestamps[cache_key] > self.ttl_seconds:
            self._remove(cache_key)
            return None

        self._entries.move_to_end(cache_key)
        return self._entries[cache_key]

    def set(self, namespace: str, key: Hashable, value: Any) -> None:
        cache_key = (namespace, key)
        if cache_key in self._entries:
            self._entries.move_to_end(cache_key)
        elif len(self._entries) >= self.max_size:
            oldest_key = next(iter(self._entries))
            self._remove(oldest_key)

        self._entries[cache_key] = value
        self._timestamps[cache_key] = self._clock()

    def evict(self, namespace: str, key: Hashable) -> bool:
        """
        Drop one entry.

        Returns:
            True if an entry was removed
        """
        cache_key = (namespace, key)
        if cache_key not in self._entries:
            return False
        self._remove(cache_key)
        logger.debug(f"Evicted cache entry {namespace}:{key}")
        return True

    def clear(self) -> None:
        size = len(self._entries)
        self._entries.clear()
        self._timestamps.clear()
        logger.info(f"Score cache cleared - removed {size} entries")

    def _remove(self, cache_key: CacheKey) -> None:
        del self._entries[cache_key]
        del self._timestamps[cache_key]
