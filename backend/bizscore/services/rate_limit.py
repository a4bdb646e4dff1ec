"""Per-client, per-endpoint request rate limiting."""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from bizscore.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitWindow:
    """A named counting window with its request budget."""

    name: str
    limit: int
    window_seconds: int


class CounterStore:
    """
    Expiring counters.

    A counter starts at zero when first touched and is discarded once its
    window has elapsed; the next touch starts a fresh window.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._counters: Dict[str, Tuple[int, float]] = {}

    def __len__(self) -> int:
        return len(self._counters)

    def increment(self, key: str, ttl_seconds: float) -> Tuple[int, float]:
        """
        Increment a counter, opening a new window if needed.

        Returns:
            The new count and the seconds left in its window
        """
        now = self._clock()
        count, expires_at = self._counters.get(key, (0, 0.0))
        if expires_at <= now:
            count, expires_at = 0, now + ttl_seconds

        count += 1
        self._counters[key] = (count, expires_at)
        return count, expires_at - now

    def cleanup_expired(self) -> int:
        """
        Remove counters whose window has elapsed.

        Returns:
            Number of counters removed
        """
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._counters.items() if expires_at <= now]
        for key in expired:
            del self._counters[key]
        return len(expired)


class RateLimiter:
    """
    Enforces per-minute and per-hour request budgets.

    Counters are keyed ``client:endpoint:window``. Every request counts
    against both windows, including requests that end up rejected.
    """

    def __init__(
        self,
        store: CounterStore,
        per_minute: int = 100,
        per_hour: int = 1000,
    ):
        self.store = store
        self.windows = (
            RateLimitWindow("minute", per_minute, 60),
            RateLimitWindow("hour", per_hour, 3600),
        )

    def check(self, client_id: str, endpoint: str) -> None:
        """
        Count a request and enforce the budgets.

        Args:
            client_id: Caller identity (client address)
            endpoint: Request path

        Raises:
            RateLimitExceededError: If any window's budget is exhausted
        """
        counts = [
            (window, *self.store.increment(f"{client_id}:{endpoint}:{window.name}", window.window_seconds))
            for window in self.windows
        ]

        for window, count, remaining in counts:
            if count > window.limit:
                logger.warning(
                    f"Rate limit per {window.name} exceeded for client {client_id} on {endpoint}"
                )
                raise RateLimitExceededError(
                    f"Rate limit exceeded: {window.limit} requests per {window.name}",
                    retry_after_seconds=max(1, math.ceil(remaining)),
                )

    def cleanup(self) -> int:
        removed = self.store.cleanup_expired()
        logger.debug(f"Rate limit cleanup removed {removed} counters")
        return removed
