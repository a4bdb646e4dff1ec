"""Tests for the score cache and the rate limiter."""

import pytest

from bizscore.core.exceptions import RateLimitExceededError
from bizscore.services.cache import COMPANY_SCORES, SCORING_RESULTS, ScoreCache
from bizscore.services.rate_limit import CounterStore, RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestScoreCache:
    def test_get_set_and_evict(self):
        cache = ScoreCache()
        cache.set(SCORING_RESULTS, "id-1", "value")

        assert cache.get(SCORING_RESULTS, "id-1") == "value"
        assert cache.get(COMPANY_SCORES, "id-1") is None
        assert cache.evict(SCORING_RESULTS, "id-1") is True
        assert cache.get(SCORING_RESULTS, "id-1") is None
        assert cache.evict(SCORING_RESULTS, "id-1") is False

    def test_entries_expire(self):
        clock = FakeClock()
        cache = ScoreCache(ttl_seconds=600, clock=clock)
        cache.set(SCORING_RESULTS, "id-1", "value")

        clock.now += 599
        assert cache.get(SCORING_RESULTS, "id-1") == "value"
        clock.now += 2
        assert cache.get(SCORING_RESULTS, "id-1") is None
        assert len(cache) == 0

    def test_least_recently_used_entry_is_dropped(self):
        cache = ScoreCache(max_size=2)
        cache.set(SCORING_RESULTS, "a", 1)
        cache.set(SCORING_RESULTS, "b", 2)
        cache.get(SCORING_RESULTS, "a")
        cache.set(SCORING_RESULTS, "c", 3)

        assert cache.get(SCORING_RESULTS, "a") == 1
        assert cache.get(SCORING_RESULTS, "b") is None
        assert cache.get(SCORING_RESULTS, "c") == 3


class TestRateLimiter:
    def test_minute_budget(self):
        limiter = RateLimiter(CounterStore(clock=FakeClock()), per_minute=3, per_hour=100)
        for _ in range(3):
            limiter.check("10.0.0.1", "/api/v1/scoring/score")

        with pytest.raises(RateLimitExceededError) as exc_info:
            limiter.check("10.0.0.1", "/api/v1/scoring/score")

        assert "per minute" in str(exc_info.value)
        assert 1 <= exc_info.value.retry_after_seconds <= 60

    def test_budgets_are_per_client_and_endpoint(self):
        limiter = RateLimiter(CounterStore(clock=FakeClock()), per_minute=1, per_hour=100)
        limiter.check("10.0.0.1", "/a")
        limiter.check("10.0.0.2", "/a")
        limiter.check("10.0.0.1", "/b")

        with pytest.raises(RateLimitExceededError):
            limiter.check("10.0.0.1", "/a")

    def test_minute_window_resets_but_hour_does_not(self):
        clock = FakeClock()
        limiter = RateLimiter(CounterStore(clock=clock), per_minute=2, per_hour=3)
        limiter.check("c", "/a")
        limiter.check("c", "/a")

        clock.now += 61
        limiter.check("c", "/a")

        with pytest.raises(RateLimitExceededError) as exc_info:
            limiter.check("c", "/a")
        assert "per hour" in str(exc_info.value)

    def test_cleanup_removes_expired_counters(self):
        clock = FakeClock()
        store = CounterStore(clock=clock)
        limiter = RateLimiter(store)
        limiter.check("c", "/a")
        assert len(store) == 2

        clock.now += 61
        assert limiter.cleanup() == 1
        clock.now += 3600
        assert limiter.cleanup() == 1
        assert len(store) == 0
