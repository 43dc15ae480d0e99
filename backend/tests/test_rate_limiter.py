"""
Tests for the sliding-window rate limiter.
"""

import pytest

from app.core.errors import RateLimitError
from app.services.rate_limiter import InMemoryCounterStore, RateLimiter


class TestRateLimiter:

    def test_allows_up_to_limit(self):
        limiter = RateLimiter(window_sec=60, max_requests=3)
        for _ in range(3):
            limiter.check("10.0.0.1", now=1000.0)

        with pytest.raises(RateLimitError):
            limiter.check("10.0.0.1", now=1000.0)

    def test_retry_after_from_oldest_timestamp(self):
        limiter = RateLimiter(window_sec=60, max_requests=2)
        limiter.check("client", now=100.0)
        limiter.check("client", now=110.0)

        with pytest.raises(RateLimitError) as exc_info:
            limiter.check("client", now=130.5)

        # oldest (100) + 60 - 130.5 = 29.5 -> 30
        assert exc_info.value.retry_after == 30
        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "30"

    def test_window_expiry(self):
        limiter = RateLimiter(window_sec=60, max_requests=1)
        limiter.check("client", now=0.0)
        limiter.check("client", now=60.5)

    def test_clients_are_independent(self):
        limiter = RateLimiter(window_sec=60, max_requests=1)
        limiter.check("a", now=0.0)
        limiter.check("b", now=0.0)

    def test_denied_requests_are_not_recorded(self):
        store = InMemoryCounterStore()
        limiter = RateLimiter(store=store, window_sec=10, max_requests=1)
        limiter.check("c", now=0.0)
        with pytest.raises(RateLimitError):
            limiter.check("c", now=5.0)
        # 거절된 요청이 기록됐다면 여기서도 막혔을 것
        limiter.check("c", now=10.5)

    def test_injected_store(self):
        class DenyAll:
            def hit(self, key, now, window, limit):
                return now

        limiter = RateLimiter(store=DenyAll(), window_sec=60, max_requests=5)
        with pytest.raises(RateLimitError) as exc_info:
            limiter.check("x", now=10.0)
        assert exc_info.value.retry_after == 60
