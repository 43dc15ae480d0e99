# rate_limiter.py
"""
클라이언트별 슬라이딩 윈도우 rate limit.
카운터 저장소는 주입 가능하며 기본값은 프로세스 메모리입니다 (여러 워커 간 공유 안 됨).
"""

import math
import threading
import time
from collections import deque
from typing import Optional, Protocol

from fastapi import Depends, Request

from app.core import config
from app.core.errors import RateLimitError


class CounterStore(Protocol):
    def hit(self, key: str, now: float, window: float, limit: int) -> Optional[float]:
        """허용이면 기록 후 None, 거절이면 윈도우 내 가장 오래된 timestamp."""
        ...


class InMemoryCounterStore:
    def __init__(self):
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, now: float, window: float, limit: int) -> Optional[float]:
        window_start = now - window
        with self._lock:
            # 만료된 기록 정리 (빈 키는 삭제)
            for k in list(self._hits):
                q = self._hits[k]
                while q and q[0] <= window_start:
                    q.popleft()
                if not q:
                    del self._hits[k]

            q = self._hits.setdefault(key, deque())
            if len(q) >= limit:
                return q[0]
            q.append(now)
            return None


class RateLimiter:
    def __init__(
        self,
        store: Optional[CounterStore] = None,
        window_sec: Optional[float] = None,
        max_requests: Optional[int] = None,
    ):
        self.store = store or InMemoryCounterStore()
        self.window_sec = config.RATE_LIMIT_WINDOW_SEC if window_sec is None else window_sec
        self.max_requests = config.RATE_LIMIT_MAX_REQUESTS if max_requests is None else max_requests

    def check(self, client_id: str, now: Optional[float] = None) -> None:
        now = time.time() if now is None else now
        oldest = self.store.hit(client_id, now, self.window_sec, self.max_requests)
        if oldest is not None:
            retry_after = max(1, math.ceil(oldest + self.window_sec - now))
            raise RateLimitError(retry_after)


_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    global _limiter
    if _limiter is None:
        _limiter = RateLimiter()
    return _limiter


def client_identity(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


async def enforce_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    limiter.check(client_identity(request))
