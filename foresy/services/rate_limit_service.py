"""In-memory sliding-window rate limiter for unauthenticated endpoints."""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from collections.abc import Callable
from threading import Lock

from foresy.core.config import get_config
from foresy.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each (endpoint, client) key."""

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[tuple[str, str], deque[float]] = {}
        self._lock = Lock()
        self._next_sweep = clock() + window_seconds

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        """Drop every key whose newest hit has left the window."""
        cutoff = now - self.window_seconds
        for key in [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]
        self._next_sweep = now + self.window_seconds

    def hit(self, endpoint: str, client_id: str) -> None:
        """Record one request or raise ``RateLimitExceeded`` with the retry delay."""
        key = (endpoint, client_id or "unknown")
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - self.window_seconds:
                hits.popleft()
            if len(hits) >= self.max_requests:
                retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
                logger.warning(
                    "rate_limit.exceeded",
                    extra={"event": "rate_limit.exceeded", "endpoint": endpoint, "retry_after": retry_after},
                )
                raise RateLimitExceeded(retry_after=retry_after)
            hits.append(now)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    global _limiter
    if _limiter is None:
        cfg = get_config()
        _limiter = RateLimiter(cfg.RATE_LIMIT_MAX_REQUESTS, cfg.RATE_LIMIT_WINDOW_SECONDS)
    return _limiter


def client_ip(headers, peer: str | None) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = (headers.get("x-real-ip") or "").strip()
    return real_ip or peer or "unknown"
