from __future__ import annotations

import pytest

from foresy.core.exceptions import RateLimitExceeded
from foresy.services.rate_limit_service import RateLimiter, client_ip


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_sliding_window_blocks_then_recovers():
    clock = _Clock()
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
    limiter.hit("login", "1.2.3.4")
    clock.now += 10
    limiter.hit("login", "1.2.3.4")

    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.hit("login", "1.2.3.4")
    assert exc_info.value.retry_after == 50

    limiter.hit("signup", "1.2.3.4")
    limiter.hit("login", "5.6.7.8")

    clock.now += 51
    limiter.hit("login", "1.2.3.4")


def test_idle_clients_are_evicted_after_the_window():
    clock = _Clock()
    limiter = RateLimiter(max_requests=5, window_seconds=60, clock=clock)
    for n in range(1000):
        limiter.hit("login", f"10.0.{n // 256}.{n % 256}")
    assert len(limiter) == 1000

    clock.now += 61
    limiter.hit("login", "192.168.1.1")

    assert len(limiter) == 1


def test_recent_clients_survive_a_sweep():
    clock = _Clock()
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.hit("login", "1.1.1.1")
    clock.now += 59
    limiter.hit("login", "2.2.2.2")

    clock.now += 2
    limiter.hit("signup", "3.3.3.3")

    assert len(limiter) == 2
    with pytest.raises(RateLimitExceeded):
        limiter.hit("login", "2.2.2.2")


def test_client_ip_prefers_forwarded_headers():
    assert client_ip({"x-forwarded-for": "9.9.9.9, 10.0.0.1"}, "127.0.0.1") == "9.9.9.9"
    assert client_ip({"x-real-ip": "8.8.8.8"}, "127.0.0.1") == "8.8.8.8"
    assert client_ip({}, "127.0.0.1") == "127.0.0.1"
    assert client_ip({}, None) == "unknown"
