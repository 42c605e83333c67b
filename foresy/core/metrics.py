"""Counter sinks injected into services."""

from __future__ import annotations

import logging
from collections import defaultdict
from threading import Lock
from typing import Protocol

logger = logging.getLogger(__name__)


class MetricsSink(Protocol):
    def increment(self, name: str, value: int = 1, **tags: str) -> None: ...


class LoggingMetricsSink:
    """Emit counters as structured debug log lines."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def increment(self, name: str, value: int = 1, **tags: str) -> None:
        self._log.debug("metrics.counter", extra={"event": "metrics.counter", "metric": name, "value": value, "tags": tags})


class InMemoryMetricsSink:
    """Keep counters in process; used by tests and the health endpoint."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._lock = Lock()

    def increment(self, name: str, value: int = 1, **tags: str) -> None:
        with self._lock:
            self._counters[name] += value

    def get(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)
