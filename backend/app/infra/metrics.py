"""Process-local counters and gauges for catalog activity."""

from __future__ import annotations

import threading
from collections import Counter
from typing import Dict, Protocol

from .logging import get_logger

logger = get_logger(__name__)

__all__ = ["InMemoryMetricsClient", "MetricsClient", "get_metrics_client"]


class MetricsClient(Protocol):  # pragma: no cover - interface only
    def increment(self, metric: str, value: int = 1) -> None: ...

    def gauge(self, metric: str, value: int) -> None: ...

    def snapshot(self) -> Dict[str, Dict[str, int]]: ...


class InMemoryMetricsClient:
    """Counts in memory; safe to call from store worker threads."""

    def __init__(self) -> None:
        self.counters: Counter[str] = Counter()
        self.gauges: Dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, metric: str, value: int = 1) -> None:
        with self._lock:
            self.counters[metric] += value
        logger.debug("metrics_increment", extra={"metric": metric, "value": value})

    def gauge(self, metric: str, value: int) -> None:
        with self._lock:
            self.gauges[metric] = value
        logger.debug("metrics_gauge", extra={"metric": metric, "value": value})

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        with self._lock:
            return {"counters": dict(self.counters), "gauges": dict(self.gauges)}


_metrics_singleton: InMemoryMetricsClient | None = None


def get_metrics_client() -> MetricsClient:
    """Return the shared metrics client."""

    global _metrics_singleton
    if _metrics_singleton is None:
        _metrics_singleton = InMemoryMetricsClient()
    return _metrics_singleton
