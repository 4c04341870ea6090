"""
Minimal metrics collection for observability.

Provides counters and gauges without external dependencies.
Metrics are exposed via the /api/metrics endpoint and can be scraped by Prometheus.
"""

import threading
from dataclasses import dataclass, field

from ..cache.cache_manager import CacheStats


@dataclass
class Counter:
    """Thread-safe counter metric."""

    name: str
    description: str
    _value: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def inc(self, amount: int = 1) -> None:
        """Increment the counter."""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass
class Gauge:
    """Thread-safe gauge metric."""

    name: str
    description: str
    _value: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def set(self, value: float) -> None:
        """Set the gauge value."""
        with self._lock:
            self._value = value

    @property
    def value(self) -> float:
        with self._lock:
            return self._value


class MetricsRegistry:
    """Central registry for all metrics."""

    def __init__(self) -> None:
        self._counters: dict[str, Counter] = {}
        self._gauges: dict[str, Gauge] = {}
        self._lock = threading.Lock()

    @property
    def counters(self) -> dict[str, Counter]:
        with self._lock:
            return dict(self._counters)

    @property
    def gauges(self) -> dict[str, Gauge]:
        with self._lock:
            return dict(self._gauges)

    def counter(self, name: str, description: str = "") -> Counter:
        """Get or create a counter."""
        with self._lock:
            if name not in self._counters:
                self._counters[name] = Counter(name, description)
            return self._counters[name]

    def gauge(self, name: str, description: str = "") -> Gauge:
        """Get or create a gauge."""
        with self._lock:
            if name not in self._gauges:
                self._gauges[name] = Gauge(name, description)
            return self._gauges[name]

    def to_prometheus(self) -> str:
        """Export metrics in Prometheus text format."""
        lines: list[str] = []
        with self._lock:
            for name in sorted(self._counters):
                c = self._counters[name]
                if c.description:
                    lines.append(f"# HELP {name} {c.description}")
                lines.append(f"# TYPE {name} counter")
                lines.append(f"{name} {c.value}")

            for name in sorted(self._gauges):
                g = self._gauges[name]
                if g.description:
                    lines.append(f"# HELP {name} {g.description}")
                lines.append(f"# TYPE {name} gauge")
                lines.append(f"{name} {g.value}")

        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, dict[str, float | int | str]]:
        """Export metrics as dictionary."""
        result: dict[str, dict[str, float | int | str]] = {}
        with self._lock:
            for name in self._counters:
                result[name] = {"type": "counter", "value": self._counters[name].value}
            for name in self._gauges:
                result[name] = {"type": "gauge", "value": self._gauges[name].value}
        return result


# Global registry instance
REGISTRY = MetricsRegistry()


def get_registry() -> MetricsRegistry:
    """Get the global metrics registry."""
    return REGISTRY


# Pre-defined metrics
api_requests = REGISTRY.counter("api_requests_total", "Total cache admin API requests")

_CACHE_GAUGES = {
    "hits": "Cache lookups that found a live entry",
    "misses": "Cache lookups that found nothing or an expired entry",
    "sets": "Cache writes",
    "deletes": "Entries removed by delete, pattern clear or clear",
    "evictions": "Entries evicted by the LRU ceiling",
    "expired": "Entries dropped after their TTL passed",
    "current_size": "Live entries currently stored",
    "hit_rate": "hits / (hits + misses)",
}


def publish_cache_stats(stats: CacheStats, registry: MetricsRegistry | None = None) -> None:
    """Copy a cache stats snapshot onto perf_cache_* gauges."""
    registry = registry or REGISTRY
    snapshot = stats.to_dict()
    for key, description in _CACHE_GAUGES.items():
        registry.gauge(f"perf_cache_{key}", description).set(snapshot[key])
