"""Metrics collection for monitoring."""

import logging
import time
from typing import Dict, Optional
from collections import defaultdict

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Simple in-memory metrics collector.

    Counts live only as long as the process, like the tickets they describe.
    """

    def __init__(self) -> None:
        self.counters: Dict[str, int] = defaultdict(int)
        self.timers: Dict[str, list[float]] = defaultdict(list)
        self.gauges: Dict[str, float] = {}

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter metric."""
        self.counters[name] += value
        logger.debug(f"Counter '{name}' incremented to {self.counters[name]}")

    def record_time(self, name: str, duration: float) -> None:
        """Record a timing metric in seconds."""
        self.timers[name].append(duration)
        logger.debug(f"Timer '{name}' recorded: {duration:.3f}s")

    def adjust_gauge(self, name: str, delta: float) -> float:
        """Move a gauge up or down, e.g. open sockets or exports in flight."""
        value = self.gauges.get(name, 0) + delta
        self.gauges[name] = value
        logger.debug(f"Gauge '{name}' now {value}")
        return value

    def get_stats(self) -> dict:
        """Get current metrics statistics."""
        stats = {
            "counters": dict(self.counters),
            "gauges": dict(self.gauges),
            "timers": {}
        }

        for name, times in self.timers.items():
            if times:
                stats["timers"][name] = {
                    "count": len(times),
                    "avg": sum(times) / len(times),
                    "min": min(times),
                    "max": max(times),
                }

        return stats

    def reset(self) -> None:
        """Reset all metrics."""
        self.counters.clear()
        self.timers.clear()
        self.gauges.clear()
        logger.info("Metrics reset")


# Global metrics instance
metrics = MetricsCollector()


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, metrics_collector: Optional[MetricsCollector] = None):
        self.name = name
        self.metrics = metrics_collector or metrics
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time:
            self.duration = time.perf_counter() - self.start_time
            self.metrics.record_time(self.name, self.duration)
