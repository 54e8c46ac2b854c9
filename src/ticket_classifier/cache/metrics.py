"""
Hit/miss counters for the semantic cache.
"""

import threading

from ticket_classifier.models.output_models import CacheMetricsSnapshot
from ticket_classifier.monitoring.metrics import cache_lookups_total


class CacheMetrics:
    """
    Thread-safe monotonic hit/miss counters.

    Counts are process-local and resettable; every event is also mirrored to
    the cache_lookups_total Prometheus counter, which is never reset.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1
        cache_lookups_total.labels(result="hit").inc()

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1
        cache_lookups_total.labels(result="miss").inc()

    def snapshot(self) -> CacheMetricsSnapshot:
        with self._lock:
            hits, misses = self._hits, self._misses

        total = hits + misses
        hit_rate = round(hits / total * 100, 1) if total > 0 else 0.0
        return CacheMetricsSnapshot(
            hits=hits,
            misses=misses,
            total_requests=total,
            hit_rate=hit_rate,
        )

    def reset(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0
