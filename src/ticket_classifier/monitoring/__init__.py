"""Monitoring and metrics instrumentation for the ticket classifier.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from ticket_classifier.monitoring.metrics import (
    cache_lookups_total,
    classifications_total,
    current_concurrency,
    discovery_refreshes_total,
    fallback_classifications_total,
    model_call_latency_seconds,
    model_calls_total,
    throttle_events_total,
    validation_failures_total,
)

__all__ = [
    "model_calls_total",
    "model_call_latency_seconds",
    "throttle_events_total",
    "current_concurrency",
    "classifications_total",
    "fallback_classifications_total",
    "cache_lookups_total",
    "discovery_refreshes_total",
    "validation_failures_total",
]
