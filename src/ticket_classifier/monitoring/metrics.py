"""Custom Prometheus metrics for the ticket classifier.

These metrics are exposed at /metrics and should be scraped by Prometheus.
Alert rules should be configured for:
- fallback_classifications_total (any increase means degraded output reached callers)
- model_calls_total{outcome="rate_limited"} (sustained throttling)
- current_concurrency (stuck at 1 means the backend keeps throttling)
"""

from prometheus_client import Counter, Gauge, Histogram

# === Model Call Metrics ===

model_calls_total = Counter(
    "model_calls_total",
    "Total model invocations by model and outcome",
    ["model", "outcome"],
)
"""
Model invocation counter.

Labels:
- model: Model identifier
- outcome: success, validation_failed, transport_failed, rate_limited
"""

model_call_latency_seconds = Histogram(
    "model_call_latency_seconds",
    "Model invocation latency in seconds (including transport retries)",
    ["model", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0],
)

# === Rate Limiting Metrics ===

throttle_events_total = Counter(
    "throttle_events_total",
    "Throttle signals recorded by the rate-limit governor",
)

current_concurrency = Gauge(
    "current_concurrency",
    "Wave size currently allowed by the rate-limit governor",
)

# === Classification Metrics ===

classifications_total = Counter(
    "classifications_total",
    "Classifications returned by resolution tier",
    ["tier"],
)
"""
Labels:
- tier: cache, concurrent, serial, fallback
"""

fallback_classifications_total = Counter(
    "fallback_classifications_total",
    "Synthesized placeholder classifications by reason",
    ["reason"],
)
"""
Labels:
- reason: all_models_failed, deadline_exceeded
"""

# === Cache Metrics ===

cache_lookups_total = Counter(
    "cache_lookups_total",
    "Semantic cache lookups by result",
    ["result"],
)

# === Discovery Metrics ===

discovery_refreshes_total = Counter(
    "discovery_refreshes_total",
    "Model catalog refreshes by outcome",
    ["outcome"],
)

# === Validation Metrics ===

validation_failures_total = Counter(
    "validation_failures_total",
    "Model responses rejected by the validation pipeline",
    ["stage", "error_type"],
)
"""
Labels:
- stage: stage1, stage2, stage3
- error_type: empty_content, json_decode_error, not_json_object, schema_violation, ...
"""
