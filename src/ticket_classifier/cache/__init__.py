"""
Semantic classification cache.

- key_generator.py: normalized-content cache keys
- semantic_cache.py: get/put of Classification by ticket content
- metrics.py: hit/miss counters
- store.py: key-value store port (in-memory and Redis adapters)
- redis_client.py: shared async Redis connection pool
"""

from ticket_classifier.cache.key_generator import generate_key, normalize_text
from ticket_classifier.cache.metrics import CacheMetrics
from ticket_classifier.cache.semantic_cache import SemanticCache
from ticket_classifier.cache.store import (
    CacheStore,
    CacheStoreError,
    InMemoryCacheStore,
    RedisCacheStore,
    create_cache_store,
)

__all__ = [
    "SemanticCache",
    "CacheMetrics",
    "CacheStore",
    "CacheStoreError",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "create_cache_store",
    "generate_key",
    "normalize_text",
]
