"""
Integration tests for the Redis cache store.

Requires Redis on localhost:6379 (database 15 is used and flushed).
"""

import pytest

from ticket_classifier.cache.metrics import CacheMetrics
from ticket_classifier.cache.semantic_cache import SemanticCache
from ticket_classifier.cache.store import RedisCacheStore
from ticket_classifier.models.output_models import Classification


pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_put_get_forget(real_async_redis_client):
    store = RedisCacheStore(real_async_redis_client)

    await store.put("classification:test", '{"a": 1}', ttl_seconds=60)
    assert await store.get("classification:test") == '{"a": 1}'
    assert 0 < await real_async_redis_client.ttl("classification:test") <= 60

    await store.forget("classification:test")
    assert await store.get("classification:test") is None
    assert await store.ping() is True


@pytest.mark.asyncio
async def test_semantic_cache_over_redis(real_async_redis_client, sample_record, valid_classification_data):
    cache = SemanticCache(store=RedisCacheStore(real_async_redis_client), ttl_seconds=30, metrics=CacheMetrics())
    classification = Classification(**valid_classification_data, model_used="primary/model:free")

    await cache.put(sample_record, classification)

    assert await cache.get(sample_record) == classification
    assert cache.metrics.snapshot().hits == 1
