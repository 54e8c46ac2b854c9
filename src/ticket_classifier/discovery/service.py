"""
Model discovery: the backend's free chat models, ranked, cached.

Storage Strategy:
- Key: AI_DISCOVERY_CACHE_KEY ("ai_models_discovered_free")
- Value: JSON list of ModelDescriptor dicts, best first
- TTL: AI_DISCOVERY_CACHE_TTL (6 hours by default)

Failed refreshes return [] and are not stored. Concurrent misses share one
refresh; callers that arrive while it runs get the last good snapshot if
there is one.
"""

import asyncio
import json
from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ticket_classifier.cache.store import CacheStore, CacheStoreError
from ticket_classifier.config import Settings
from ticket_classifier.discovery.catalog import best_model_id, filter_and_rank
from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.llm.exceptions import LLMClientError
from ticket_classifier.models.llm_models import ModelDescriptor
from ticket_classifier.monitoring.metrics import discovery_refreshes_total


class ModelDiscoveryService:
    """Fetch, filter, rank and cache candidate fallback models."""

    def __init__(
        self,
        llm_client: BaseLLMClient,
        store: CacheStore,
        enabled: bool = True,
        cache_key: str = "ai_models_discovered_free",
        cache_ttl_seconds: int = 21600,
        max_models: int = 10,
        min_ranking: int = 50,
        logger: Optional[Any] = None,
    ):
        self.llm_client = llm_client
        self.store = store
        self.enabled = enabled
        self.cache_key = cache_key
        self.cache_ttl_seconds = cache_ttl_seconds
        self.max_models = max_models
        self.min_ranking = min_ranking
        self.logger = logger or structlog.get_logger(__name__)

        self._refresh_lock = asyncio.Lock()
        self._snapshot: Optional[list[ModelDescriptor]] = None
        self._generation = 0
        self._last_result: list[ModelDescriptor] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        llm_client: BaseLLMClient,
        store: CacheStore,
    ) -> "ModelDiscoveryService":
        return cls(
            llm_client=llm_client,
            store=store,
            enabled=settings.AI_AUTO_DISCOVERY,
            cache_key=settings.AI_DISCOVERY_CACHE_KEY,
            cache_ttl_seconds=settings.AI_DISCOVERY_CACHE_TTL,
            max_models=settings.AI_DISCOVERY_MAX_MODELS,
            min_ranking=settings.AI_DISCOVERY_MIN_RANKING,
        )

    async def list_candidate_models(self) -> list[ModelDescriptor]:
        """
        Ranked candidate models, best first.

        Returns:
            Cached or freshly discovered descriptors; [] when discovery is
            disabled or the catalog could not be fetched
        """
        if not self.enabled:
            self.logger.debug("Auto-discovery disabled")
            return []

        cached = await self._read_cache()
        if cached is not None:
            return cached

        if self._refresh_lock.locked() and self._snapshot is not None:
            self.logger.debug("Refresh in flight, serving stale snapshot", count=len(self._snapshot))
            return list(self._snapshot)

        generation = self._generation
        async with self._refresh_lock:
            if self._generation != generation:
                # Another caller refreshed while we waited
                return list(self._last_result)

            cached = await self._read_cache()
            if cached is not None:
                return cached

            result = await self._refresh()
            self._generation += 1
            self._last_result = result
            return list(result)

    async def best_model(self) -> Optional[str]:
        return best_model_id(await self.list_candidate_models())

    async def invalidate_cache(self) -> None:
        """Forget the stored result and the in-process snapshot."""
        try:
            await self.store.forget(self.cache_key)
        except CacheStoreError as e:
            self.logger.warning("Failed to clear discovery cache", error=e.message)
        self._snapshot = None
        self._last_result = []
        self.logger.info("Discovery cache invalidated", cache_key=self.cache_key)

    invalidate = invalidate_cache

    async def _refresh(self) -> list[ModelDescriptor]:
        self.logger.info("Starting model discovery")

        try:
            catalog = await self.llm_client.list_models()
        except LLMClientError as e:
            discovery_refreshes_total.labels(outcome="failure").inc()
            self.logger.error("Model discovery failed", error=e.message, details=e.details)
            return []

        try:
            descriptors = filter_and_rank(catalog, self.min_ranking, self.max_models)
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            discovery_refreshes_total.labels(outcome="failure").inc()
            self.logger.error("Model catalog could not be parsed", error=str(e), error_type=type(e).__name__)
            return []

        discovery_refreshes_total.labels(outcome="success").inc()
        self.logger.info(
            "Discovered free models",
            total_models=len(catalog),
            free_models=len(descriptors),
            top_5=[d.id for d in descriptors[:5]]
        )

        self._snapshot = descriptors
        await self._write_cache(descriptors)
        return descriptors

    async def _read_cache(self) -> Optional[list[ModelDescriptor]]:
        try:
            raw = await self.store.get(self.cache_key)
        except CacheStoreError as e:
            self.logger.warning("Discovery cache unavailable on read", error=e.message)
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("expected a JSON list")
            descriptors = [ModelDescriptor.model_validate(item) for item in data]
        except (ValueError, PydanticValidationError) as e:
            self.logger.warning("Invalid discovery cache data, removing entry", error=str(e))
            try:
                await self.store.forget(self.cache_key)
            except CacheStoreError as store_error:
                self.logger.warning("Failed to remove discovery cache entry", error=store_error.message)
            return None

        self._snapshot = descriptors
        return descriptors

    async def _write_cache(self, descriptors: list[ModelDescriptor]) -> None:
        payload = json.dumps([d.model_dump() for d in descriptors])
        try:
            await self.store.put(self.cache_key, payload, self.cache_ttl_seconds)
        except CacheStoreError as e:
            self.logger.warning("Discovery cache unavailable on write", error=e.message)
