"""
Semantic cache for ticket classifications.

Storage Strategy:
- Key: "classification:{sha256(normalized summary + description)}"
- Value: Classification as JSON
- TTL: CACHE_TTL_SECONDS (30 minutes by default)

Expired, unreadable or invalid entries count as misses; invalid ones are
removed on read. Degraded placeholders are never stored. A store outage
degrades to "always miss" and never fails a classification.
"""

import json
from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ticket_classifier.cache.key_generator import generate_key
from ticket_classifier.cache.metrics import CacheMetrics
from ticket_classifier.cache.store import CacheStore, CacheStoreError
from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.output_models import Classification


DEFAULT_TTL_SECONDS = 1800


class SemanticCache:
    """Content-addressed classification cache with hit/miss metrics."""

    def __init__(
        self,
        store: CacheStore,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        metrics: Optional[CacheMetrics] = None,
        logger: Optional[Any] = None,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.metrics = metrics or CacheMetrics()
        self.logger = logger or structlog.get_logger(__name__)

    async def get(self, record: TicketRecord) -> Optional[Classification]:
        """
        Look up a classification for a record.

        Args:
            record: Ticket to look up

        Returns:
            Cached Classification, or None on miss
        """
        key = generate_key(record)

        try:
            raw = await self.store.get(key)
        except CacheStoreError as e:
            self.logger.warning("Cache store unavailable on read", issue_key=record.issue_key, error=e.message)
            self.metrics.record_miss()
            return None

        if raw is None:
            self.logger.debug("Cache miss", issue_key=record.issue_key, cache_key=key)
            self.metrics.record_miss()
            return None

        classification = self._decode(raw)
        if classification is None:
            self.logger.warning("Invalid cache data, removing entry", issue_key=record.issue_key, cache_key=key)
            await self._forget(key)
            self.metrics.record_miss()
            return None

        self.logger.debug("Cache hit", issue_key=record.issue_key, cache_key=key)
        self.metrics.record_hit()
        return classification

    async def put(self, record: TicketRecord, classification: Classification) -> None:
        """Store a model-produced classification; placeholders are skipped."""
        if classification.is_fallback:
            self.logger.debug("Not caching fallback classification", issue_key=record.issue_key)
            return

        key = generate_key(record)
        try:
            await self.store.put(key, classification.model_dump_json(), self.ttl_seconds)
        except CacheStoreError as e:
            self.logger.warning("Cache store unavailable on write", issue_key=record.issue_key, error=e.message)
            return

        self.logger.debug(
            "Cache set",
            issue_key=record.issue_key,
            cache_key=key,
            ttl_seconds=self.ttl_seconds
        )

    async def is_available(self) -> bool:
        return await self.store.ping()

    @staticmethod
    def _decode(raw: str) -> Optional[Classification]:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        try:
            return Classification.model_validate(data)
        except PydanticValidationError:
            return None

    async def _forget(self, key: str) -> None:
        try:
            await self.store.forget(key)
        except CacheStoreError as e:
            self.logger.warning("Failed to remove invalid cache entry", cache_key=key, error=e.message)
