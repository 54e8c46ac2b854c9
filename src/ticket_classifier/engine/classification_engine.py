"""
Classification engine: the fallback chain from cache to placeholder.

Tiers, in order:
1. Semantic cache
2. Concurrent waves on the primary model (batch only)
3. Serial walk over the static roster, then the discovered roster
4. Degraded placeholder (batch only)

classify() raises AllModelsFailedError when tier 3 is exhausted.
classify_batch() never raises and always returns one result per input, in
input order.
"""

import asyncio
from typing import Any, Optional, Sequence

import structlog

from ticket_classifier.cache.semantic_cache import SemanticCache
from ticket_classifier.clock import Clock, SystemClock
from ticket_classifier.concurrency.exceptions import BatchExecutionError
from ticket_classifier.concurrency.executor import ConcurrentBatchExecutor
from ticket_classifier.concurrency.governor import RateLimitGovernor
from ticket_classifier.config import Settings
from ticket_classifier.discovery.service import ModelDiscoveryService
from ticket_classifier.engine.exceptions import AllModelsFailedError
from ticket_classifier.llm.model_client import ModelClient
from ticket_classifier.llm.prompt_builder import PromptBuilder
from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.output_models import Classification, ProcessingStats
from ticket_classifier.monitoring.metrics import (
    classifications_total,
    fallback_classifications_total,
)


class ClassificationEngine:
    """
    Orchestrates cache, concurrent dispatch, serial fallback and placeholders.

    Collaborators are injected; see from_settings() for the standard wiring.
    """

    def __init__(
        self,
        model_client: ModelClient,
        prompt_builder: PromptBuilder,
        governor: RateLimitGovernor,
        cache: SemanticCache,
        discovery: ModelDiscoveryService,
        static_models: Sequence[str],
        executor: Optional[ConcurrentBatchExecutor] = None,
        use_discovery_on_failure: bool = True,
        total_timeout: Optional[float] = 30.0,
        batch_timeout: Optional[float] = None,
        clock: Optional[Clock] = None,
        logger: Optional[Any] = None,
    ):
        self.model_client = model_client
        self.prompt_builder = prompt_builder
        self.governor = governor
        self.cache = cache
        self.discovery = discovery
        self.static_models = list(static_models)
        self.use_discovery_on_failure = use_discovery_on_failure
        self.total_timeout = total_timeout
        self.batch_timeout = batch_timeout
        self.clock = clock or SystemClock()
        self.logger = logger or structlog.get_logger(__name__)

        self.executor = executor or ConcurrentBatchExecutor(
            model_client=model_client,
            prompt_builder=prompt_builder,
            governor=governor,
            primary_model=self.static_models[0] if self.static_models else None,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        model_client: ModelClient,
        prompt_builder: PromptBuilder,
        governor: RateLimitGovernor,
        cache: SemanticCache,
        discovery: ModelDiscoveryService,
        clock: Optional[Clock] = None,
    ) -> "ClassificationEngine":
        return cls(
            model_client=model_client,
            prompt_builder=prompt_builder,
            governor=governor,
            cache=cache,
            discovery=discovery,
            static_models=settings.AI_DEFAULT_MODELS,
            use_discovery_on_failure=settings.AI_USE_DISCOVERY_ON_FAILURE,
            total_timeout=settings.AI_TOTAL_TIMEOUT,
            batch_timeout=settings.AI_BATCH_TIMEOUT,
            clock=clock,
        )

    # === Single record ===

    async def classify(self, record: TicketRecord) -> Classification:
        """
        Classify one ticket through cache and the full model roster.

        Raises:
            AllModelsFailedError: No model produced a valid classification
        """
        cached = await self.cache.get(record)
        if cached is not None:
            classifications_total.labels(tier="cache").inc()
            return cached

        classification = await self._classify_uncached(record)
        await self.cache.put(record, classification)
        classifications_total.labels(tier="serial").inc()
        return classification

    async def _classify_uncached(self, record: TicketRecord) -> Classification:
        prompt = self.prompt_builder.build(record)
        started_at = self.clock.now()
        attempted: list[str] = []

        for model_id in self.static_models:
            if self._deadline_passed(started_at):
                break
            outcome = await self.model_client.invoke(model_id, prompt)
            attempted.append(model_id)
            if outcome.succeeded:
                self._log_success(record, model_id, started_at, discovered=False)
                return outcome.classification
            self.logger.warning(
                "Model failed, trying next",
                model=model_id,
                issue_key=record.issue_key,
                outcome=outcome.status.value
            )

        if self.use_discovery_on_failure and not self._deadline_passed(started_at):
            self.logger.info("Trying discovered models", issue_key=record.issue_key)
            candidates = await self.discovery.list_candidate_models()
            if not candidates:
                self.logger.error("No models discovered via auto-discovery", issue_key=record.issue_key)

            for descriptor in candidates:
                if descriptor.id in attempted:
                    continue
                if self._deadline_passed(started_at):
                    break
                outcome = await self.model_client.invoke(descriptor.id, prompt)
                attempted.append(descriptor.id)
                if outcome.succeeded:
                    self._log_success(record, descriptor.id, started_at, discovered=True)
                    return outcome.classification
                self.logger.warning(
                    "Discovered model failed, trying next",
                    model=descriptor.id,
                    issue_key=record.issue_key,
                    outcome=outcome.status.value
                )

        if self._deadline_passed(started_at):
            self.logger.warning(
                "Roster walk stopped at total timeout",
                issue_key=record.issue_key,
                total_timeout=self.total_timeout,
                attempted=len(attempted)
            )

        raise AllModelsFailedError(record.issue_key, attempted)

    def _deadline_passed(self, started_at: float) -> bool:
        if self.total_timeout is None:
            return False
        return self.clock.now() - started_at >= self.total_timeout

    def _log_success(self, record: TicketRecord, model_id: str, started_at: float, discovered: bool) -> None:
        self.logger.info(
            "AI classification successful",
            model=model_id,
            issue_key=record.issue_key,
            discovered_model=discovered,
            processing_time_ms=int((self.clock.now() - started_at) * 1000)
        )

    # === Batch ===

    async def classify_batch(
        self,
        records: Sequence[TicketRecord],
        timeout: Optional[float] = None,
    ) -> list[Classification]:
        """
        Classify many tickets; one result per input, in input order.

        Args:
            records: Tickets to classify
            timeout: Overall deadline in seconds (default: AI_BATCH_TIMEOUT,
                None disables). Unresolved tickets get the placeholder.

        Returns:
            Classifications index-aligned with records. Never raises.
        """
        if not records:
            return []

        deadline = timeout if timeout is not None else self.batch_timeout
        results: list[Optional[Classification]] = [None] * len(records)
        failed: set[int] = set()

        try:
            if deadline is None:
                await self._resolve_batch(records, results, failed)
            else:
                await asyncio.wait_for(self._resolve_batch(records, results, failed), timeout=deadline)
        except asyncio.TimeoutError:
            self.logger.warning(
                "Batch deadline exceeded",
                timeout=deadline,
                unresolved=sum(1 for r in results if r is None)
            )

        final: list[Classification] = []
        for index, classification in enumerate(results):
            if classification is None:
                reason = "all_models_failed" if index in failed else "deadline_exceeded"
                fallback_classifications_total.labels(reason=reason).inc()
                classifications_total.labels(tier="fallback").inc()
                classification = Classification.fallback()
            final.append(classification)

        degraded = sum(1 for c in final if c.is_fallback)
        self.logger.info("Batch classified", records=len(final), degraded=degraded)
        return final

    async def _resolve_batch(
        self,
        records: Sequence[TicketRecord],
        results: list[Optional[Classification]],
        failed: set[int],
    ) -> None:
        """Fill results in place so partial progress survives cancellation."""
        uncached: list[int] = []
        for index, record in enumerate(records):
            cached = await self.cache.get(record)
            if cached is not None:
                results[index] = cached
                classifications_total.labels(tier="cache").inc()
            else:
                uncached.append(index)

        if not uncached:
            return

        async def on_result(position: int, classification: Classification) -> None:
            index = uncached[position]
            results[index] = classification
            classifications_total.labels(tier="concurrent").inc()
            await self.cache.put(records[index], classification)

        try:
            await self.executor.run([records[i] for i in uncached], on_result=on_result)
        except BatchExecutionError as e:
            self.logger.warning("Concurrent dispatch unavailable, going serial", error=e.message)
        except Exception as e:
            self.logger.exception("Concurrent dispatch failed, going serial", error=str(e))

        pending = [i for i in uncached if results[i] is None]
        if pending:
            self.logger.info("Serial fallback", pending=len(pending))

        for index in pending:
            record = records[index]
            try:
                classification = await self._classify_uncached(record)
            except AllModelsFailedError as e:
                failed.add(index)
                self.logger.error(
                    "All models failed, using fallback classification",
                    issue_key=record.issue_key,
                    attempted_models=e.attempted_models
                )
                continue
            except Exception as e:
                failed.add(index)
                self.logger.exception("Serial classification error", issue_key=record.issue_key, error=str(e))
                continue

            results[index] = classification
            classifications_total.labels(tier="serial").inc()
            await self.cache.put(record, classification)

    # === Stats ===

    def get_processing_stats(self) -> ProcessingStats:
        return ProcessingStats(
            current_concurrency=self.governor.current_concurrency(),
            is_throttled=self.governor.is_throttled(),
            recommended_delay_ms=int(round(self.governor.recommended_delay() * 1000)),
        )
