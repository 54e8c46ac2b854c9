"""
Wave-based bounded-parallel dispatch of classification attempts.

A batch is cut into waves whose size is re-read from the governor before each
wave. Attempts inside a wave run concurrently; the wave ends when all of them
have finished. Throttles seen in a wave shrink the next one.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Sequence

import structlog

from ticket_classifier.concurrency.exceptions import BatchExecutionError
from ticket_classifier.concurrency.governor import RateLimitGovernor
from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.llm_models import InvocationOutcome
from ticket_classifier.models.output_models import Classification

if TYPE_CHECKING:
    from ticket_classifier.llm.model_client import ModelClient
    from ticket_classifier.llm.prompt_builder import PromptBuilder


OnResult = Callable[[int, Classification], Awaitable[None]]


class ConcurrentBatchExecutor:
    """
    Dispatch one attempt per record on the primary model, wave by wave.

    Returns a list index-aligned with the input: the Classification for each
    record that succeeded, None for each that did not. A record's failure never
    cancels or fails its siblings.
    """

    def __init__(
        self,
        model_client: "ModelClient",
        prompt_builder: "PromptBuilder",
        governor: RateLimitGovernor,
        primary_model: Optional[str],
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: Optional[Any] = None,
    ):
        self.model_client = model_client
        self.prompt_builder = prompt_builder
        self.governor = governor
        self.primary_model = primary_model
        self._sleep = sleep
        self.logger = logger or structlog.get_logger(__name__)

    async def run(
        self,
        records: Sequence[TicketRecord],
        on_result: Optional[OnResult] = None,
    ) -> list[Optional[Classification]]:
        """
        Run every record through the primary model in governor-sized waves.

        Args:
            records: Records to classify
            on_result: Awaited with (index, classification) as each success lands

        Returns:
            Index-aligned results, None where the attempt failed

        Raises:
            BatchExecutionError: The batch cannot be attempted
        """
        if not records:
            return []
        if not self.primary_model:
            raise BatchExecutionError("No primary model configured for concurrent dispatch")

        results: list[Optional[Classification]] = [None] * len(records)
        all_succeeded = True
        start = 0
        wave_number = 0

        while start < len(records):
            wave_size = self.governor.current_concurrency()
            if wave_size < 1:
                raise BatchExecutionError(
                    f"Governor reported invalid concurrency {wave_size}",
                    details={"concurrency": wave_size}
                )

            wave = list(range(start, min(start + wave_size, len(records))))
            wave_number += 1
            self.logger.debug(
                "Dispatching wave",
                wave=wave_number,
                size=len(wave),
                first_index=wave[0]
            )

            outcomes = await asyncio.gather(
                *(self._attempt(i, records[i], on_result) for i in wave)
            )

            throttled = False
            for i, outcome in zip(wave, outcomes):
                if outcome is not None and outcome.succeeded:
                    results[i] = outcome.classification
                else:
                    all_succeeded = False
                    if outcome is not None and outcome.rate_limited:
                        throttled = True

            if throttled:
                self.governor.record_throttle()

            start += len(wave)
            if start < len(records):
                delay = self.governor.recommended_delay()
                if delay > 0:
                    self.logger.info("Pausing between waves", delay_seconds=round(delay, 3))
                    await self._sleep(delay)

        if all_succeeded:
            self.governor.increase_concurrency()

        self.logger.info(
            "Concurrent batch finished",
            records=len(records),
            succeeded=sum(1 for r in results if r is not None),
            waves=wave_number
        )
        return results

    async def _attempt(
        self,
        index: int,
        record: TicketRecord,
        on_result: Optional[OnResult],
    ) -> Optional[InvocationOutcome]:
        try:
            prompt = self.prompt_builder.build(record)
            outcome = await self.model_client.invoke(self.primary_model, prompt)
        except Exception as e:
            # Isolate the record; siblings keep running
            self.logger.exception(
                "Unexpected error in concurrent attempt",
                issue_key=record.issue_key,
                index=index,
                error=str(e)
            )
            return None

        if outcome.succeeded and on_result is not None:
            try:
                await on_result(index, outcome.classification)
            except Exception as e:
                # The classification stands; only the progress report was lost
                self.logger.exception(
                    "on_result callback failed",
                    issue_key=record.issue_key,
                    index=index,
                    error=str(e)
                )
        return outcome
