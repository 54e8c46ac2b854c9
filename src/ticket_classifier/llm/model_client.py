"""
Model client: one model, one prompt, one outcome.

Wraps a transport adapter (BaseLLMClient) and the validation pipeline, and
reports every call to the rate-limit governor. Anticipated failures come back
as InvocationOutcome values; only programming errors propagate.
"""

import time
from typing import Any, Optional

import structlog

from ticket_classifier.concurrency.governor import RateLimitGovernor
from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.llm.exceptions import LLMRateLimitError, LLMTransportError
from ticket_classifier.models.enums import InvocationStatus
from ticket_classifier.models.llm_models import InvocationOutcome, LLMGenerationRequest
from ticket_classifier.monitoring.metrics import model_call_latency_seconds, model_calls_total
from ticket_classifier.validation import ValidationError, ValidationPipeline


class ModelClient:
    """
    Invoke a single model and classify its answer.

    Outcome mapping:
    - valid classification -> success, governor.record_success()
    - LLMRateLimitError (429) -> rate_limited, governor.record_failure(throttled=True)
    - LLMTransportError after client retries -> transport_failed, governor.record_failure()
    - ValidationError -> validation_failed, governor.record_failure()
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        governor: RateLimitGovernor,
        validation_pipeline: Optional[ValidationPipeline] = None,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        logger: Optional[Any] = None,
    ):
        self.llm_client = llm_client
        self.governor = governor
        self.validation_pipeline = validation_pipeline or ValidationPipeline()
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logger or structlog.get_logger(__name__)

    async def invoke(self, model_id: str, prompt: str) -> InvocationOutcome:
        """
        Send one prompt to one model.

        Args:
            model_id: Backend model identifier
            prompt: Complete prompt text

        Returns:
            InvocationOutcome (never raises for backend or validation failures)
        """
        request = LLMGenerationRequest(
            prompt=prompt,
            model=model_id,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=True,
        )
        start_time = time.monotonic()

        try:
            response = await self.llm_client.generate(request)
            classification = self.validation_pipeline.validate(response.content, model_id)

        except LLMRateLimitError as e:
            self.governor.record_failure(throttled=True)
            return self._outcome(InvocationStatus.RATE_LIMITED, model_id, start_time, error=e)

        except LLMTransportError as e:
            self.governor.record_failure()
            return self._outcome(InvocationStatus.TRANSPORT_FAILED, model_id, start_time, error=e)

        except ValidationError as e:
            self.governor.record_failure()
            return self._outcome(InvocationStatus.VALIDATION_FAILED, model_id, start_time, error=e)

        self.governor.record_success()
        return self._outcome(
            InvocationStatus.SUCCESS, model_id, start_time, classification=classification
        )

    def _outcome(
        self,
        status: InvocationStatus,
        model_id: str,
        start_time: float,
        classification=None,
        error: Optional[Exception] = None,
    ) -> InvocationOutcome:
        latency = time.monotonic() - start_time
        succeeded = status is InvocationStatus.SUCCESS

        model_calls_total.labels(model=model_id, outcome=status.value).inc()
        model_call_latency_seconds.labels(model=model_id, success=str(succeeded).lower()).observe(latency)

        if succeeded:
            self.logger.debug("Model call succeeded", model=model_id, latency_ms=int(latency * 1000))
        else:
            self.logger.warning(
                "Model call failed",
                model=model_id,
                outcome=status.value,
                error=getattr(error, "message", str(error)),
                latency_ms=int(latency * 1000)
            )

        return InvocationOutcome(
            status=status,
            model_id=model_id,
            classification=classification,
            error=error,
            latency_ms=int(latency * 1000),
        )
