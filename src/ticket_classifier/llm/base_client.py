"""
Abstract base client for LLM inference.

Defines the interface that inference backend adapters must adhere to. This
abstraction allows swapping backends without changing validation, the model
client or the engine.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

import structlog

from ticket_classifier.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send generation requests to the backend
    - Retry transport-level failures with exponential backoff
    - Surface throttling immediately as LLMRateLimitError
    - Fetch the raw model catalog

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Response validation (that's ValidationPipeline's job)
    - Model fallback (that's ClassificationEngine's job)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff_base: float = 1.0,
        **kwargs
    ):
        """
        Initialize base client.

        Args:
            base_url: Base URL of the inference API (e.g., https://openrouter.ai/api/v1)
            timeout: Per-call timeout in seconds
            max_retries: Transport retries after the first attempt
            backoff_base: First backoff delay in seconds, doubled per retry
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.extra_config = kwargs

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=max_retries
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion.

        Args:
            request: Standardized generation request

        Returns:
            LLMGenerationResponse with generated text and metadata

        Raises:
            LLMRateLimitError: Backend throttled the call (not retried)
            LLMModelNotAvailableError: Model not found (not retried)
            LLMTimeoutError: Per-call timeout exceeded on every attempt
            LLMTransportError: Any other transport failure after retries
        """
        pass

    @abstractmethod
    async def list_models(self) -> list[Dict[str, Any]]:
        """
        Fetch the raw model catalog.

        Returns:
            List of raw model metadata dicts as published by the backend

        Raises:
            LLMTransportError: Catalog could not be fetched or parsed
        """
        pass

    async def health_check(self) -> bool:
        """
        Check that the backend is reachable.

        Returns:
            True if the catalog endpoint answers, False otherwise. Never raises.
        """
        try:
            await self.list_models()
            return True
        except Exception as e:
            logger.warning("LLM health check failed", error=str(e))
            return False

    async def close(self):
        """Release pooled connections. Default implementation does nothing."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry number `attempt` (1-indexed): base, 2*base, 4*base..."""
        return self.backoff_base * (2 ** (attempt - 1))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
