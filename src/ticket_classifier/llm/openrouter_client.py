"""
OpenRouter client implementation for LLM inference.

Communicates with the OpenRouter chat-completions API using httpx AsyncClient.
Supports:
- JSON object response format
- Connection pooling and transport retry with exponential backoff
- Immediate surfacing of HTTP 429 throttles
- Model catalog listing for auto-discovery
"""

import asyncio
import time
from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.llm.exceptions import (
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMTransportError,
)
from ticket_classifier.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)

CATALOG_TIMEOUT_SECONDS = 15.0


class OpenRouterClient(BaseLLMClient):
    """
    OpenRouter-specific LLM client using httpx for async HTTP communication.

    API Endpoints:
    - POST /chat/completions: Generate completion
    - GET /models: Full model catalog (pricing, modality, context length)

    Features:
    - JSON object response format
    - Connection pooling via persistent AsyncClient (or an injected one)
    - Transport retry with exponential backoff; 429 and 404 are never retried
    """

    def __init__(
        self,
        base_url: str = "https://openrouter.ai/api/v1",
        api_key: str = "",
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff_base: float = 1.0,
        app_url: str = "http://localhost",
        app_title: str = "AI Ticket Classifier",
        http_client: Optional[httpx.AsyncClient] = None,
        connection_limits: Optional[httpx.Limits] = None,
        **kwargs
    ):
        """
        Initialize OpenRouter client.

        Args:
            base_url: OpenRouter API base URL
            api_key: Bearer token
            timeout: Per-call timeout in seconds
            max_retries: Transport retries after the first attempt
            backoff_base: First backoff delay in seconds, doubled per retry
            app_url: Sent as HTTP-Referer (OpenRouter app attribution)
            app_title: Sent as X-Title (OpenRouter app attribution)
            http_client: Pre-built AsyncClient (tests inject one with a MockTransport)
            connection_limits: httpx connection pool limits (default: 20 max connections)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, max_retries, backoff_base, **kwargs)

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )

        self.api_key = api_key
        self.app_url = app_url
        self.app_title = app_title
        self._client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None
        self._connection_limits = connection_limits

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.app_url,
            "X-Title": self.app_title,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers=self._headers(),
                follow_redirects=True
            )
            self._owns_client = True
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using the chat-completions API.

        POST /chat/completions with payload:
        {
            "model": "qwen/qwen3-coder:free",
            "messages": [{"role": "user", "content": "..."}],
            "temperature": 0.1,
            "max_tokens": 1000,
            "response_format": {"type": "json_object"}
        }

        Response:
        {
            "id": "gen-...",
            "model": "qwen/qwen3-coder:free",
            "choices": [{"message": {"content": "{...}"}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 412, "completion_tokens": 58}
        }
        """
        start_time = time.monotonic()

        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": [{"role": "user", "content": request.prompt}],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}

        total_attempts = self.max_retries + 1
        last_error: Optional[LLMTransportError] = None

        for attempt in range(1, total_attempts + 1):
            try:
                client = await self._get_client()
                response = await client.post(
                    "/chat/completions",
                    json=payload,
                    headers=self._headers(),
                    timeout=self.timeout
                )

                if response.status_code == 429:
                    retry_after = response.headers.get("Retry-After")
                    raise LLMRateLimitError(
                        f"Rate limit exceeded for model {request.model}",
                        details={"model": request.model, "status": 429},
                        retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
                    )
                if response.status_code == 404:
                    raise LLMModelNotAvailableError(
                        f"Model not found: {request.model}",
                        details={"model": request.model, "status": 404}
                    )
                response.raise_for_status()

                return self._parse_completion(response, request, start_time, attempt)

            except (LLMRateLimitError, LLMModelNotAvailableError):
                raise

            except httpx.TimeoutException as e:
                last_error = LLMTimeoutError(
                    f"Request timeout after {self.timeout}s",
                    details={"model": request.model, "attempt": attempt, "timeout": self.timeout}
                )
                logger.warning(
                    "OpenRouter request timeout",
                    model=request.model,
                    attempt=attempt,
                    total_attempts=total_attempts,
                    error=str(e)
                )

            except httpx.HTTPStatusError as e:
                last_error = LLMTransportError(
                    f"OpenRouter API error: {e.response.status_code}",
                    details={
                        "model": request.model,
                        "status": e.response.status_code,
                        "error": e.response.text[:500],
                    }
                )
                logger.warning(
                    "OpenRouter HTTP error",
                    model=request.model,
                    status_code=e.response.status_code,
                    attempt=attempt
                )

            except httpx.TransportError as e:
                last_error = LLMTransportError(
                    f"Network error: {str(e)}",
                    details={"model": request.model, "attempt": attempt, "error_type": type(e).__name__}
                )
                logger.warning(
                    "OpenRouter network error",
                    model=request.model,
                    attempt=attempt,
                    error=str(e)
                )

            except httpx.HTTPError as e:
                # DecodingError, TooManyRedirects and other request failures
                last_error = LLMTransportError(
                    f"OpenRouter request failed: {str(e)}",
                    details={"model": request.model, "attempt": attempt, "error_type": type(e).__name__}
                )
                logger.warning(
                    "OpenRouter request error",
                    model=request.model,
                    attempt=attempt,
                    error_type=type(e).__name__,
                    error=str(e)
                )

            except LLMTransportError as e:
                # Malformed body raised by _parse_completion
                last_error = e
                logger.warning(
                    "Malformed OpenRouter response",
                    model=request.model,
                    attempt=attempt,
                    error=e.message
                )

            if attempt < total_attempts:
                backoff = self.backoff_delay(attempt)
                logger.info(
                    "Retrying OpenRouter call after backoff",
                    model=request.model,
                    next_attempt=attempt + 1,
                    backoff_seconds=backoff
                )
                await asyncio.sleep(backoff)

        assert last_error is not None
        logger.error(
            "OpenRouter call exhausted retries",
            model=request.model,
            attempts=total_attempts,
            error=last_error.message
        )
        raise last_error

    def _parse_completion(
        self,
        response: httpx.Response,
        request: LLMGenerationRequest,
        start_time: float,
        attempt: int,
    ) -> LLMGenerationResponse:
        """Extract content and usage from a 2xx completion response."""
        try:
            data = response.json()
        except ValueError as e:
            raise LLMTransportError(
                "Invalid JSON response from OpenRouter API",
                details={"model": request.model, "parse_error": str(e)}
            ) from e

        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMTransportError(
                "Invalid OpenRouter API response",
                details={"model": request.model, "missing": str(e)}
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise LLMTransportError(
                "Empty completion content from OpenRouter API",
                details={"model": request.model}
            )

        latency_ms = int((time.monotonic() - start_time) * 1000)
        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        model_version = data.get("model")
        if not isinstance(model_version, str) or not model_version:
            model_version = request.model

        logger.debug(
            "OpenRouter generation successful",
            model=request.model,
            latency_ms=latency_ms,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            attempt=attempt
        )

        try:
            return LLMGenerationResponse(
                content=content,
                model_version=model_version,
                finish_reason=choice.get("finish_reason"),
                prompt_tokens=usage.get("prompt_tokens"),
                completion_tokens=usage.get("completion_tokens"),
                latency_ms=latency_ms,
                raw_metadata={"id": data.get("id"), "provider": data.get("provider")},
            )
        except (AttributeError, TypeError, PydanticValidationError) as e:
            raise LLMTransportError(
                "Malformed OpenRouter API response metadata",
                details={"model": request.model, "error": str(e)[:500]}
            ) from e

    async def list_models(self) -> list[Dict[str, Any]]:
        """
        Fetch the full model catalog via GET /models.

        Returns:
            Raw model dicts (id, name, architecture, pricing, top_provider, ...)
        """
        try:
            client = await self._get_client()
            response = await client.get(
                "/models",
                headers=self._headers(),
                timeout=CATALOG_TIMEOUT_SECONDS
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise LLMTransportError(
                f"Failed to list models: {e.response.status_code}",
                details={"status": e.response.status_code}
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise LLMTransportError(
                f"Failed to list models: {str(e)}",
                details={"error_type": type(e).__name__}
            ) from e

        models = data.get("data") if isinstance(data, dict) else None
        if not isinstance(models, list):
            raise LLMTransportError(
                "Malformed model catalog: 'data' is not a list",
                details={"type": type(models).__name__}
            )

        logger.debug("Listed catalog models", count=len(models))
        return models

    async def close(self):
        """Close the HTTP client connection if this client created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed OpenRouter client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
