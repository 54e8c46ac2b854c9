"""
LLM-specific data models for the request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with the inference backend. They are separate from Classification so the
transport adapter can change without touching validation or the engine.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ticket_classifier.models.enums import InvocationStatus
from ticket_classifier.models.output_models import Classification


class LLMGenerationRequest(BaseModel):
    """Standardized chat-completion request sent to any client implementation."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Complete prompt text (sent as a single user message)")
    model: str = Field(..., description="Model identifier (e.g., 'qwen/qwen3-coder:free')")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=1000, ge=1, le=8192, description="Maximum tokens to generate")
    json_mode: bool = Field(default=True, description="Request a JSON object response format")


class LLMGenerationResponse(BaseModel):
    """
    Raw response from one generation call.

    Validation of the content happens in the validation layer.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text (expected to be a JSON object)")
    model_version: str = Field(..., description="Model reported by the backend")
    finish_reason: Optional[str] = Field(default=None, description="Why generation stopped")
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Call latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(default_factory=dict, description="Provider-specific metadata")


class ModelDescriptor(BaseModel):
    """A discovered candidate model, ranked for fallback use."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Model identifier")
    display_name: str = Field(..., description="Human-readable model name")
    ranking_score: int = Field(..., ge=0, description="Context + completion + popularity score")
    context_length: int = Field(default=0, ge=0, description="Context window in tokens")


@dataclass(frozen=True)
class InvocationOutcome:
    """
    Result of invoking one model for one prompt.

    Anticipated failures (bad output, transport, throttle) are values of this
    type rather than exceptions, so every fallback tier has to look at them.
    """

    status: InvocationStatus
    model_id: str
    classification: Optional[Classification] = None
    error: Optional[Exception] = None
    latency_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status is InvocationStatus.SUCCESS and self.classification is not None

    @property
    def rate_limited(self) -> bool:
        return self.status is InvocationStatus.RATE_LIMITED
