"""
API-specific request and response models for FastAPI endpoints.

These wrap the core domain models (TicketRecord, Classification) with
batch and status metadata.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.llm_models import ModelDescriptor
from ticket_classifier.models.output_models import Classification


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BatchClassifyRequest(BaseModel):
    """Request for batch classification."""

    records: list[TicketRecord] = Field(
        description="Tickets to classify, results come back in the same order",
        min_length=1,
        max_length=500
    )
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Overall deadline in seconds (default: AI_BATCH_TIMEOUT)"
    )


class BatchClassifyResponse(BaseModel):
    """Response for batch classification."""

    results: list[Classification] = Field(
        description="One classification per input record, index-aligned"
    )
    total: int = Field(ge=0, description="Number of results")
    degraded: int = Field(ge=0, description="Results that are fallback placeholders")
    processing_time_ms: int = Field(ge=0)


class DiscoveredModelsResponse(BaseModel):
    """Ranked free models currently available for fallback."""

    models: list[ModelDescriptor]
    count: int = Field(ge=0)


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded", "unhealthy"]
    )
    version: str = Field(description="Service version", examples=["0.1.0"])
    services: dict[str, str] = Field(
        description="Dependency health",
        examples=[{"openrouter": "ok", "cache": "ok"}]
    )
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(
        description="Error code",
        examples=["all_models_failed", "llm_transport_failed", "internal_error"]
    )
    message: str
    details: Optional[dict] = None
    timestamp: datetime = Field(default_factory=_utcnow)
