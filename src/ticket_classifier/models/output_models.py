"""
Output data models.

Classification is the structured result returned for every ticket, whether
produced by a model, read from cache, or synthesized as a degraded placeholder.
"""

from pydantic import BaseModel, ConfigDict, Field

from ticket_classifier.models.enums import CategoryEnum, LevelEnum, SentimentEnum

FALLBACK_MODEL = "fallback"
FALLBACK_REASONING = "Fallback classification due to processing failure"


class Classification(BaseModel):
    """
    Validated classification of a single ticket.

    Enum fields reject anything outside their closed set; a model response with
    one bad value is invalid as a whole and is never coerced.
    """

    model_config = ConfigDict(frozen=True)

    category: CategoryEnum = Field(..., description="Ticket category")
    sentiment: SentimentEnum = Field(..., description="Reporter sentiment")
    impact: LevelEnum = Field(..., description="ITIL impact")
    urgency: LevelEnum = Field(..., description="ITIL urgency")
    reasoning: str = Field(..., min_length=1, description="Brief model explanation")
    model_used: str = Field(..., min_length=1, description="Model id, or 'fallback' when synthesized")

    @classmethod
    def fallback(cls) -> "Classification":
        """Degraded placeholder used when no model could classify a ticket."""
        return cls(
            category=CategoryEnum.GENERAL,
            sentiment=SentimentEnum.NEUTRAL,
            impact=LevelEnum.MEDIUM,
            urgency=LevelEnum.MEDIUM,
            reasoning=FALLBACK_REASONING,
            model_used=FALLBACK_MODEL,
        )

    @property
    def is_fallback(self) -> bool:
        return self.model_used == FALLBACK_MODEL


class ProcessingStats(BaseModel):
    """Current dispatch pacing as seen by the rate-limit governor."""

    current_concurrency: int = Field(..., ge=1)
    is_throttled: bool
    recommended_delay_ms: int = Field(..., ge=0)


class CacheMetricsSnapshot(BaseModel):
    """Point-in-time semantic cache counters."""

    hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    total_requests: int = Field(..., ge=0)
    hit_rate: float = Field(..., ge=0.0, le=100.0, description="Percentage, one decimal")
