"""
Pydantic data models for the ticket classifier.

Includes:
- Input models (TicketRecord)
- Output models (Classification, ProcessingStats, CacheMetricsSnapshot)
- Enums (CategoryEnum, SentimentEnum, LevelEnum, InvocationStatus)
- LLM models (LLMGenerationRequest, LLMGenerationResponse, ModelDescriptor, InvocationOutcome)
"""

from ticket_classifier.models.enums import (
    CategoryEnum,
    InvocationStatus,
    LevelEnum,
    SentimentEnum,
)
from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.llm_models import (
    InvocationOutcome,
    LLMGenerationRequest,
    LLMGenerationResponse,
    ModelDescriptor,
)
from ticket_classifier.models.output_models import (
    FALLBACK_MODEL,
    CacheMetricsSnapshot,
    Classification,
    ProcessingStats,
)

__all__ = [
    # Enums
    "CategoryEnum",
    "SentimentEnum",
    "LevelEnum",
    "InvocationStatus",
    # Input models
    "TicketRecord",
    # Output models
    "Classification",
    "ProcessingStats",
    "CacheMetricsSnapshot",
    "FALLBACK_MODEL",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    "ModelDescriptor",
    "InvocationOutcome",
]
