"""
Enumerations for classification output.

All enums are closed taxonomies - values outside these sets invalidate the
whole classification.
"""

from enum import Enum


class CategoryEnum(str, Enum):
    """Ticket category (single-label)."""

    TECHNICAL = "Technical"
    COMMERCIAL = "Commercial"
    BILLING = "Billing"
    GENERAL = "General"
    SUPPORT = "Support"


class SentimentEnum(str, Enum):
    """Reporter sentiment (single-label)."""

    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


class LevelEnum(str, Enum):
    """Three-step scale shared by ITIL impact and urgency."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class InvocationStatus(str, Enum):
    """Outcome kind of a single model invocation."""

    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    TRANSPORT_FAILED = "transport_failed"
    RATE_LIMITED = "rate_limited"
