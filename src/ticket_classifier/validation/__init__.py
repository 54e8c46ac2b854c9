"""
Staged validation of model responses.

- pipeline.py: Orchestrator for all validation stages
- stage1_json_parse.py: JSON parsing (code fences stripped)
- stage2_schema.py: JSON Schema validation (required fields, string types)
- stage3_business_rules.py: Closed enum sets for category/sentiment/impact/urgency
"""

from .exceptions import (
    ValidationError,
    JSONParseError,
    SchemaValidationError,
    BusinessRuleViolation,
)
from .pipeline import ValidationPipeline

__all__ = [
    "ValidationPipeline",
    "ValidationError",
    "JSONParseError",
    "SchemaValidationError",
    "BusinessRuleViolation",
]
