"""
Stage 2: JSON Schema Validation.

Check that the parsed object carries every classification field as a string.
Enum membership is left to Stage 3 so the error names the offending value.
"""

import structlog
from jsonschema import Draft7Validator

from ticket_classifier.monitoring.metrics import validation_failures_total
from .exceptions import SchemaValidationError

logger = structlog.get_logger(__name__)


CLASSIFICATION_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "TicketClassification",
    "type": "object",
    "required": ["category", "sentiment", "impact", "urgency", "reasoning"],
    "properties": {
        "category": {"type": "string"},
        "sentiment": {"type": "string"},
        "impact": {"type": "string"},
        "urgency": {"type": "string"},
        "reasoning": {"type": "string", "minLength": 1},
    },
}


class Stage2SchemaValidation:
    """
    Stage 2 validator: Validate against the classification JSON Schema.

    Raises SchemaValidationError on schema violations.
    """

    def __init__(self, schema: dict | None = None):
        self.schema = schema or CLASSIFICATION_SCHEMA
        Draft7Validator.check_schema(self.schema)
        self._validator = Draft7Validator(self.schema)

    def validate(self, data: dict) -> None:
        """
        Validate data against the JSON Schema.

        Args:
            data: Parsed JSON dict to validate

        Raises:
            SchemaValidationError: If data doesn't conform to schema
        """
        errors = list(self._validator.iter_errors(data))

        if errors:
            error_messages = []
            for error in errors[:10]:
                path = ".".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            validation_failures_total.labels(
                stage="stage2", error_type="schema_violation"
            ).inc()
            raise SchemaValidationError(
                f"JSON Schema validation failed with {len(errors)} error(s)",
                validation_errors=error_messages
            )

        logger.debug("Stage 2: validated against JSON Schema")
