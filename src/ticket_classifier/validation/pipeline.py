"""
Validation Pipeline: staged validation of one model response.

- Stage 1: JSON Parse
- Stage 2: JSON Schema
- Stage 3: Business Rules (closed enum sets)
- Model construction: Classification stamped with the model id

Every stage raises a ValidationError subclass; the first failure rejects the
whole response.
"""

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..models.output_models import Classification
from .exceptions import SchemaValidationError, ValidationError
from .stage1_json_parse import Stage1JSONParse
from .stage2_schema import Stage2SchemaValidation
from .stage3_business_rules import Stage3BusinessRules

logger = structlog.get_logger(__name__)


class ValidationPipeline:
    """
    Multi-stage validation pipeline orchestrator.

    Turns raw completion text into a Classification or raises.
    """

    def __init__(self):
        self.stage1 = Stage1JSONParse()
        self.stage2 = Stage2SchemaValidation()
        self.stage3 = Stage3BusinessRules()

    def validate(self, content: str, model_id: str) -> Classification:
        """
        Run the full pipeline on one completion.

        Args:
            content: Raw message content returned by the model
            model_id: Model that produced it (becomes Classification.model_used)

        Returns:
            Validated Classification

        Raises:
            ValidationError: If any stage fails
        """
        try:
            parsed = self.stage1.validate(content)
            self.stage2.validate(parsed)
            self.stage3.validate(parsed)

            try:
                classification = Classification(
                    category=parsed["category"],
                    sentiment=parsed["sentiment"],
                    impact=parsed["impact"],
                    urgency=parsed["urgency"],
                    reasoning=parsed["reasoning"],
                    model_used=model_id,
                )
            except PydanticValidationError as e:
                error_messages = [
                    f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ]
                raise SchemaValidationError(
                    f"Pydantic model validation failed: {len(e.errors())} error(s)",
                    validation_errors=error_messages
                ) from e

        except ValidationError as e:
            logger.info(
                "Model response rejected",
                model=model_id,
                error_type=type(e).__name__,
                error=e.message
            )
            raise

        logger.debug("Model response validated", model=model_id, category=classification.category.value)
        return classification
