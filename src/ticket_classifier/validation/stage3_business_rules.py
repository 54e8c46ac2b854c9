"""
Stage 3: Business Rules Validation.

Every enumerated field must hold a value from its closed set:
- category in CategoryEnum
- sentiment in SentimentEnum
- impact and urgency in LevelEnum

One bad value invalidates the whole response. Values are never coerced
(no case folding, no nearest match).
"""

from enum import Enum
from typing import Type

import structlog

from ticket_classifier.monitoring.metrics import validation_failures_total
from ..models.enums import CategoryEnum, LevelEnum, SentimentEnum
from .exceptions import BusinessRuleViolation

logger = structlog.get_logger(__name__)


ENUM_FIELDS: dict[str, Type[Enum]] = {
    "category": CategoryEnum,
    "sentiment": SentimentEnum,
    "impact": LevelEnum,
    "urgency": LevelEnum,
}


class Stage3BusinessRules:
    """
    Stage 3 validator: closed-set enforcement.

    Raises BusinessRuleViolation on the first field outside its set.
    """

    def validate(self, data: dict) -> None:
        """
        Validate enumerated fields of a schema-valid response.

        Args:
            data: Parsed, schema-validated response dict

        Raises:
            BusinessRuleViolation: If any field holds an unknown value
        """
        for field_name, enum_cls in ENUM_FIELDS.items():
            self._validate_enum_field(data, field_name, enum_cls)

        logger.debug("Stage 3: all business rules validated")

    def _validate_enum_field(self, data: dict, field_name: str, enum_cls: Type[Enum]) -> None:
        valid_values = [member.value for member in enum_cls]
        value = data.get(field_name)

        if value not in valid_values:
            validation_failures_total.labels(
                stage="stage3", error_type=f"invalid_{field_name}"
            ).inc()
            raise BusinessRuleViolation(
                f"{field_name.capitalize()} value '{value}' is not in {enum_cls.__name__}",
                rule_name=f"{field_name}_in_enum",
                invalid_value=value,
                expected_values=valid_values,
                field_path=field_name
            )
