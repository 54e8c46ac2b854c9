"""
Validation-specific exceptions for the staged response validation pipeline.

The model client catches these and turns them into a validation_failed
outcome. A response that fails validation is never retried on the same model;
the engine moves on to the next model in the roster.
"""

from typing import Any


class ValidationError(Exception):
    """
    Base exception for all validation errors.

    Raised by Stages 1-3 and by final model construction.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(ValidationError):
    """
    Stage 1: JSON parsing failed.

    Raised when response content is empty, not JSON, or not a JSON object.
    """

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        details = {}
        if raw_content:
            # First 500 chars only
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details)


class SchemaValidationError(ValidationError):
    """
    Stage 2: JSON Schema validation failed.

    Raised when the parsed object misses required fields or carries wrong types.
    """

    def __init__(self, message: str, validation_errors: list[str] | None = None):
        details = {}
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(message, details)


class BusinessRuleViolation(ValidationError):
    """
    Stage 3: a field holds a value outside its closed set.

    Examples: category "Sales", sentiment "Angry", impact "Critical".
    """

    def __init__(
        self,
        message: str,
        rule_name: str | None = None,
        invalid_value: Any | None = None,
        expected_values: list[str] | None = None,
        field_path: str | None = None
    ):
        """
        Initialize business rule violation.

        Args:
            message: Error description
            rule_name: Name of the violated rule (e.g., "category_in_enum")
            invalid_value: The value that caused the violation
            expected_values: Valid values for the field
            field_path: Offending field name
        """
        details = {}
        if rule_name:
            details["rule_name"] = rule_name
        if invalid_value is not None:
            details["invalid_value"] = str(invalid_value)
        if expected_values:
            details["expected_values"] = expected_values
        if field_path:
            details["field_path"] = field_path

        super().__init__(message, details)
