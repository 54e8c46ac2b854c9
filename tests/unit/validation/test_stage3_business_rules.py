"""
Unit tests for Stage 3: Business Rules Validation.
"""

import pytest

from ticket_classifier.validation.exceptions import BusinessRuleViolation
from ticket_classifier.validation.stage3_business_rules import Stage3BusinessRules


class TestStage3BusinessRules:
    """Test suite for Stage 3 closed-set enforcement."""

    def setup_method(self):
        """Setup test fixtures."""
        self.stage3 = Stage3BusinessRules()

    def test_valid_values(self, valid_classification_data):
        self.stage3.validate(valid_classification_data)

    @pytest.mark.parametrize("field,value", [
        ("category", "Sales"),
        ("sentiment", "Angry"),
        ("impact", "Critical"),
        ("urgency", "ASAP"),
    ])
    def test_value_outside_closed_set(self, valid_classification_data, field, value):
        with pytest.raises(BusinessRuleViolation) as exc_info:
            self.stage3.validate({**valid_classification_data, field: value})

        details = exc_info.value.details
        assert details["rule_name"] == f"{field}_in_enum"
        assert details["invalid_value"] == value
        assert details["field_path"] == field

    def test_values_are_not_case_folded(self, valid_classification_data):
        """Test that 'technical' is rejected; values are never coerced."""
        with pytest.raises(BusinessRuleViolation):
            self.stage3.validate({**valid_classification_data, "category": "technical"})

    def test_expected_values_listed(self, valid_classification_data):
        with pytest.raises(BusinessRuleViolation) as exc_info:
            self.stage3.validate({**valid_classification_data, "urgency": "Critical"})

        assert exc_info.value.details["expected_values"] == ["Low", "Medium", "High"]
