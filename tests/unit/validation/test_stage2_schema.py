"""
Unit tests for Stage 2: JSON Schema Validation.
"""

import pytest

from ticket_classifier.validation.exceptions import SchemaValidationError
from ticket_classifier.validation.stage2_schema import Stage2SchemaValidation


class TestStage2SchemaValidation:
    """Test suite for Stage 2 schema validation."""

    def setup_method(self):
        """Setup test fixtures."""
        self.stage2 = Stage2SchemaValidation()

    def test_valid_payload(self, valid_classification_data):
        self.stage2.validate(valid_classification_data)

    def test_extra_fields_allowed(self, valid_classification_data):
        self.stage2.validate({**valid_classification_data, "confidence": 0.9})

    @pytest.mark.parametrize("missing", ["category", "sentiment", "impact", "urgency", "reasoning"])
    def test_missing_field(self, valid_classification_data, missing):
        data = dict(valid_classification_data)
        del data[missing]

        with pytest.raises(SchemaValidationError) as exc_info:
            self.stage2.validate(data)

        errors = exc_info.value.details["validation_errors"]
        assert any(missing in e for e in errors)

    def test_wrong_type(self, valid_classification_data):
        with pytest.raises(SchemaValidationError) as exc_info:
            self.stage2.validate({**valid_classification_data, "impact": 3})

        assert exc_info.value.details["validation_errors"][0].startswith("impact:")

    def test_empty_reasoning(self, valid_classification_data):
        with pytest.raises(SchemaValidationError):
            self.stage2.validate({**valid_classification_data, "reasoning": ""})

    def test_all_errors_reported(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            self.stage2.validate({})

        assert "5 error(s)" in exc_info.value.message

    def test_custom_schema(self):
        stage2 = Stage2SchemaValidation(schema={"type": "object", "required": ["label"]})

        stage2.validate({"label": "x"})
        with pytest.raises(SchemaValidationError):
            stage2.validate({})
