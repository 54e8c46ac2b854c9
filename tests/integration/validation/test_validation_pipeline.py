"""
Integration tests for the full validation pipeline (stages 1-3 + model construction).
"""

import json

import pytest

from ticket_classifier.models.enums import CategoryEnum, LevelEnum, SentimentEnum
from ticket_classifier.validation import ValidationPipeline
from ticket_classifier.validation.exceptions import (
    BusinessRuleViolation,
    JSONParseError,
    SchemaValidationError,
)


@pytest.fixture
def pipeline() -> ValidationPipeline:
    return ValidationPipeline()


def test_valid_response(pipeline, valid_classification_json):
    classification = pipeline.validate(valid_classification_json, "qwen/qwen3-coder:free")

    assert classification.category is CategoryEnum.TECHNICAL
    assert classification.sentiment is SentimentEnum.NEGATIVE
    assert classification.impact is LevelEnum.HIGH
    assert classification.urgency is LevelEnum.MEDIUM
    assert classification.model_used == "qwen/qwen3-coder:free"
    assert not classification.is_fallback


def test_fenced_response(pipeline, valid_classification_json):
    content = f"```json\n{valid_classification_json}\n```"

    assert pipeline.validate(content, "m").category is CategoryEnum.TECHNICAL


@pytest.mark.parametrize("content,error_type", [
    ("", JSONParseError),
    ("Category: Billing", JSONParseError),
    ('["Billing"]', JSONParseError),
    (json.dumps({"category": "Billing"}), SchemaValidationError),
])
def test_structural_failures(pipeline, content, error_type):
    with pytest.raises(error_type):
        pipeline.validate(content, "m")


def test_one_bad_value_rejects_whole_response(pipeline, valid_classification_data):
    content = json.dumps({**valid_classification_data, "sentiment": "Furious"})

    with pytest.raises(BusinessRuleViolation) as exc_info:
        pipeline.validate(content, "m")

    assert exc_info.value.details["field_path"] == "sentiment"
