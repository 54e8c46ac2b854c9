"""
Unit tests for ModelClient outcome mapping.
"""

import pytest

from ticket_classifier.llm.exceptions import (
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMTransportError,
)
from ticket_classifier.llm.model_client import ModelClient
from ticket_classifier.models.enums import CategoryEnum, InvocationStatus
from ticket_classifier.validation.exceptions import BusinessRuleViolation, JSONParseError


MODEL = "primary/model:free"


@pytest.fixture
def model_client(mock_llm_client, governor):
    return ModelClient(llm_client=mock_llm_client, governor=governor, temperature=0.2, max_tokens=500)


@pytest.mark.asyncio
async def test_success(model_client, mock_llm_client, governor, make_llm_response, valid_classification_json):
    mock_llm_client.generate.return_value = make_llm_response(valid_classification_json)

    outcome = await model_client.invoke(MODEL, "prompt text")

    assert outcome.succeeded
    assert outcome.status is InvocationStatus.SUCCESS
    assert outcome.classification.category == CategoryEnum.TECHNICAL
    assert outcome.classification.model_used == MODEL
    assert governor.snapshot().requests_in_window == 1

    request = mock_llm_client.generate.await_args.args[0]
    assert request.model == MODEL
    assert request.prompt == "prompt text"
    assert request.temperature == 0.2
    assert request.max_tokens == 500
    assert request.json_mode is True


@pytest.mark.asyncio
async def test_fenced_json_accepted(model_client, mock_llm_client, make_llm_response, valid_classification_json):
    mock_llm_client.generate.return_value = make_llm_response(f"```json\n{valid_classification_json}\n```")

    outcome = await model_client.invoke(MODEL, "prompt text")

    assert outcome.succeeded


@pytest.mark.asyncio
async def test_rate_limited(model_client, mock_llm_client, governor):
    mock_llm_client.generate.side_effect = LLMRateLimitError("Rate limit exceeded", retry_after=3.0)

    outcome = await model_client.invoke(MODEL, "prompt text")

    assert outcome.rate_limited
    assert not outcome.succeeded
    assert outcome.classification is None
    assert isinstance(outcome.error, LLMRateLimitError)
    # The signal is recorded; shrinking is left to the caller
    assert governor.is_throttled() is True
    assert governor.current_concurrency() == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    LLMTransportError("OpenRouter API error: 502"),
    LLMTimeoutError("Request timeout after 10.0s"),
    LLMModelNotAvailableError("Model not found"),
])
async def test_transport_failures(model_client, mock_llm_client, governor, error):
    mock_llm_client.generate.side_effect = error

    outcome = await model_client.invoke(MODEL, "prompt text")

    assert outcome.status is InvocationStatus.TRANSPORT_FAILED
    assert outcome.error is error
    assert governor.is_throttled() is False
    assert governor.snapshot().requests_in_window == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("content,error_type", [
    ("I think this is a billing ticket", JSONParseError),
    ('{"category": "Sales", "sentiment": "Neutral", "impact": "Low", "urgency": "Low", "reasoning": "x"}',
     BusinessRuleViolation),
])
async def test_invalid_output(model_client, mock_llm_client, make_llm_response, content, error_type):
    mock_llm_client.generate.return_value = make_llm_response(content)

    outcome = await model_client.invoke(MODEL, "prompt text")

    assert outcome.status is InvocationStatus.VALIDATION_FAILED
    assert isinstance(outcome.error, error_type)


@pytest.mark.asyncio
async def test_unexpected_errors_propagate(model_client, mock_llm_client):
    mock_llm_client.generate.side_effect = RuntimeError("bug")

    with pytest.raises(RuntimeError):
        await model_client.invoke(MODEL, "prompt text")
