"""
Unit tests for API request/response models.
"""

import pytest
from pydantic import ValidationError

from ticket_classifier.api.models import (
    BatchClassifyRequest,
    BatchClassifyResponse,
    ErrorResponse,
    HealthResponse,
)
from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.output_models import Classification


def test_batch_request_accepts_records():
    request = BatchClassifyRequest(records=[{"issue_key": "SUP-1", "summary": "VPN down"}])

    assert isinstance(request.records[0], TicketRecord)
    assert request.timeout is None


def test_batch_request_rejects_empty_list():
    with pytest.raises(ValidationError):
        BatchClassifyRequest(records=[])


def test_batch_request_rejects_oversized_batch():
    records = [{"issue_key": f"SUP-{i}"} for i in range(501)]

    with pytest.raises(ValidationError):
        BatchClassifyRequest(records=records)


@pytest.mark.parametrize("timeout", [0, -1.5])
def test_batch_request_rejects_non_positive_timeout(timeout):
    with pytest.raises(ValidationError):
        BatchClassifyRequest(records=[{"issue_key": "SUP-1"}], timeout=timeout)


def test_ticket_record_requires_issue_key():
    with pytest.raises(ValidationError):
        TicketRecord(issue_key="", summary="x")


def test_batch_response_model():
    response = BatchClassifyResponse(
        results=[Classification.fallback()],
        total=1,
        degraded=1,
        processing_time_ms=12,
    )

    data = response.model_dump(mode="json")
    assert data["results"][0]["model_used"] == "fallback"
    assert data["results"][0]["category"] == "General"


def test_health_response_has_timestamp():
    response = HealthResponse(status="healthy", version="0.1.0", services={"openrouter": "ok"})

    assert response.timestamp.tzinfo is not None


def test_error_response_model():
    response = ErrorResponse(error="all_models_failed", message="All models failed for SUP-1")

    assert response.details is None
    assert response.timestamp is not None
