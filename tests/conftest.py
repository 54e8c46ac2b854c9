"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
import pytest
from pathlib import Path
from typing import Any, Dict

from ticket_classifier.config import Settings
from ticket_classifier.models.input_models import TicketRecord


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.AI_CONCURRENT_REQUESTS = 2
    """
    return Settings(
        # === Application ===
        APP_NAME="Ticket Classifier (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === OpenRouter ===
        OPENROUTER_BASE_URL="https://openrouter.test/api/v1",
        OPENROUTER_API_KEY="test-key",
        AI_DEFAULT_MODELS=["primary/model:free", "secondary/model:free"],
        AI_MAX_RETRIES=0,
        AI_RETRY_BACKOFF_BASE=0.0,

        # === Cache ===
        CACHE_BACKEND="memory",
        REDIS_URL="redis://localhost:6379/15",
        REDIS_MAX_CONNECTIONS=10,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_catalog(fixtures_dir: Path) -> list[Dict[str, Any]]:
    """Load the sample GET /models catalog as a list of raw model dicts."""
    with open(fixtures_dir / "openrouter_models.json") as f:
        return json.load(f)["data"]


@pytest.fixture
def create_test_record():
    """Factory fixture to create TicketRecord with custom values.

    Usage:
        def test_something(create_test_record):
            record = create_test_record(summary="VPN is down")
    """
    def _create(
        issue_key: str = "SUP-1",
        summary: str = "Cannot log in to the portal",
        description: str = "Login fails with error 500 since this morning",
        reporter: str = "jane.doe@example.com",
    ) -> TicketRecord:
        return TicketRecord(
            issue_key=issue_key,
            summary=summary,
            description=description,
            reporter=reporter,
        )

    return _create


@pytest.fixture
def sample_record(create_test_record) -> TicketRecord:
    """Standard TicketRecord for tests."""
    return create_test_record()


@pytest.fixture
def valid_classification_data() -> Dict[str, Any]:
    """Classification payload as a model would return it."""
    return {
        "category": "Technical",
        "sentiment": "Negative",
        "impact": "High",
        "urgency": "Medium",
        "reasoning": "Login outage blocks the reporter",
    }


@pytest.fixture
def valid_classification_json(valid_classification_data: Dict[str, Any]) -> str:
    return json.dumps(valid_classification_data)
