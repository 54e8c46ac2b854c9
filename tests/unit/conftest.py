"""Unit test fixtures (mocks and stubs).

Provides mock objects and a controllable clock for testing without external
dependencies or real sleeps.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from ticket_classifier.cache.metrics import CacheMetrics
from ticket_classifier.cache.semantic_cache import SemanticCache
from ticket_classifier.cache.store import InMemoryCacheStore
from ticket_classifier.concurrency.governor import RateLimitGovernor
from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.llm.prompt_builder import PromptBuilder
from ticket_classifier.models.llm_models import LLMGenerationResponse


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def in_memory_store(fake_clock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=fake_clock)


@pytest.fixture
def semantic_cache(in_memory_store) -> SemanticCache:
    return SemanticCache(store=in_memory_store, ttl_seconds=1800, metrics=CacheMetrics())


@pytest.fixture
def governor(fake_clock) -> RateLimitGovernor:
    """Governor with the default limits (4 concurrent, 20 RPM, 5s max throttle delay)."""
    return RateLimitGovernor(
        max_concurrency=4,
        rpm_limit=20,
        base_delay_ms=0,
        max_throttle_delay_ms=5000,
        clock=fake_clock,
    )


@pytest.fixture
def mock_llm_client():
    """Mock BaseLLMClient; generate and list_models are AsyncMocks."""
    mock = AsyncMock(spec=BaseLLMClient)
    mock.list_models = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def stub_prompt_builder():
    """Prompt builder that renders 'prompt for <issue_key>'."""
    builder = MagicMock(spec=PromptBuilder)
    builder.build.side_effect = lambda record: f"prompt for {record.issue_key}"
    return builder


@pytest.fixture
def make_llm_response():
    """Factory fixture for LLMGenerationResponse with custom content.

    Usage:
        def test_something(make_llm_response):
            response = make_llm_response('{"category": "Billing", ...}')
    """
    def _create(content: str, model: str = "primary/model:free") -> LLMGenerationResponse:
        return LLMGenerationResponse(
            content=content,
            model_version=model,
            finish_reason="stop",
            prompt_tokens=400,
            completion_tokens=60,
            latency_ms=120,
            raw_metadata={},
        )

    return _create
