"""
FastAPI dependency injection for the ticket classifier.

Every collaborator of the engine is a process-wide singleton: the HTTP client
and the cache store hold connection pools, the governor and the cache metrics
hold state that must be shared across requests.
"""

from functools import lru_cache

from ticket_classifier.cache.metrics import CacheMetrics
from ticket_classifier.cache.semantic_cache import SemanticCache
from ticket_classifier.cache.store import CacheStore, create_cache_store
from ticket_classifier.concurrency.governor import RateLimitGovernor
from ticket_classifier.config import Settings, settings
from ticket_classifier.discovery.service import ModelDiscoveryService
from ticket_classifier.engine.classification_engine import ClassificationEngine
from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.llm.model_client import ModelClient
from ticket_classifier.llm.openrouter_client import OpenRouterClient
from ticket_classifier.llm.prompt_builder import PromptBuilder, create_prompt_builder
from ticket_classifier.validation.pipeline import ValidationPipeline


@lru_cache()
def get_settings() -> Settings:
    return settings


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Singleton OpenRouter client.

    The client keeps an internal connection pool for the life of the process.
    """
    config = get_settings()
    return OpenRouterClient(
        base_url=config.OPENROUTER_BASE_URL,
        api_key=config.OPENROUTER_API_KEY,
        timeout=config.AI_TIMEOUT_PER_MODEL,
        max_retries=config.AI_MAX_RETRIES,
        backoff_base=config.AI_RETRY_BACKOFF_BASE,
        app_url=config.OPENROUTER_APP_URL,
        app_title=config.OPENROUTER_APP_TITLE,
    )


@lru_cache()
def get_cache_store() -> CacheStore:
    return create_cache_store(get_settings())


@lru_cache()
def get_cache_metrics() -> CacheMetrics:
    return CacheMetrics()


@lru_cache()
def get_semantic_cache() -> SemanticCache:
    return SemanticCache(
        store=get_cache_store(),
        ttl_seconds=get_settings().CACHE_TTL_SECONDS,
        metrics=get_cache_metrics(),
    )


@lru_cache()
def get_governor() -> RateLimitGovernor:
    return RateLimitGovernor.from_settings(get_settings())


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """Loads the selected prompt template once."""
    return create_prompt_builder(get_settings())


@lru_cache()
def get_model_client() -> ModelClient:
    config = get_settings()
    return ModelClient(
        llm_client=get_llm_client(),
        governor=get_governor(),
        validation_pipeline=ValidationPipeline(),
        temperature=config.LLM_TEMPERATURE,
        max_tokens=config.LLM_MAX_TOKENS,
    )


@lru_cache()
def get_discovery_service() -> ModelDiscoveryService:
    return ModelDiscoveryService.from_settings(
        get_settings(),
        llm_client=get_llm_client(),
        store=get_cache_store(),
    )


@lru_cache()
def get_engine() -> ClassificationEngine:
    return ClassificationEngine.from_settings(
        get_settings(),
        model_client=get_model_client(),
        prompt_builder=get_prompt_builder(),
        governor=get_governor(),
        cache=get_semantic_cache(),
        discovery=get_discovery_service(),
    )
