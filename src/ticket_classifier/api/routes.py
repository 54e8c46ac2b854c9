"""
HTTP routes for the ticket classifier.

Thin adapters over ClassificationEngine and its collaborators; no business
logic lives here.
"""

import time

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ticket_classifier.api.dependencies import (
    get_cache_metrics,
    get_discovery_service,
    get_engine,
    get_llm_client,
    get_semantic_cache,
    get_settings,
)
from ticket_classifier.api.models import (
    BatchClassifyRequest,
    BatchClassifyResponse,
    DiscoveredModelsResponse,
    HealthResponse,
)
from ticket_classifier.cache.metrics import CacheMetrics
from ticket_classifier.cache.semantic_cache import SemanticCache
from ticket_classifier.config import Settings
from ticket_classifier.discovery.service import ModelDiscoveryService
from ticket_classifier.engine.classification_engine import ClassificationEngine
from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.models.input_models import TicketRecord
from ticket_classifier.models.output_models import (
    CacheMetricsSnapshot,
    Classification,
    ProcessingStats,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/classify",
    response_model=Classification,
    summary="Classify a single ticket",
    responses={
        200: {"description": "Classification from cache or a model"},
        503: {"description": "Every model failed"},
    },
)
async def classify_ticket(
    record: TicketRecord,
    engine: ClassificationEngine = Depends(get_engine),
) -> Classification:
    logger.info("Classification request received", issue_key=record.issue_key)
    return await engine.classify(record)


@router.post(
    "/classify/batch",
    response_model=BatchClassifyResponse,
    summary="Classify a batch of tickets",
    description="""
    Always returns one result per input, in input order. Tickets that could
    not be classified carry the fallback placeholder (model_used="fallback")
    and are counted in `degraded`.
    """,
)
async def classify_batch(
    batch: BatchClassifyRequest,
    engine: ClassificationEngine = Depends(get_engine),
) -> BatchClassifyResponse:
    start_time = time.perf_counter()
    logger.info("Batch classification request received", batch_size=len(batch.records))

    results = await engine.classify_batch(batch.records, timeout=batch.timeout)

    return BatchClassifyResponse(
        results=results,
        total=len(results),
        degraded=sum(1 for r in results if r.is_fallback),
        processing_time_ms=int((time.perf_counter() - start_time) * 1000),
    )


@router.get("/stats", response_model=ProcessingStats, summary="Current dispatch pacing")
async def processing_stats(
    engine: ClassificationEngine = Depends(get_engine),
) -> ProcessingStats:
    return engine.get_processing_stats()


@router.get(
    "/models/discovered",
    response_model=DiscoveredModelsResponse,
    summary="Ranked free models available for fallback",
)
async def discovered_models(
    discovery: ModelDiscoveryService = Depends(get_discovery_service),
) -> DiscoveredModelsResponse:
    models = await discovery.list_candidate_models()
    return DiscoveredModelsResponse(models=models, count=len(models))


@router.post(
    "/models/discovered/invalidate",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Forget the cached discovery result",
)
async def invalidate_discovered_models(
    discovery: ModelDiscoveryService = Depends(get_discovery_service),
) -> None:
    await discovery.invalidate_cache()


@router.get("/cache/metrics", response_model=CacheMetricsSnapshot, summary="Semantic cache hit/miss counters")
async def cache_metrics(
    metrics: CacheMetrics = Depends(get_cache_metrics),
) -> CacheMetricsSnapshot:
    return metrics.snapshot()


@router.delete(
    "/cache/metrics",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset semantic cache counters",
)
async def reset_cache_metrics(
    metrics: CacheMetrics = Depends(get_cache_metrics),
) -> None:
    metrics.reset()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={
        200: {"description": "Healthy, or degraded with the backend still reachable"},
        503: {"description": "Inference backend unreachable"},
    },
)
async def health_check(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    cache: SemanticCache = Depends(get_semantic_cache),
    settings: Settings = Depends(get_settings),
):
    services = {
        "openrouter": "ok" if await llm_client.health_check() else "unreachable",
        "cache": "ok" if await cache.is_available() else "unreachable",
    }

    if all(state == "ok" for state in services.values()):
        health_status = "healthy"
        status_code = status.HTTP_200_OK
    elif services["openrouter"] == "ok":
        health_status = "degraded"
        status_code = status.HTTP_200_OK
    else:
        health_status = "unhealthy"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info("Health check", status=health_status, services=services)

    response = HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        services=services,
    )
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
