"""
FastAPI application entry point for the ticket classifier.
"""

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from ticket_classifier.api.dependencies import get_llm_client
from ticket_classifier.api.error_handlers import EXCEPTION_HANDLERS
from ticket_classifier.api.middleware import RequestTracingMiddleware
from ticket_classifier.api.routes import router
from ticket_classifier.cache.redis_client import RedisClient
from ticket_classifier.config import settings
from ticket_classifier.logging_config import configure_logging

# Configure structured logging before anything logs
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Resilient support ticket classification over free OpenRouter models",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(RequestTracingMiddleware)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, tags=["classification"])


@app.on_event("startup")
async def startup():
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        openrouter_base_url=settings.OPENROUTER_BASE_URL,
        default_models=settings.AI_DEFAULT_MODELS,
        prompt_version=settings.AI_PROMPT_VERSION,
        cache_backend=settings.CACHE_BACKEND,
    )
    if not settings.OPENROUTER_API_KEY:
        logger.warning("OPENROUTER_API_KEY is not set, every model call will fail")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Application shutdown")
    await get_llm_client().close()
    await RedisClient.close_async_pool()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


def run():
    import uvicorn

    uvicorn.run(
        "ticket_classifier.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
