"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Bodies always carry
{error, message, timestamp}.
"""

from datetime import datetime, timezone

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from ticket_classifier.engine.exceptions import AllModelsFailedError
from ticket_classifier.llm.exceptions import LLMTimeoutError, LLMTransportError
from ticket_classifier.validation.exceptions import ValidationError

logger = structlog.get_logger(__name__)


def _error_body(error: str, message: str, details: dict | None = None) -> dict:
    body = {
        "error": error,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        body["details"] = details
    return body


async def all_models_failed_handler(request: Request, exc: AllModelsFailedError) -> JSONResponse:
    """
    Every model in the roster failed.

    Maps to 503 Service Unavailable (temporary failure).
    """
    logger.error(
        "All models failed",
        issue_key=exc.issue_key,
        attempted_models=exc.attempted_models,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_body("all_models_failed", exc.message, exc.details),
    )


async def llm_transport_error_handler(request: Request, exc: LLMTransportError) -> JSONResponse:
    """Upstream failure. Maps to 502 Bad Gateway."""
    logger.error("LLM transport error", error=exc.message, details=exc.details)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body("llm_transport_failed", "Unable to reach the inference backend"),
    )


async def llm_timeout_error_handler(request: Request, exc: LLMTimeoutError) -> JSONResponse:
    """Upstream timeout. Maps to 504 Gateway Timeout."""
    logger.error("LLM timeout error", error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content=_error_body("llm_timeout", "Inference backend request timed out"),
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Invalid model response. Maps to 422 Unprocessable Entity."""
    logger.warning("Validation error", error_type=type(exc).__name__, details=exc.details)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("validation_failed", exc.message, exc.details),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else. Maps to 500 Internal Server Error."""
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_error", "An unexpected error occurred"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    AllModelsFailedError: all_models_failed_handler,
    LLMTimeoutError: llm_timeout_error_handler,
    LLMTransportError: llm_transport_error_handler,
    ValidationError: validation_error_handler,
    Exception: generic_error_handler,
}
