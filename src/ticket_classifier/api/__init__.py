"""
FastAPI API routes and endpoints.

- routes.py: classify, batch classify, stats, discovery, cache metrics, health
- dependencies.py: Singleton wiring of the engine and its collaborators
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request id tracing
"""

from ticket_classifier.api import dependencies, error_handlers, models
from ticket_classifier.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
