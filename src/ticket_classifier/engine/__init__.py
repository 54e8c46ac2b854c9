"""
Classification engine and its unrecoverable failures.
"""

from ticket_classifier.engine.classification_engine import ClassificationEngine
from ticket_classifier.engine.exceptions import AllModelsFailedError, BatchExecutionError

__all__ = [
    "ClassificationEngine",
    "AllModelsFailedError",
    "BatchExecutionError",
]
