"""
Auto-discovery of free fallback models from the backend catalog.
"""

from ticket_classifier.discovery.catalog import filter_and_rank, is_free_model, ranking_score
from ticket_classifier.discovery.service import ModelDiscoveryService

__all__ = [
    "ModelDiscoveryService",
    "filter_and_rank",
    "is_free_model",
    "ranking_score",
]
