"""
Adaptive concurrency: the rate-limit governor and the wave executor.
"""

from ticket_classifier.concurrency.governor import ConcurrencyState, RateLimitGovernor
from ticket_classifier.concurrency.executor import ConcurrentBatchExecutor

__all__ = [
    "ConcurrencyState",
    "RateLimitGovernor",
    "ConcurrentBatchExecutor",
]
