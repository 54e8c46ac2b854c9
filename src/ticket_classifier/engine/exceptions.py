"""
Engine-level exceptions.

AllModelsFailedError is the only failure classify() lets out; classify_batch()
converts it into a degraded placeholder.
"""

from ticket_classifier.concurrency.exceptions import BatchExecutionError


class AllModelsFailedError(Exception):
    """Every static and discovered model failed for one ticket."""

    def __init__(self, issue_key: str, attempted_models: list[str]):
        self.issue_key = issue_key
        self.attempted_models = list(attempted_models)
        self.message = (
            f"All AI models failed to classify ticket {issue_key} "
            f"({len(self.attempted_models)} attempted)"
        )
        self.details = {"issue_key": issue_key, "attempted_models": self.attempted_models}
        super().__init__(self.message)


__all__ = ["AllModelsFailedError", "BatchExecutionError"]
