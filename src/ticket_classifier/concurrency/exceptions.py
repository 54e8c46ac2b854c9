"""
Executor-level exceptions.
"""


class BatchExecutionError(Exception):
    """
    The batch could not be attempted at all.

    Raised for structural problems (no primary model, governor reporting a
    wave size below 1), never for a single record's failure.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
