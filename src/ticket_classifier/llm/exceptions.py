"""
Custom exceptions for the LLM client layer.

These exceptions let the model client distinguish failure modes and map each
one to its recovery tier: transport errors are retried locally, throttles are
escalated to the rate-limit governor, and anything left over sends the engine
to the next model in the roster.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMTransportError(LLMClientError):
    """
    Raised when a call to the inference backend fails at the transport level.

    Non-2xx responses, malformed bodies, connection errors. The client retries
    these with exponential backoff before surfacing them.
    """
    pass


class LLMTimeoutError(LLMTransportError):
    """
    Raised when a call exceeds the per-model timeout.

    Separate from generic transport errors so callers can log it distinctly.
    """
    pass


class LLMModelNotAvailableError(LLMTransportError):
    """
    Raised when the requested model does not exist on the backend (HTTP 404).

    Never retried: the engine moves to the next model immediately.
    """
    pass


class LLMRateLimitError(LLMClientError):
    """
    Raised when the backend throttles the request (HTTP 429).

    Surfaced immediately without local retry; the rate-limit governor absorbs
    it by shrinking concurrency and pacing subsequent waves.
    """
    def __init__(self, message: str, details: dict | None = None, retry_after: float | None = None):
        super().__init__(message, details)
        self.retry_after = retry_after
