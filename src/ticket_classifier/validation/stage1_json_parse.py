"""
Stage 1: JSON Parse Validation.

Parse raw model response content (string) into a Python dict. Some free
models wrap the object in a markdown code fence despite the JSON response
format; the fence is stripped before parsing.
"""

import json
import re

import structlog

from ticket_classifier.monitoring.metrics import validation_failures_total
from .exceptions import JSONParseError

logger = structlog.get_logger(__name__)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(content: str) -> str:
    """Return the body of a ```json ... ``` block, or the stripped content unchanged."""
    stripped = content.strip()
    match = _FENCE_PATTERN.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


class Stage1JSONParse:
    """
    Stage 1 validator: Parse JSON string to dict.

    Raises JSONParseError on malformed JSON.
    """

    def validate(self, content: str) -> dict:
        """
        Parse JSON content from a model response.

        Args:
            content: Raw message content from the completion

        Returns:
            Parsed dict representation

        Raises:
            JSONParseError: If content is not a JSON object
        """
        if not content or not content.strip():
            validation_failures_total.labels(
                stage="stage1", error_type="empty_content"
            ).inc()
            raise JSONParseError(
                "Model response content is empty or whitespace-only",
                raw_content=content,
                parse_error="Empty content"
            )

        body = strip_code_fence(content)

        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as e:
            validation_failures_total.labels(
                stage="stage1", error_type="json_decode_error"
            ).inc()
            raise JSONParseError(
                f"Failed to parse model response as JSON: {e.msg}",
                raw_content=content,
                parse_error=f"{e.msg} at line {e.lineno} col {e.colno}"
            ) from e

        if not isinstance(parsed, dict):
            validation_failures_total.labels(
                stage="stage1", error_type="not_json_object"
            ).inc()
            raise JSONParseError(
                f"Model response is not a JSON object (got {type(parsed).__name__})",
                raw_content=content,
                parse_error=f"Expected dict, got {type(parsed).__name__}"
            )

        logger.debug("Stage 1: parsed JSON object", keys=len(parsed))
        return parsed
